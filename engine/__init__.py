"""engine

Headless game flow for the relay survival game.
"""

from .pipeline import new_game, step

__all__ = ["new_game", "step"]
