"""core

UI-independent domain for the relay survival game.
"""

API_VERSION = "core-relay-v1"
