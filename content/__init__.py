"""content

Text-facing collaborators for the engine (command parsing).
"""
