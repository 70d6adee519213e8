"""
Games module - Ready-made game setups.

Each setup wires a board generator, a seeded RNG and the engine with
validated defaults.
"""

from .standard import create_standard_game, build_default_players

__all__ = [
    "create_standard_game",
    "build_default_players",
]
