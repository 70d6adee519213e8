"""
Board Module - Builds the graph a game is played on.
"""

from .generators import BoardGenerator, EmptyBoardGenerator, StandardBoardGenerator

__all__ = [
    "BoardGenerator",
    "EmptyBoardGenerator",
    "StandardBoardGenerator",
]
