"""Chesseval — sequential engine evaluation of the positions of a game."""

__version__ = "0.1.0"
