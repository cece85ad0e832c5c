"""Core enumerations for the evaluation domain."""

from __future__ import annotations

from enum import StrEnum


class Side(StrEnum):
    """Side color, rendered the way evaluation texts name the winner."""

    WHITE = "White"
    BLACK = "Black"

    @classmethod
    def from_fen_field(cls, field: str) -> Side:
        """Parse the FEN side-to-move field (``w`` or ``b``)."""
        if field == "w":
            return cls.WHITE
        if field == "b":
            return cls.BLACK
        raise ValueError(f"Invalid FEN side-to-move field: {field!r}")
