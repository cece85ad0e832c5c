"""Immutable board position handed to the engine."""

from __future__ import annotations

from dataclasses import dataclass

from chesseval.core.enums import Side

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


@dataclass(slots=True, frozen=True)
class Position:
    """A FEN string plus the side to move derived from it.

    Only the structure the engine needs is checked here: the FEN must be a
    single line and carry a valid side-to-move field. Full legality is the
    rules layer's job (see :mod:`chesseval.core.replay`).
    """

    fen: str

    def __post_init__(self) -> None:
        if "\n" in self.fen or "\r" in self.fen:
            raise ValueError(f"FEN must be a single line: {self.fen!r}")
        parts = self.fen.split()
        if not (4 <= len(parts) <= 6):
            raise ValueError(f"Invalid FEN (need 4-6 fields): {self.fen!r}")
        Side.from_fen_field(parts[1])

    @property
    def side_to_move(self) -> Side:
        return Side.from_fen_field(self.fen.split()[1])

    def __str__(self) -> str:
        return self.fen
