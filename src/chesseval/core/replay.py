"""Replay a SAN move list into the sequence of resulting positions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import chess

from chesseval.core.position import STARTING_FEN, Position

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class IllegalMove:
    """A move from the input list that could not be played."""

    index: int
    san: str
    reason: str


@dataclass(slots=True, frozen=True)
class ReplayedMove:
    """A legal move together with the position it produced."""

    index: int
    san: str
    position: Position


@dataclass(slots=True, frozen=True)
class MoveReplay:
    """Outcome of replaying a move list."""

    start_fen: str
    moves: tuple[ReplayedMove, ...]
    rejected: tuple[IllegalMove, ...]

    @property
    def positions(self) -> tuple[Position, ...]:
        return tuple(move.position for move in self.moves)


def replay_moves(
    moves: Iterable[str],
    *,
    start_fen: str = STARTING_FEN,
) -> MoveReplay:
    """Play *moves* (SAN) from *start_fen* and collect one position per move.

    Illegal, malformed or ambiguous moves are logged, reported in
    :attr:`MoveReplay.rejected` and skipped; the board is left untouched so
    the following moves continue from the last legal position.
    """
    board = chess.Board(start_fen)
    replayed: list[ReplayedMove] = []
    rejected: list[IllegalMove] = []

    for index, san in enumerate(moves):
        try:
            board.push_san(san)
        except ValueError as exc:
            _LOGGER.error("Invalid move %r at index %d: %s", san, index, exc)
            rejected.append(IllegalMove(index=index, san=san, reason=str(exc)))
            continue
        replayed.append(
            ReplayedMove(index=index, san=san, position=Position(board.fen()))
        )

    return MoveReplay(
        start_fen=start_fen,
        moves=tuple(replayed),
        rejected=tuple(rejected),
    )
