"""Core domain layer — sides, positions and move-list replay.

Quick start::

    from chesseval.core import replay_moves

    replay = replay_moves(["e4", "e5", "Nf3"])
    for position in replay.positions:
        print(position.fen, position.side_to_move)
"""

from chesseval.core.enums import Side
from chesseval.core.position import STARTING_FEN, Position
from chesseval.core.replay import IllegalMove, MoveReplay, replay_moves

__all__ = [
    "STARTING_FEN",
    "IllegalMove",
    "MoveReplay",
    "Position",
    "Side",
    "replay_moves",
]
