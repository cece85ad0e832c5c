"""UCI line protocol: event parsing and command builders.

Only the subset needed for fixed-depth evaluation is modelled. Every engine
output line maps to exactly one event; anything not understood becomes
:class:`Unrecognized` instead of raising.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum


class ScoreKind(StrEnum):
    """Unit of an ``info ... score`` token."""

    CENTIPAWNS = "cp"
    MATE = "mate"


@dataclass(slots=True, frozen=True)
class ScoreUpdate:
    """Progress line carrying a score relative to the side to move."""

    kind: ScoreKind
    value: int


@dataclass(slots=True, frozen=True)
class BestMove:
    """Search completion announcement."""

    move: str | None = None


@dataclass(slots=True, frozen=True)
class UciOk:
    """Acknowledgement of the ``uci`` handshake."""


@dataclass(slots=True, frozen=True)
class ReadyOk:
    """Answer to ``isready``; every earlier command has been processed."""


@dataclass(slots=True, frozen=True)
class Unrecognized:
    """Any line the orchestrator has no use for."""

    line: str


EngineEvent = ScoreUpdate | BestMove | UciOk | ReadyOk | Unrecognized

UCI = "uci"
IS_READY = "isready"
NEW_GAME = "ucinewgame"
STOP = "stop"
QUIT = "quit"

_INFO_MARKER = "info"
_BEST_MOVE_MARKER = "bestmove"
_SCORE_RE = re.compile(r"\bscore (cp|mate) ([-+]?\d+)\b")


def parse_line(line: str) -> EngineEvent:
    """Turn one raw engine output line into an :data:`EngineEvent`."""
    text = line.strip()
    tokens = text.split()
    if not tokens:
        return Unrecognized(line)

    head = tokens[0]
    if head == _INFO_MARKER:
        match = _SCORE_RE.search(text)
        if match is None:
            return Unrecognized(line)
        return ScoreUpdate(ScoreKind(match.group(1)), int(match.group(2)))
    if head == _BEST_MOVE_MARKER:
        move = tokens[1] if len(tokens) > 1 else None
        if move == "(none)":
            move = None
        return BestMove(move)
    if text == "uciok":
        return UciOk()
    if text == "readyok":
        return ReadyOk()
    return Unrecognized(line)


def position_command(fen: str) -> str:
    """Build ``position fen <fen>``."""
    if not fen.strip() or "\n" in fen or "\r" in fen:
        raise ValueError(f"FEN must be a non-empty single line: {fen!r}")
    return f"position fen {fen.strip()}"


def go_depth_command(depth: int) -> str:
    """Build ``go depth <n>``."""
    if depth < 1:
        raise ValueError(f"Search depth must be >= 1, got {depth}")
    return f"go depth {depth}"
