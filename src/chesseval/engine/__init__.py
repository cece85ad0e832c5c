"""Engine layer: UCI protocol, process channel and evaluation session.

The session itself lives in :mod:`chesseval.engine.session`; it is not
re-exported here because it depends on :mod:`chesseval.analysis`, which in
turn needs the protocol types from this package.
"""

from chesseval.engine.channel import EngineChannel, ProcessChannel
from chesseval.engine.errors import (
    EngineBusyError,
    EngineError,
    EngineFaultError,
    EngineStartError,
)
from chesseval.engine.protocol import (
    BestMove,
    EngineEvent,
    ReadyOk,
    ScoreKind,
    ScoreUpdate,
    UciOk,
    Unrecognized,
    parse_line,
)

__all__ = [
    "BestMove",
    "EngineBusyError",
    "EngineChannel",
    "EngineError",
    "EngineEvent",
    "EngineFaultError",
    "EngineStartError",
    "ProcessChannel",
    "ReadyOk",
    "ScoreKind",
    "ScoreUpdate",
    "UciOk",
    "Unrecognized",
    "parse_line",
]
