"""User-tunable analysis settings."""

from __future__ import annotations

from dataclasses import dataclass

from chesseval.engine.session import DEFAULT_DEPTH, DEFAULT_TIMEOUT_MS


@dataclass
class AnalysisSettings:
    """Engine location and per-position search limits."""

    # Engine
    engine_path: str = "stockfish"
    engine_args: tuple[str, ...] = ()
    handshake_timeout_ms: int = 5000

    # Search
    depth: int = DEFAULT_DEPTH
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        if not self.engine_path:
            raise ValueError("Engine path must not be empty")
        if self.depth < 1:
            raise ValueError(f"Search depth must be >= 1, got {self.depth}")
        if self.timeout_ms <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout_ms} ms")
        if self.handshake_timeout_ms <= 0:
            raise ValueError(
                f"Handshake timeout must be positive, got {self.handshake_timeout_ms} ms"
            )
