"""Application entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from chesseval.config import AnalysisSettings
from chesseval.core.sample_game import SAMPLE_MOVES

_LOGGER = logging.getLogger(__name__)

EXIT_ENGINE_START_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    defaults = AnalysisSettings()
    parser = argparse.ArgumentParser(
        prog="chesseval",
        description="Evaluate every position of a move list with a UCI engine.",
    )
    parser.add_argument(
        "moves",
        nargs="*",
        help="moves in SAN; the bundled sample game is used when omitted",
    )
    parser.add_argument(
        "--engine",
        default=defaults.engine_path,
        help="UCI engine executable (default: %(default)s)",
    )
    parser.add_argument(
        "--engine-arg",
        action="append",
        default=[],
        dest="engine_args",
        help="extra argument passed to the engine; may be repeated",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=defaults.depth,
        help="search depth per position in plies (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=defaults.timeout_ms,
        help="per-position timeout in milliseconds (default: %(default)s)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="print the evaluations instead of opening a window",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase log verbosity (-v info, -vv protocol traffic)",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> AnalysisSettings:
    return AnalysisSettings(
        engine_path=args.engine,
        engine_args=tuple(args.engine_args),
        depth=args.depth,
        timeout_ms=args.timeout_ms,
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_headless(settings: AnalysisSettings, moves: Sequence[str]) -> int:
    """Analyze *moves* without a window and print one line per position."""
    from PyQt6.QtCore import QCoreApplication

    from chesseval.analysis import MoveListAnalyzer
    from chesseval.engine import EngineStartError, ProcessChannel
    from chesseval.engine.session import EngineSession

    _app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    channel = ProcessChannel(settings.engine_path, settings.engine_args)
    session = EngineSession(
        channel,
        handshake_timeout_ms=settings.handshake_timeout_ms,
    )
    try:
        session.start()
    except EngineStartError as exc:
        _LOGGER.error("Cannot start engine: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ENGINE_START_FAILED

    try:
        analyzer = MoveListAnalyzer(
            session,
            depth=settings.depth,
            timeout_ms=settings.timeout_ms,
        )
        analysis = analyzer.analyze(moves)
    finally:
        session.shutdown()

    for illegal in analysis.rejected:
        print(f"skipped illegal move #{illegal.index + 1} {illegal.san!r}: {illegal.reason}")
    for move, result in zip(analysis.moves, analysis.results, strict=True):
        print(f"{move.index + 1:>3} {move.san:<8} {result.text:<24} {move.position.fen}")
    print(analysis.texts)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Launch chesseval."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        settings = settings_from_args(args)
    except ValueError as exc:
        build_parser().error(str(exc))

    moves = list(args.moves) or list(SAMPLE_MOVES)
    if args.headless:
        sys.exit(run_headless(settings, moves))

    from chesseval.ui.bootstrap import run_application

    sys.exit(run_application(settings, moves))


if __name__ == "__main__":
    main()
