"""Qt application bootstrap helpers."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from chesseval.config import AnalysisSettings


def run_application(
    settings: AnalysisSettings,
    moves: Sequence[str],
    argv: list[str] | None = None,
) -> int:
    """Create and run the main Qt application."""
    from PyQt6.QtWidgets import QApplication

    from chesseval.ui.main_window import MainWindow

    app = QApplication(sys.argv if argv is None else argv)
    app.setApplicationName("Chesseval")
    app.setStyle("Fusion")

    window = MainWindow(settings, moves)
    window.show()

    return app.exec()
