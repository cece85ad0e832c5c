"""MainWindow — one button that evaluates every position of a move list."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent, QColor, QFont
from PyQt6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from chesseval.analysis import MoveListAnalysis, MoveListAnalyzer, is_failure
from chesseval.config import AnalysisSettings
from chesseval.engine import EngineStartError, ProcessChannel
from chesseval.engine.session import EngineSession

_LOGGER = logging.getLogger(__name__)

_FAILED_COLOR = QColor("#ca3431")


class MainWindow(QMainWindow):
    """Analyze button, progress bar and the per-position evaluation list."""

    def __init__(
        self,
        settings: AnalysisSettings,
        moves: Sequence[str],
        *,
        session: EngineSession | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._moves = list(moves)
        if session is None:
            channel = ProcessChannel(settings.engine_path, settings.engine_args, self)
            session = EngineSession(
                channel,
                handshake_timeout_ms=settings.handshake_timeout_ms,
            )
        self._session = session
        self._analyzer = MoveListAnalyzer(
            session,
            depth=settings.depth,
            timeout_ms=settings.timeout_ms,
        )
        self._is_running = False
        self._last_analysis: MoveListAnalysis | None = None

        self.setWindowTitle("Chesseval")
        self.resize(520, 640)
        self._build_ui()

    @property
    def last_analysis(self) -> MoveListAnalysis | None:
        return self._last_analysis

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(10)

        self._analyze_button = QPushButton("Analyze Positions with Stockfish")
        self._analyze_button.clicked.connect(self._on_analyze_clicked)
        layout.addWidget(self._analyze_button, alignment=Qt.AlignmentFlag.AlignCenter)

        self._progress = QProgressBar()
        self._progress.setRange(0, max(1, len(self._moves)))
        self._progress.setValue(0)
        self._progress.setTextVisible(True)
        layout.addWidget(self._progress)

        self._results = QListWidget()
        self._results.setFont(QFont("monospace", 10))
        layout.addWidget(self._results, stretch=1)

        self._status = QLabel(f"{len(self._moves)} moves loaded")
        self._status.setWordWrap(True)
        layout.addWidget(self._status)

        self.setCentralWidget(central)

    def _on_analyze_clicked(self) -> None:
        if self._is_running:
            return
        self._is_running = True
        self._analyze_button.setEnabled(False)
        self._results.clear()
        self._progress.setValue(0)
        try:
            self._run_analysis()
        finally:
            self._is_running = False
            self._analyze_button.setEnabled(True)

    def _run_analysis(self) -> None:
        self._status.setText("Starting engine…")
        try:
            self._session.start()
        except EngineStartError as exc:
            _LOGGER.error("Cannot start engine: %s", exc)
            self._status.setText(f"Engine error: {exc}")
            return

        self._status.setText("Analyzing…")
        analysis = self._analyzer.analyze(self._moves, on_progress=self._on_progress)
        self._last_analysis = analysis
        self._show_analysis(analysis)

    def _on_progress(self, done: int, total: int) -> None:
        self._progress.setMaximum(max(1, total))
        self._progress.setValue(done)

    def _show_analysis(self, analysis: MoveListAnalysis) -> None:
        for move, result in zip(analysis.moves, analysis.results, strict=True):
            number = move.index // 2 + 1
            dots = "." if move.index % 2 == 0 else "..."
            item = QListWidgetItem(f"{number}{dots} {move.san:<8} {result.text}")
            item.setToolTip(move.position.fen)
            if is_failure(result):
                item.setForeground(_FAILED_COLOR)
            self._results.addItem(item)

        parts = [f"{len(analysis.results)} positions evaluated"]
        if analysis.failure_count:
            parts.append(f"{analysis.failure_count} failed")
        if analysis.rejected:
            skipped = ", ".join(illegal.san for illegal in analysis.rejected)
            parts.append(f"skipped illegal moves: {skipped}")
        self._status.setText("; ".join(parts))

    def closeEvent(self, event: QCloseEvent | None) -> None:  # noqa: N802
        self._session.shutdown()
        super().closeEvent(event)
