"""Viewer page: file browser, trace plot with peak overlay, and model results."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt5 import QtCore, QtGui, QtWidgets

from LYRA.config import Config
from LYRA.src.core.errors import LyraError
from LYRA.src.core.export import export_results
from LYRA.src.core.filetree import FileEntry, build_tree, is_trace_file
from LYRA.src.core.overlay import OverlayState
from LYRA.src.core.parsing import parse_trace_text
from LYRA.src.core.processing import Preprocessor
from LYRA.src.core.selection import SelectionTracker
from LYRA.src.core.types import Trace
from LYRA.src.core.worker import ScoringWorker
from LYRA.src.ui.widgets.file_browser import FileBrowserWidget
from LYRA.src.ui.widgets.readouts import ReadoutWidget
from LYRA.src.ui.widgets.result_list import ResultListWidget
from LYRA.src.ui.widgets.spectrum_plot import SpectrumPlot

logger = logging.getLogger(__name__)

MIN_PANEL_WIDTH = 50


class ViewerPage(QtWidgets.QWidget):
    def __init__(self, worker: ScoringWorker, config: Config):
        super().__init__()
        self.worker = worker
        self.config = config
        self.preprocessor = Preprocessor(config)
        self.tracker = SelectionTracker()

        self.overlay = OverlayState()
        self.current_trace: Optional[Trace] = None
        self.current_name = ""

        self._build_ui()
        self._connect_signals()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)

        self.splitter = QtWidgets.QSplitter(QtCore.Qt.Horizontal)
        self.splitter.setChildrenCollapsible(False)

        self.browser = FileBrowserWidget()
        self.browser.setMinimumWidth(MIN_PANEL_WIDTH)

        right = QtWidgets.QWidget()
        right.setMinimumWidth(MIN_PANEL_WIDTH)
        right_layout = QtWidgets.QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)

        self.view_stack = QtWidgets.QStackedWidget()
        self.plot = SpectrumPlot()
        self.text_view = QtWidgets.QPlainTextEdit()
        self.text_view.setReadOnly(True)
        self.view_stack.addWidget(self.plot)
        self.view_stack.addWidget(self.text_view)
        right_layout.addWidget(self.view_stack, stretch=3)

        bottom = QtWidgets.QHBoxLayout()
        self.readouts = ReadoutWidget()
        self.results = ResultListWidget()
        self.results.decimals = int(self.config.SCORE_DECIMALS)
        bottom.addWidget(self.readouts, 1)
        bottom.addWidget(self.results, 2)
        right_layout.addLayout(bottom, stretch=2)

        self.splitter.addWidget(self.browser)
        self.splitter.addWidget(right)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 4)
        self.splitter.setSizes([260, 1000])

        layout.addWidget(self.splitter)

    def _connect_signals(self) -> None:
        self.worker.results_ready.connect(self.on_results_ready)
        self.worker.scoring_failed.connect(self.on_scoring_failed)
        self.worker.status_msg.connect(self.update_status_msg)

        self.browser.open_requested.connect(self.on_open_folder)
        self.browser.folder_changed.connect(self.on_folder_changed)
        self.browser.file_selected.connect(self.on_file_selected)

        self.results.toggle_requested.connect(self.on_toggle_peaks)
        self.results.export_requested.connect(self.on_export)

        QtWidgets.QShortcut(QtGui.QKeySequence("Ctrl+O"), self, activated=self.on_open_folder)

    def update_status_msg(self, msg: str) -> None:
        self.readouts.update_status(msg)

    def apply_config_update(self) -> None:
        self.preprocessor = Preprocessor(self.config)
        self.results.decimals = int(self.config.SCORE_DECIMALS)
        self.update_status_msg("Settings applied.")

    # --- Browsing ---

    def on_open_folder(self) -> None:
        start = self.config.LAST_DIRECTORY or str(Path.home())
        folder = QtWidgets.QFileDialog.getExistingDirectory(self, "Open Folder", start)
        if folder:
            self.open_directory(Path(folder))

    def open_directory(self, folder: Path) -> None:
        if not folder.is_dir():
            QtWidgets.QMessageBox.warning(self, "Open Folder", f"Not a directory:\n{folder}")
            return
        self.browser.set_tree(build_tree(folder))
        self.browser.setTitle(f"Files: {folder.name}")
        self.config.LAST_DIRECTORY = str(folder)
        try:
            self.config.save()
        except OSError:
            logger.exception("Failed to save config")
        self._reset_display()

    def on_folder_changed(self) -> None:
        self._reset_display()

    def _reset_display(self) -> None:
        self.plot.clear()
        self.view_stack.setCurrentWidget(self.plot)
        self.tracker.clear()
        self.overlay = OverlayState()
        self.current_trace = None
        self.readouts.clear_trace()
        self.results.show_message("Select a CSV file to classify.")

    def on_file_selected(self, entry: FileEntry) -> None:
        try:
            text = entry.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.exception("Failed to read %s", entry.path)
            QtWidgets.QMessageBox.warning(self, "Open File", f"Could not read {entry.path.name}:\n{exc}")
            return

        if is_trace_file(entry):
            self.load_trace(entry.path.name, text)
        else:
            self._reset_display()
            self.text_view.setPlainText(text)
            self.view_stack.setCurrentWidget(self.text_view)

    # --- Pipeline ---

    def load_trace(self, name: str, text: str) -> None:
        token = self.tracker.begin(name)
        self.current_name = name
        self.overlay = OverlayState()
        self.results.show_pending(name)

        trace = parse_trace_text(text)
        self.current_trace = trace
        self.view_stack.setCurrentWidget(self.plot)
        self.plot.render_trace(trace.masses, trace.intensities, title=name)

        try:
            features = self.preprocessor.preprocess(trace)
        except LyraError as exc:
            self.tracker.clear()
            self.readouts.update_trace(name, trace.size, len(trace.skipped), 0)
            self.results.show_error(str(exc))
            self.update_status_msg(f"Invalid trace: {exc}")
            QtWidgets.QMessageBox.warning(self, "Preprocessing", f"{name}:\n{exc}")
            return

        self.readouts.update_trace(name, trace.size, len(trace.skipped), features.size)
        self.update_status_msg(f"Classifying {name}...")
        self.worker.submit(token, features)

    def on_results_ready(self, token: int, results) -> None:
        if not self.tracker.is_current(token):
            logger.info("Discarding results for superseded selection %d", token)
            return

        self.overlay = OverlayState.for_results(results)
        self.plot.replace_shapes(self.overlay.shapes())
        self.results.set_results(results)
        self.update_status_msg(f"{len(results)} candidates for {self.current_name}")

    def on_scoring_failed(self, token: int, msg: str) -> None:
        if not self.tracker.is_current(token):
            logger.info("Ignoring failure for superseded selection %d: %s", token, msg)
            return
        self.results.show_error(msg)
        self.update_status_msg("Scoring unavailable")

    def on_toggle_peaks(self, index: int) -> None:
        try:
            self.overlay, update = self.overlay.toggle(index)
        except IndexError:
            logger.warning("Toggle for unknown result index %d", index)
            return
        self.plot.replace_shapes(update.shapes)
        for i, res in enumerate(self.overlay.results):
            if res.id == update.candidate_id:
                self.results.set_active(i, update.color)

    def on_export(self) -> None:
        if self.current_trace is None or not self.overlay.results:
            return
        out_dir = Path(self.config.EXPORT_DIR) if self.config.EXPORT_DIR else None
        try:
            csv_path, png_path = export_results(
                self.overlay.results,
                self.overlay,
                self.current_trace,
                out_dir,
                title=self.current_name,
                decimals=int(self.config.SCORE_DECIMALS),
            )
        except OSError as exc:
            logger.exception("Export failed")
            QtWidgets.QMessageBox.warning(self, "Export", f"Export failed:\n{exc}")
            return
        self.update_status_msg(f"Results saved to {csv_path.name}")
        QtWidgets.QMessageBox.information(
            self, "Export", f"Saved:\n{csv_path}\n{png_path}"
        )
