from typing import Optional, Sequence

from PyQt5 import QtCore, QtWidgets

from LYRA.src.core.types import CandidateResult
from LYRA.src.ui.theme import HEX_DANGER, HEX_TEXT_DIM


class ResultListWidget(QtWidgets.QGroupBox):
    toggle_requested = QtCore.pyqtSignal(int)
    export_requested = QtCore.pyqtSignal()

    def __init__(self, parent=None):
        super().__init__("Results", parent)
        self.buttons: list[QtWidgets.QPushButton] = []
        self.decimals = 4

        outer = QtWidgets.QVBoxLayout(self)

        self.lbl_message = QtWidgets.QLabel("Select a CSV file to classify.")
        self.lbl_message.setWordWrap(True)
        self.lbl_message.setStyleSheet(f"color: {HEX_TEXT_DIM};")
        outer.addWidget(self.lbl_message)

        scroll = QtWidgets.QScrollArea()
        scroll.setWidgetResizable(True)
        container = QtWidgets.QWidget()
        self.button_layout = QtWidgets.QVBoxLayout(container)
        self.button_layout.setContentsMargins(0, 0, 0, 0)
        self.button_layout.addStretch()
        scroll.setWidget(container)
        outer.addWidget(scroll, stretch=1)

        self.btn_export = QtWidgets.QPushButton("Export Results")
        self.btn_export.setToolTip("Save the ranked list as CSV and the overlay plot as PNG")
        self.btn_export.setEnabled(False)
        self.btn_export.clicked.connect(lambda: self.export_requested.emit())
        outer.addWidget(self.btn_export)

    def _clear_buttons(self) -> None:
        for btn in self.buttons:
            self.button_layout.removeWidget(btn)
            btn.deleteLater()
        self.buttons = []

    def show_pending(self, label: str) -> None:
        self._clear_buttons()
        self.btn_export.setEnabled(False)
        self.lbl_message.setText(f"Classifying {label}...")
        self.lbl_message.setStyleSheet(f"color: {HEX_TEXT_DIM};")

    def show_message(self, msg: str) -> None:
        self._clear_buttons()
        self.btn_export.setEnabled(False)
        self.lbl_message.setText(msg)
        self.lbl_message.setStyleSheet(f"color: {HEX_TEXT_DIM};")

    def show_error(self, msg: str) -> None:
        self._clear_buttons()
        self.btn_export.setEnabled(False)
        self.lbl_message.setText(f"Classification failed: {msg}")
        self.lbl_message.setStyleSheet(f"color: {HEX_DANGER}; font-weight: bold;")

    def set_results(self, results: Sequence[CandidateResult]) -> None:
        self._clear_buttons()
        if not results:
            self.show_message("The model returned no candidates.")
            return

        self.lbl_message.setText(f"{len(results)} candidates. Click to toggle peaks.")
        self.lbl_message.setStyleSheet(f"color: {HEX_TEXT_DIM};")
        for index, res in enumerate(results):
            btn = QtWidgets.QPushButton(f"{res.name}: {res.score:.{self.decimals}f}")
            btn.setProperty("class", "result")
            btn.setToolTip(f"{len(res.peaks)} peaks")
            btn.clicked.connect(lambda _checked=False, i=index: self.toggle_requested.emit(i))
            self.button_layout.insertWidget(self.button_layout.count() - 1, btn)
            self.buttons.append(btn)
        self.btn_export.setEnabled(True)

    def set_active(self, index: int, color: Optional[str]) -> None:
        """Background = ``color`` when active; ``None`` resets the styling."""
        if not 0 <= index < len(self.buttons):
            return
        btn = self.buttons[index]
        if color:
            btn.setStyleSheet(f"background-color: {color}; color: black;")
        else:
            btn.setStyleSheet("")
