import logging

from PyQt5 import QtWidgets, QtCore

from LYRA.config import Config

logger = logging.getLogger(__name__)

# (group title, [(config key, label, editor kind, options, tooltip), ...])
SETTINGS_GROUPS = (
    ("Bin Grid", [
        ("BIN_START", "Start mass", "float", dict(lo=0.0, hi=100000.0, step=1.0, decimals=3),
         "First bin edge (inclusive)."),
        ("BIN_STOP", "Stop mass", "float", dict(lo=0.0, hi=100000.0, step=1.0, decimals=3),
         "Edges are generated while below this mass."),
        ("BIN_RESOLUTION", "Resolution", "float", dict(lo=0.001, hi=1000.0, step=0.1, decimals=3),
         "Bin width. Must match the grid the model was trained on."),
    ]),
    ("Scoring Service", [
        ("SCORING_URL", "Model URL", "text", {}, 'Endpoint receiving {"data": [...]}.'),
        ("SCORING_TIMEOUT_S", "Timeout", "float", dict(lo=1.0, hi=600.0, step=1.0, decimals=1, suffix=" s"),
         "Request timeout for one scoring exchange."),
    ]),
    ("Display & Export", [
        ("SCORE_DECIMALS", "Score decimals", "int", dict(lo=0, hi=10), "Digits shown per score."),
        ("EXPORT_DIR", "Export folder", "text", {}, "Leave empty to use the exports folder."),
    ]),
)


def make_editor(kind: str, opts: dict) -> QtWidgets.QWidget:
    if kind == "text":
        editor = QtWidgets.QLineEdit()
        editor.setMinimumWidth(300)
        return editor

    editor = QtWidgets.QDoubleSpinBox() if kind == "float" else QtWidgets.QSpinBox()
    editor.setRange(opts["lo"], opts["hi"])
    editor.setSingleStep(opts.get("step", 1))
    if kind == "float":
        editor.setDecimals(opts.get("decimals", 2))
    if opts.get("suffix"):
        editor.setSuffix(opts["suffix"])
    return editor


class SettingsPage(QtWidgets.QWidget):
    settings_applied = QtCore.pyqtSignal()
    back_requested = QtCore.pyqtSignal()

    def __init__(self, config: Config, parent=None):
        super().__init__(parent)
        self.config = config
        self.editors: dict[str, QtWidgets.QWidget] = {}

        self._build_ui()
        self.load_from_config(self.config)

    def _build_ui(self):
        outer = QtWidgets.QVBoxLayout(self)
        outer.setContentsMargins(16, 12, 16, 12)

        top = QtWidgets.QHBoxLayout()
        heading = QtWidgets.QLabel("LYRA Settings")
        heading.setStyleSheet("font-size: 17px; font-weight: bold;")
        top.addWidget(heading, stretch=1)
        btn_back = QtWidgets.QPushButton("Back to Viewer")
        btn_back.clicked.connect(lambda: self.back_requested.emit())
        top.addWidget(btn_back)
        outer.addLayout(top)

        where = QtWidgets.QLabel(f"Saved to {Config.default_path()}")
        where.setObjectName("dimLabel")
        outer.addWidget(where)

        body = QtWidgets.QWidget()
        body_layout = QtWidgets.QVBoxLayout(body)
        for title, rows in SETTINGS_GROUPS:
            body_layout.addWidget(self._build_group(title, rows))
        body_layout.addStretch()

        area = QtWidgets.QScrollArea()
        area.setWidgetResizable(True)
        area.setWidget(body)
        outer.addWidget(area, stretch=1)

        box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.RestoreDefaults | QtWidgets.QDialogButtonBox.Save
        )
        box.button(QtWidgets.QDialogButtonBox.Save).setProperty("class", "accent")
        box.button(QtWidgets.QDialogButtonBox.RestoreDefaults).clicked.connect(self.on_reset_defaults)
        box.accepted.connect(self.on_save)
        outer.addWidget(box)

    def _build_group(self, title, rows) -> QtWidgets.QGroupBox:
        group = QtWidgets.QGroupBox(title)
        form = QtWidgets.QFormLayout(group)
        form.setLabelAlignment(QtCore.Qt.AlignRight)
        for key, label, kind, opts, tip in rows:
            editor = make_editor(kind, opts)
            editor.setToolTip(tip)
            form.addRow(f"{label}:", editor)
            self.editors[key] = editor
        return group

    def load_from_config(self, config: Config):
        for key, editor in self.editors.items():
            current = getattr(config, key)
            if isinstance(editor, QtWidgets.QLineEdit):
                editor.setText(str(current))
            else:
                editor.setValue(current)

    def read_values(self) -> dict:
        values = {}
        for key, editor in self.editors.items():
            if isinstance(editor, QtWidgets.QLineEdit):
                values[key] = editor.text().strip()
            else:
                values[key] = editor.value()
        return values

    def on_reset_defaults(self):
        self.load_from_config(Config())

    def on_save(self):
        for key, value in self.read_values().items():
            setattr(self.config, key, value)
        self.config.normalize()

        try:
            self.config.save()
        except OSError as exc:
            logger.exception("Failed to save settings")
            QtWidgets.QMessageBox.warning(self, "Settings", f"Could not save settings:\n{exc}")

        self.load_from_config(self.config)
        self.settings_applied.emit()
