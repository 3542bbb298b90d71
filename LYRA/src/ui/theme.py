import sys

from PyQt5 import QtWidgets

PALETTE = {
    "window": "#181a1f",
    "panel": "#22252b",
    "edge": "#353a42",
    "text": "#dcdfe4",
    "muted": "#8b929c",
    "accent": "#3d8bd9",
    "ok": "#3fb26b",
    "bad": "#e0524d",
    "warn": "#d4a22b",
}

HEX_BG_DARK = PALETTE["window"]
HEX_TEXT = PALETTE["text"]
HEX_TEXT_DIM = PALETTE["muted"]
HEX_SUCCESS = PALETTE["ok"]
HEX_DANGER = PALETTE["bad"]
HEX_WARNING = PALETTE["warn"]

TRACE_PEN_COLOR = "#4fc3f7"


def get_plot_colors():
    """pyqtgraph colors for the trace plot."""
    return {
        "background": PALETTE["window"],
        "axis": PALETTE["muted"],
        "grid": (255, 255, 255, 40),
        "text": PALETTE["text"],
        "trace": TRACE_PEN_COLOR,
    }


def _font_family() -> str:
    if sys.platform.startswith("win"):
        return '"Segoe UI", sans-serif'
    if sys.platform == "darwin":
        return '"Helvetica Neue", sans-serif'
    return '"DejaVu Sans", sans-serif'


def apply_theme(app: QtWidgets.QApplication):
    """Install the dark stylesheet on the whole application."""
    p = PALETTE
    app.setStyleSheet(f"""
    QWidget {{
        background: {p['window']};
        color: {p['text']};
        font-family: {_font_family()};
        font-size: 13px;
    }}
    QGroupBox {{
        border: 1px solid {p['edge']};
        border-radius: 5px;
        margin-top: 14px;
        padding: 8px 6px 6px 6px;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        color: {p['muted']};
    }}
    QLabel#dimLabel {{ color: {p['muted']}; font-size: 11px; }}

    QPushButton {{
        background: {p['panel']};
        border: 1px solid {p['edge']};
        border-radius: 4px;
        padding: 4px 10px;
    }}
    QPushButton:hover {{ border-color: {p['accent']}; }}
    QPushButton:disabled {{ color: {p['muted']}; background: {p['window']}; }}
    QPushButton[class="accent"] {{ background: {p['accent']}; color: white; }}
    QPushButton[class="result"] {{
        text-align: left;
        padding: 6px 8px;
        font-family: "DejaVu Sans Mono", monospace;
    }}

    QListWidget, QPlainTextEdit, QLineEdit, QSpinBox, QDoubleSpinBox, QScrollArea {{
        background: {p['panel']};
        border: 1px solid {p['edge']};
    }}
    QListWidget::item:selected {{ background: {p['accent']}; color: white; }}
    QPlainTextEdit {{ font-family: "DejaVu Sans Mono", monospace; }}

    QSplitter::handle {{ background: {p['edge']}; width: 5px; }}
    QSplitter::handle:hover {{ background: {p['accent']}; }}
    """)
