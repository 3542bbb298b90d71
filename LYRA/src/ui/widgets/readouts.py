from PyQt5 import QtWidgets
from LYRA.src.ui.theme import HEX_DANGER, HEX_WARNING, HEX_SUCCESS, HEX_TEXT_DIM, HEX_TEXT

class ReadoutWidget(QtWidgets.QGroupBox):
    def __init__(self, parent=None):
        super().__init__("Trace", parent)
        self.layout = QtWidgets.QGridLayout(self)

        self.lbl_file = QtWidgets.QLabel("---")
        self.lbl_file.setStyleSheet("font-weight: bold;")
        self.layout.addWidget(QtWidgets.QLabel("File:"), 0, 0)
        self.layout.addWidget(self.lbl_file, 0, 1)

        self.lbl_samples = QtWidgets.QLabel("---")
        self.layout.addWidget(QtWidgets.QLabel("Samples:"), 1, 0)
        self.layout.addWidget(self.lbl_samples, 1, 1)

        self.lbl_skipped = QtWidgets.QLabel("---")
        self.layout.addWidget(QtWidgets.QLabel("Skipped rows:"), 2, 0)
        self.layout.addWidget(self.lbl_skipped, 2, 1)

        self.lbl_features = QtWidgets.QLabel("---")
        self.layout.addWidget(QtWidgets.QLabel("Features:"), 3, 0)
        self.layout.addWidget(self.lbl_features, 3, 1)

        self.lbl_status = QtWidgets.QLabel("Ready")
        self.lbl_status.setStyleSheet(f"color: {HEX_SUCCESS}; font-weight: bold;")
        self.layout.addWidget(QtWidgets.QLabel("Status:"), 4, 0)
        self.layout.addWidget(self.lbl_status, 4, 1)

    def update_trace(self, name: str, samples: int, skipped: int, features: int):
        self.lbl_file.setText(name)
        self.lbl_samples.setText(str(samples))
        self.lbl_features.setText(str(features) if features else "---")

        self.lbl_skipped.setText(str(skipped))
        if skipped:
            self.lbl_skipped.setStyleSheet(f"color: {HEX_WARNING};")
        else:
            self.lbl_skipped.setStyleSheet(f"color: {HEX_TEXT};")

    def clear_trace(self):
        for lbl in (self.lbl_file, self.lbl_samples, self.lbl_skipped, self.lbl_features):
            lbl.setText("---")
            lbl.setStyleSheet(f"color: {HEX_TEXT_DIM};")

    def update_status(self, msg):
        self.lbl_status.setText(msg)
        m = msg.lower()
        if "error" in m or "fail" in m or "invalid" in m or "unavailable" in m:
            self.lbl_status.setStyleSheet(f"color: {HEX_DANGER}; font-weight: bold;")
        elif "running" in m or "classifying" in m:
            self.lbl_status.setStyleSheet(f"color: {HEX_WARNING}; font-weight: bold;")
        else:
            self.lbl_status.setStyleSheet(f"color: {HEX_SUCCESS}; font-weight: bold;")
