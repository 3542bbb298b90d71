from typing import Optional

from PyQt5 import QtCore, QtWidgets

from LYRA.src.core.filetree import Directory, FileEntry, enter, leave, render_rows, resolve
from LYRA.src.ui.theme import HEX_TEXT_DIM


class FileBrowserWidget(QtWidgets.QGroupBox):
    # Signals for parent to handle
    folder_changed = QtCore.pyqtSignal()
    file_selected = QtCore.pyqtSignal(object)
    open_requested = QtCore.pyqtSignal()

    def __init__(self, parent=None):
        super().__init__("Files", parent)
        self.tree: Optional[Directory] = None
        self.path: tuple = ()

        layout = QtWidgets.QVBoxLayout(self)

        self.btn_open = QtWidgets.QPushButton("Open Folder...")
        self.btn_open.setProperty("class", "accent")
        self.btn_open.setToolTip("Choose a directory to browse")
        self.btn_open.clicked.connect(lambda: self.open_requested.emit())
        layout.addWidget(self.btn_open)

        self.lbl_path = QtWidgets.QLabel("/")
        self.lbl_path.setStyleSheet(f"color: {HEX_TEXT_DIM}; font-size: 11px;")
        layout.addWidget(self.lbl_path)

        self.list = QtWidgets.QListWidget()
        self.list.itemClicked.connect(self.on_item_clicked)
        layout.addWidget(self.list, stretch=1)

    def set_tree(self, tree: Directory) -> None:
        self.tree = tree
        self.path = ()
        self.refresh()

    def refresh(self) -> None:
        self.list.clear()
        self.lbl_path.setText("/" + "/".join(self.path))
        if self.tree is None:
            return

        for row in render_rows(self.tree, self.path):
            label = f"\U0001F4C1 {row.label}" if row.kind == "folder" else row.label
            item = QtWidgets.QListWidgetItem(label)
            item.setData(QtCore.Qt.UserRole, (row.kind, row.name))
            self.list.addItem(item)

    def on_item_clicked(self, item: QtWidgets.QListWidgetItem) -> None:
        kind, name = item.data(QtCore.Qt.UserRole)
        if kind == "back":
            self.path = leave(self.path)
            self.refresh()
            self.folder_changed.emit()
        elif kind == "folder":
            self.path = enter(self.path, name)
            self.refresh()
            self.folder_changed.emit()
        else:
            entry = resolve(self.tree, enter(self.path, name))
            if isinstance(entry, FileEntry):
                self.file_selected.emit(entry)
