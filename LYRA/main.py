import sys
import argparse
import logging
from pathlib import Path

from PyQt5 import QtWidgets
import pyqtgraph as pg

from LYRA.config import Config
from LYRA.src.core.scoring import MockScoringService, ScoringClient, ScoringService
from LYRA.src.core.worker import ScoringWorker
from LYRA.src.ui.layouts.settings import SettingsPage
from LYRA.src.ui.layouts.viewer import ViewerPage

logger = logging.getLogger(__name__)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, service: ScoringService, config: Config):
        super().__init__()
        self.service = service
        self.config = config

        self.worker = ScoringWorker(service)
        self.worker.start()

        self.setWindowTitle("LYRA: Mass Spectrum Classifier")
        self.resize(1280, 800)

        self.init_menu()

        self.stack = QtWidgets.QStackedWidget()
        self.setCentralWidget(self.stack)

        self.viewer_page = ViewerPage(self.worker, config)
        self.stack.addWidget(self.viewer_page)

        self.settings_page = SettingsPage(config)
        self.settings_page.back_requested.connect(lambda: self.stack.setCurrentIndex(0))
        self.settings_page.settings_applied.connect(self.on_settings_applied)
        self.stack.addWidget(self.settings_page)

    def init_menu(self):
        menubar = self.menuBar()

        lyra_menu = menubar.addMenu("LYRA")
        lyra_menu.addAction("Open Folder...", lambda: self.viewer_page.on_open_folder())
        lyra_menu.addAction("Settings", lambda: self.stack.setCurrentIndex(1))
        lyra_menu.addSeparator()
        lyra_menu.addAction("Quit", self.close)

        window_menu = menubar.addMenu("Window")
        window_menu.addAction("Viewer", lambda: self.stack.setCurrentIndex(0))
        window_menu.addAction("Settings", lambda: self.stack.setCurrentIndex(1))

        help_menu = menubar.addMenu("Help")
        help_menu.addAction("About", self.on_about)

    def on_settings_applied(self):
        self.viewer_page.apply_config_update()

    def on_about(self):
        QtWidgets.QMessageBox.information(
            self,
            "About",
            f"LYRA: Mass Spectrum Classifier\nScoring: {type(self.service).__name__}",
        )

    def closeEvent(self, event):
        logger.info("Closing application...")
        self.worker.stop()
        event.accept()

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--sim", action="store_true", help="Score against the built-in mock library")
    parser.add_argument("--root", type=Path, help="Directory to open at start")
    parser.add_argument("--url", help="Override the scoring service URL")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = Config.load()

    if args.sim:
        service = MockScoringService(config)
    else:
        service = ScoringClient(config, url=args.url)

    app = QtWidgets.QApplication(sys.argv)
    pg.setConfigOptions(antialias=True)

    from LYRA.src.ui.theme import apply_theme
    apply_theme(app)

    window = MainWindow(service, config)
    window.show()

    root = args.root or (Path(config.LAST_DIRECTORY) if config.LAST_DIRECTORY else None)
    if root is not None and root.is_dir():
        window.viewer_page.open_directory(root)

    sys.exit(app.exec_())

if __name__ == "__main__":
    main()
