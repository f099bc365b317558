"""Application wiring and lifecycle"""

import sys
import signal
from typing import Optional
from PyQt6.QtCore import QCoreApplication
from loguru import logger

from .core.clipboard import ClipboardPoller, HistoryStore, SystemClipboard
from .core.errors import StorageError
from .core.storage import DatabaseManager, StateStore
from .core.theme import ThemeState
from .services import SyncChannel
from .utils import ConfigManager, get_app_data_dir


class ClipMasterApp:
    """Builds the core once and runs it on a single Qt event loop.

    The presentation layer, tray and shortcut handling attach to
    ``self.channel`` from outside.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config_manager = None
        self.database_manager = None
        self.state_store = None
        self.clipboard = None
        self.history = None
        self.theme = None
        self.poller = None
        self.channel = None
        self.qt_app = None

    def _setup_logging(self):
        """Configure logging"""
        level = self.config_manager.get('logging.level', 'INFO')

        logger.remove()  # Remove default handler

        # Console logging
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
        )

        # File logging
        if self.config_manager.get('logging.file_logging', True):
            log_dir = get_app_data_dir() / 'logs'
            log_dir.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_dir / "clipmaster_{time:YYYY-MM-DD}.log",
                rotation=self.config_manager.get('logging.rotation', '1 day'),
                retention=self.config_manager.get('logging.retention', '7 days'),
                level="DEBUG",
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
            )

    def initialize(self) -> bool:
        """Initialize all components"""
        self.config_manager = ConfigManager(self.config_path)
        self._setup_logging()

        logger.info("=" * 60)
        logger.info("ClipMaster starting...")
        logger.info("=" * 60)

        if not self.config_manager.validate():
            logger.error("Invalid configuration")
            return False

        try:
            logger.info("Initializing storage...")
            self.database_manager = DatabaseManager(self.config_manager.get('storage.database_path'))
            self.state_store = StateStore(self.database_manager, self.config_manager.state_defaults())

            self.history = HistoryStore(self.state_store)
            self.theme = ThemeState(self.state_store)

        except StorageError as e:
            logger.error(f"Failed to initialize storage: {e}")
            return False

        logger.info("Initializing clipboard monitoring...")
        self.clipboard = SystemClipboard()
        self.poller = ClipboardPoller(
            self.clipboard,
            self.history,
            idle_interval=self.config_manager.get('clipboard.idle_interval'),
            active_interval=self.config_manager.get('clipboard.active_interval'),
        )

        self.channel = SyncChannel(
            self.history,
            self.theme,
            self.poller,
            self.clipboard,
            show_notifications=self.config_manager.get('ui.show_notifications', True),
        )

        logger.info("Application initialized successfully")
        return True

    def start(self) -> int:
        """Start polling and run the event loop until quit"""
        self.qt_app = QCoreApplication.instance() or QCoreApplication(sys.argv)

        if self.config_manager.get('clipboard.auto_start', True):
            self.poller.start()

        logger.info("ClipMaster ready!")
        return self.qt_app.exec()

    def shutdown(self):
        """Shutdown the application"""
        logger.info("ClipMaster shutting down...")

        if self.poller and self.poller.is_running:
            self.poller.stop()

        if self.database_manager:
            self.database_manager.close()

        if self.qt_app:
            self.qt_app.quit()

        logger.info("Application shutdown complete")


def signal_handler(signum, frame):
    """Handle system signals"""
    logger.info(f"Received signal {signum}")
    if hasattr(signal_handler, 'app'):
        signal_handler.app.shutdown()


def main():
    """Main entry point"""
    app = ClipMasterApp()

    # Store app reference for signal handler
    signal_handler.app = app

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if not app.initialize():
        logger.error("Failed to initialize application")
        sys.exit(1)

    sys.exit(app.start())
