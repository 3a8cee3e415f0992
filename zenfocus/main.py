"""
ZenFocus - Main Application
Persisted task list with a rendered screen and a web remote
"""

import sys
import os
import logging
import signal
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from zenfocus.config import Config
from zenfocus.core.storage import SlotStorage
from zenfocus.ui.view import Role, ViewNode
from zenfocus.ui.notification import NotificationCenter
from zenfocus.apps.tasks import Reconciler, TaskController, TaskScreen, TaskStore
from zenfocus.web.webserver import TasksWebServer


class ZenFocusApp:
    """
    Main task list application
    """

    def __init__(self, config_path: str = None, config: Config = None):
        """
        Initialize application

        Args:
            config_path: Path to config.yaml
            config: Already loaded configuration (takes precedence over config_path)
        """
        # Load configuration
        self.config = config or Config(config_path)

        # Setup logging
        self._setup_logging()
        self.logger = logging.getLogger(__name__)
        self.logger.info("=" * 50)
        self.logger.info("ZenFocus starting...")
        self.logger.info("=" * 50)

        self.notifications = NotificationCenter(timeout=self.config.get('notifications.timeout', 5))

        # View: new-task input, add button and the list container
        self.input_field = ViewNode(Role.INPUT, value='')
        self.add_button = ViewNode(Role.BUTTON, text='Add')
        self.container = ViewNode(Role.CONTAINER)

        # Core
        self.storage = SlotStorage(self.config.get('storage.directory'))
        self.store = TaskStore(self.storage, slot=self.config.get('storage.slot', 'zenFocusTasks'))
        self.reconciler = Reconciler(self.container)
        self.controller = TaskController(
            self.store,
            self.reconciler,
            input_field=self.input_field,
            add_button=self.add_button,
            notify=self.notifications.notify
        )

        self.screen = TaskScreen(
            width=self.config.get('display.width', 800),
            height=self.config.get('display.height', 480),
            font_size=self.config.get('display.font_size', 22),
            notifications=self.notifications
        )

        self.web_server = None
        self.running = False

    def _setup_logging(self):
        """Configure logging"""
        log_level = getattr(logging, str(self.config.get('logging.level', 'INFO')).upper(), logging.INFO)
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        handlers = []

        # Console handler
        if self.config.get('logging.console', True):
            handlers.append(logging.StreamHandler())

        # File handler
        log_file = self.config.get('logging.file')
        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))

        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=handlers or None
        )

    def start(self, block: bool = True):
        """
        Start the application

        Args:
            block: Wait for a shutdown signal after starting the web server
        """
        try:
            self.controller.start()

            self.web_server = TasksWebServer(
                self.controller,
                notifications=self.notifications,
                screen=self.screen,
                host=self.config.get('web.host', '0.0.0.0'),
                port=self.config.get('web.port', 5000)
            )
            self.running = True

            if not block:
                return

            self.web_server.run()
            self.logger.info(f"Web interface available at http://<host>:{self.web_server.port}")
            self.logger.info("Press Ctrl+C to exit")

            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)
            signal.pause()

        except KeyboardInterrupt:
            self.logger.info("Received interrupt signal")
            self.stop()

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals"""
        self.logger.info(f"Received signal {signum}")
        self.stop()
        sys.exit(0)

    def stop(self):
        """Clean shutdown"""
        if not self.running:
            return
        self.logger.info("Shutting down...")
        self.running = False
        self.logger.info("ZenFocus stopped")


def main():
    """Main entry point"""
    # Determine config path
    if len(sys.argv) > 1:
        config_path = sys.argv[1]
    else:
        config_path = os.environ.get(
            'ZENFOCUS_CONFIG',
            os.path.join(os.path.dirname(__file__), '../config/config.yaml')
        )

    # Ensure config exists
    if not os.path.exists(config_path):
        print(f"ERROR: Configuration file not found: {config_path}")
        print(f"Usage: python3 {sys.argv[0]} [config_path]")
        sys.exit(1)

    # Create and start application
    app = ZenFocusApp(config_path)
    app.start()


if __name__ == '__main__':
    main()
