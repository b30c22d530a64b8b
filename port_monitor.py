#!/usr/bin/env python3
"""
Port Monitor - macOS Menu Bar Application
Lists the TCP ports listening on this machine and the process behind each.
"""
import signal
import sys
from pathlib import Path

import rumps

from app.controller import AppController
from app.dependencies import create_dependencies
from app.views.icons import IconGenerator
from app.views.tray import TrayMenuAdapter
from config import INTERVALS, STORAGE, UI, ConfigurationError, get_logger, setup_logging
from config.settings import MonitorSettings, load_settings

logger = get_logger(__name__)


class PortMonitorApp(rumps.App):
    """Menu bar application listing listening ports."""

    def __init__(self, settings: MonitorSettings):
        super().__init__(
            name=UI.APP_NAME,
            title=UI.LOADING_TITLE,
            quit_button=None
        )
        self._icons = IconGenerator()
        self.icon = self._icons.status_icon(UI.STATUS_LOADING)

        quit_item = rumps.MenuItem(UI.QUIT_TITLE, callback=self._quit)
        quit_item._menuitem.setToolTip_(UI.QUIT_TOOLTIP)
        self.menu = [quit_item]

        self._deps = create_dependencies(settings=settings)
        self._adapter = TrayMenuAdapter(self, on_click=self._on_entry_click, icons=self._icons)
        self._controller = AppController(self._deps, self._adapter)

        # Menu items only get their NSMenuItem once rumps.run() is underway
        self._startup_timer = rumps.Timer(self._delayed_start, INTERVALS.STARTUP_DELAY_SECONDS)
        self._startup_timer.start()
        logger.info("PortMonitorApp initialized")

    def _delayed_start(self, timer):
        timer.stop()
        self._controller.start()

    def _on_entry_click(self, entry_id: str) -> None:
        self._controller.handle_click(entry_id)

    def shutdown(self) -> None:
        self._controller.stop()
        self._deps.close()
        self._icons.cleanup()

    def _quit(self, _):
        logger.info("Application shutting down...")
        self.shutdown()
        logger.info("Shutdown complete")
        rumps.quit_application()


def main():
    """Entry point for the application."""
    data_dir = Path.home() / STORAGE.DATA_DIR_NAME
    try:
        settings = load_settings(data_dir)
    except ConfigurationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(data_dir=data_dir, debug=settings.debug, console_output=True)
    logger.info("Port Monitor starting...")

    app = None

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, quitting...")
        if app:
            app.shutdown()
        rumps.quit_application()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    try:
        app = PortMonitorApp(settings)
        app.run()
    except Exception as e:
        logger.critical(f"Application crashed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
