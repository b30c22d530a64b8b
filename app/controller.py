"""Application controller for Port Monitor.

Wires the poll loop to the menu adapter and keeps UI concerns (title,
status icon, clicks) out of the poll loop itself.

Usage:
    from app.controller import AppController
    from app.dependencies import create_dependencies

    controller = AppController(create_dependencies(), adapter)
    controller.start()
"""
from typing import Optional

from app.dependencies import AppDependencies
from app.events import Event, EventType
from app.poller import PollLoop
from app.views.adapter import MenuAdapter
from config import UI, get_logger

logger = get_logger(__name__)


class AppController:
    """Owns the poll loop and reacts to its events.

    Attributes:
        deps: The dependency container.
        adapter: The menu the results are drawn on.
        poll_loop: The background poll loop.
    """

    def __init__(self, deps: AppDependencies, adapter: Optional[MenuAdapter] = None):
        self.deps = deps
        self.adapter = adapter or MenuAdapter()
        self.event_bus = deps.event_bus
        self.poll_loop = PollLoop(
            sampler=deps.sampler,
            store=deps.store,
            adapter=self.adapter,
            interval=deps.settings.poll_interval,
            event_bus=self.event_bus,
        )
        self._running = False

        self.event_bus.subscribe(EventType.POLL_COMPLETED, self._on_poll_completed)
        self.event_bus.subscribe(EventType.POLL_FAILED, self._on_poll_failed)
        logger.info("AppController initialized")

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Show the loading state and start polling."""
        if self._running:
            return
        logger.info("Starting AppController...")
        self._running = True
        self.adapter.set_title(UI.LOADING_TITLE)
        self.adapter.set_status(UI.STATUS_LOADING)
        self.poll_loop.start()

    def stop(self) -> None:
        if not self._running:
            return
        logger.info("Stopping AppController...")
        self._running = False
        self.poll_loop.stop()
        logger.info("AppController stopped")

    def handle_click(self, entry_id: str) -> bool:
        """Route a menu click. Never blocks the UI thread."""
        queued = self.deps.store.dispatch_click(entry_id)
        if not queued:
            logger.debug(f"Click on {entry_id} dropped")
        return queued

    @staticmethod
    def title_for(count: int) -> str:
        return UI.TITLE_FORMAT.format(count=count)

    def _on_poll_completed(self, event: Event) -> None:
        self.adapter.set_title(self.title_for(event.data.get('visible', 0)))
        self.adapter.set_status(UI.STATUS_OK)

    def _on_poll_failed(self, event: Event) -> None:
        # Title keeps the last good count; only the icon signals staleness
        self.adapter.set_status(UI.STATUS_STALE)
