"""rumps implementation of the menu adapter.

Socket entries are inserted above the Quit item. Each item is keyed in
the rumps menu by its entry id rather than its title, because two
processes can share a title.

AppKit must only be touched from the main thread, while the poll loop
calls the adapter from its own thread, so every change is queued on the
main operation queue.
"""
import threading
from typing import Callable, Dict, Optional

import rumps

from app.menu_state import MenuEntry
from app.views.adapter import MenuAdapter
from app.views.icons import IconGenerator
from config import UI, get_logger

logger = get_logger(__name__)


def run_on_main_thread(func: Callable[[], None]) -> None:
    """Queue func on the AppKit main thread."""
    from Foundation import NSOperationQueue

    NSOperationQueue.mainQueue().addOperationWithBlock_(func)


class TrayMenuAdapter(MenuAdapter):
    """Draws menu entries on a rumps.App.

    Args:
        app: The running rumps application.
        on_click: Called with the entry id when an entry is clicked.
        icons: Icon generator for the status icon.
        dispatch: How UI work reaches the main thread; tests pass a
            function that runs it inline.
    """

    def __init__(
        self,
        app: rumps.App,
        on_click: Callable[[str], None],
        icons: Optional[IconGenerator] = None,
        dispatch: Callable[[Callable[[], None]], None] = run_on_main_thread,
    ):
        self._app = app
        self._on_click = on_click
        self._icons = icons or IconGenerator()
        self._dispatch = dispatch
        self._items: Dict[str, rumps.MenuItem] = {}
        self._lock = threading.Lock()

    def create_or_update_entry(self, entry: MenuEntry) -> None:
        self._dispatch(lambda: self._create_or_update(entry))

    def show_entry(self, entry_id: str) -> None:
        self._dispatch(lambda: self._set_hidden(entry_id, False))

    def hide_entry(self, entry_id: str) -> None:
        self._dispatch(lambda: self._set_hidden(entry_id, True))

    def set_title(self, title: str) -> None:
        def update():
            self._app.title = title
        self._dispatch(update)

    def set_status(self, status: str) -> None:
        def update():
            self._app.icon = self._icons.status_icon(status)
        self._dispatch(update)

    def get_item(self, entry_id: str) -> Optional[rumps.MenuItem]:
        with self._lock:
            return self._items.get(entry_id)

    def _create_or_update(self, entry: MenuEntry) -> None:
        with self._lock:
            item = self._items.get(entry.id)
            if item is None:
                # Title doubles as the rumps menu key, so insert under the id first
                item = rumps.MenuItem(entry.id, callback=self._make_callback(entry.id))
                self._app.menu.insert_before(UI.QUIT_TITLE, item)
                self._items[entry.id] = item
                logger.debug(f"Created menu item {entry.id}")

        item.title = entry.title
        item.state = 1 if entry.checked else 0
        item._menuitem.setToolTip_(entry.tooltip)
        item._menuitem.setEnabled_(not entry.disabled)

    def _set_hidden(self, entry_id: str, hidden: bool) -> None:
        item = self.get_item(entry_id)
        if item is None:
            logger.debug(f"No menu item for {entry_id}")
            return
        item._menuitem.setHidden_(hidden)

    def _make_callback(self, entry_id: str) -> Callable:
        def callback(_sender):
            self._on_click(entry_id)
        return callback
