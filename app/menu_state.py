"""Shared menu state: entries, click signals, and the lock-guarded store.

The poll loop and the UI click path both touch the store. The store owns
the only lock, and entries are immutable, so an entry can only change by
being replaced through upsert().

Usage:
    from app.menu_state import MenuEntry, MenuStateStore

    store = MenuStateStore()
    store.upsert(MenuEntry(id="IPv4|8080|123", title="8080 -- curl", tooltip="PID: 123"))
    store.dispatch_click("IPv4|8080|123")
"""
import queue
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from config import get_logger

logger = get_logger(__name__)


class ClickSignal:
    """Single-slot, never-blocking click notification.

    At most one notification is pending; sending while one is pending
    drops the new one, since a second unread click carries no extra
    information.
    """

    def __init__(self):
        self._slot: queue.Queue = queue.Queue(maxsize=1)

    def send(self) -> bool:
        """Queue a notification. Returns False if one was already pending."""
        try:
            self._slot.put_nowait(None)
            return True
        except queue.Full:
            return False

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Consume a pending notification, waiting up to timeout seconds."""
        try:
            self._slot.get(timeout=timeout)
            return True
        except queue.Empty:
            return False

    def pending(self) -> bool:
        return not self._slot.empty()


@dataclass(frozen=True)
class MenuEntry:
    """One menu item as the UI should display it.

    Attributes:
        id: Stable socket identity, e.g. "IPv4|8080|123".
        title: "<port> -- <process name>".
        tooltip: "PID: <pid>".
        visible: Whether the item is currently shown.
        disabled: Passed through to the UI, not set by the poll loop.
        checked: Passed through to the UI, not set by the poll loop.
        click_signal: Created with the entry and kept by every update.
    """
    id: str
    title: str
    tooltip: str
    visible: bool = True
    disabled: bool = False
    checked: bool = False
    click_signal: ClickSignal = field(default_factory=ClickSignal, compare=False, repr=False)


class MenuStateStore:
    """Thread-safe mapping of entry id to MenuEntry."""

    def __init__(self, entries: Iterable[MenuEntry] = ()):
        self._lock = threading.Lock()
        self._entries: Dict[str, MenuEntry] = {entry.id: entry for entry in entries}

    def upsert(self, entry: MenuEntry) -> None:
        """Insert or replace an entry."""
        with self._lock:
            self._entries[entry.id] = entry

    def lookup(self, entry_id: str) -> Optional[MenuEntry]:
        with self._lock:
            return self._entries.get(entry_id)

    def snapshot_identities(self) -> Set[str]:
        with self._lock:
            return set(self._entries)

    def snapshot(self) -> Dict[str, MenuEntry]:
        """Copy of the mapping, safe to use without holding the lock."""
        with self._lock:
            return dict(self._entries)

    def visible_count(self) -> int:
        with self._lock:
            return sum(1 for entry in self._entries.values() if entry.visible)

    def dispatch_click(self, entry_id: str) -> bool:
        """Notify an entry's click signal without blocking.

        Returns:
            True if a notification was queued, False if the id is unknown
            or a notification was already pending.
        """
        entry = self.lookup(entry_id)
        if entry is None:
            logger.debug(f"Click for unknown entry: {entry_id}")
            return False
        return entry.click_signal.send()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        with self._lock:
            return entry_id in self._entries
