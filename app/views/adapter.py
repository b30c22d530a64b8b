"""Boundary between the poll loop and whatever draws the menu.

The poll loop only talks to a MenuAdapter. Every method must be
idempotent and safe to call from the poll thread; implementations that
drive a real toolkit are responsible for hopping onto the UI thread.
"""
from app.menu_state import MenuEntry


class MenuAdapter:
    """Interface consumed by the poll loop and the controller.

    The base implementation does nothing, which is also what a headless
    run wants.
    """

    def create_or_update_entry(self, entry: MenuEntry) -> None:
        """Create the item for entry.id, or refresh its title and tooltip."""

    def show_entry(self, entry_id: str) -> None:
        pass

    def hide_entry(self, entry_id: str) -> None:
        pass

    def set_title(self, title: str) -> None:
        """Set the menu bar title."""

    def set_status(self, status: str) -> None:
        """Reflect poll health: UI.STATUS_LOADING, STATUS_OK or STATUS_STALE."""
