"""View components for Port Monitor UI.

Contains:
- adapter: The MenuAdapter interface the poll loop draws through
- icons: Status icon generation
- tray: rumps implementation (imported directly, needs macOS)
"""
from app.views.adapter import MenuAdapter
from app.views.icons import IconGenerator

__all__ = [
    "IconGenerator",
    "MenuAdapter",
]
