"""Application module for Port Monitor.

Contains the main application components:
- MenuStateStore: Shared, lock-guarded menu entries
- reconcile: Sample-to-menu diffing
- PollLoop: Background sampling loop
- EventBus: Internal event communication
- AppController: Wires the poll loop to the menu
"""

from app.controller import AppController
from app.dependencies import AppDependencies, create_dependencies
from app.events import Event, EventBus, EventType
from app.menu_state import ClickSignal, MenuEntry, MenuStateStore
from app.poller import CycleResult, PollLoop, PollState
from app.reconciler import EffectKind, ReconcileResult, SideEffect, reconcile

__all__ = [
    "AppController",
    "AppDependencies",
    "ClickSignal",
    "CycleResult",
    "EffectKind",
    "Event",
    "EventBus",
    "EventType",
    "MenuEntry",
    "MenuStateStore",
    "PollLoop",
    "PollState",
    "ReconcileResult",
    "SideEffect",
    "create_dependencies",
    "reconcile",
]
