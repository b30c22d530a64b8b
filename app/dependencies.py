"""Dependency injection container for Port Monitor.

Builds the components the controller needs in one place, so tests can
swap any of them for a mock.

Usage:
    from app.dependencies import create_dependencies

    deps = create_dependencies()
    raw = deps.sampler.sample()
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from app.events import EventBus
from app.menu_state import MenuStateStore
from config import get_logger
from config.settings import MonitorSettings, load_settings
from monitor.sampler import SocketSampler, create_sampler

logger = get_logger(__name__)


@dataclass
class AppDependencies:
    """Container for all application dependencies."""

    settings: MonitorSettings
    sampler: SocketSampler
    store: MenuStateStore
    event_bus: EventBus

    def __post_init__(self):
        logger.debug("AppDependencies container created")

    def close(self) -> None:
        """Shut down the sampler and the event bus worker."""
        self.sampler.close()
        self.event_bus.shutdown()
        logger.debug("AppDependencies closed")


def create_dependencies(
    data_dir: Optional[Path] = None,
    settings: Optional[MonitorSettings] = None,
    event_bus: Optional[EventBus] = None,
) -> AppDependencies:
    """Create all application dependencies.

    Args:
        data_dir: Directory holding settings.json. Ignored if settings is given.
        settings: Pre-loaded settings.
        event_bus: Existing event bus, or a new async one is created.
    """
    if settings is None:
        settings = load_settings(data_dir)

    deps = AppDependencies(
        settings=settings,
        sampler=create_sampler(settings),
        store=MenuStateStore(),
        event_bus=event_bus or EventBus(async_mode=True),
    )
    logger.info("All dependencies created successfully")
    return deps
