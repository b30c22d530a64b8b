"""Centralized constants and configuration for Port Monitor.

Every interval, file name, display format and color used by the
application lives here so the rest of the code never hard-codes them.

Usage:
    from config.constants import INTERVALS, UI

    interval = INTERVALS.POLL_SECONDS
    title = UI.TITLE_FORMAT.format(count=3)
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Intervals:
    """Time intervals for various operations (in seconds)."""
    # Socket polling
    POLL_SECONDS: float = 15.0

    # Subprocess timeouts
    SUBPROCESS_TIMEOUT_SECONDS: float = 5.0
    SAMPLER_TIMEOUT_SECONDS: float = 10.0

    # Startup / shutdown
    STARTUP_DELAY_SECONDS: float = 0.5
    SHUTDOWN_JOIN_SECONDS: float = 2.0


@dataclass(frozen=True)
class StorageConfig:
    """Storage and file-related configuration."""
    DATA_DIR_NAME: str = ".port-monitor"
    SETTINGS_FILE: str = "settings.json"
    LOG_FILE: str = "port_monitor.log"

    # Log rotation
    LOG_MAX_BYTES: int = 5_000_000  # 5MB
    LOG_BACKUP_COUNT: int = 3

    # Temp directories
    ICON_TEMP_DIR: str = "portmon-icons"


@dataclass(frozen=True)
class SamplerConfig:
    """Socket sampling configuration."""
    # -n/-P keep addresses and ports numeric, -sTCP:LISTEN filters by state
    LSOF_COMMAND: Tuple[str, ...] = ("lsof", "-nP", "-iTCP", "-sTCP:LISTEN")

    # lsof exits 1 both when nothing matches and on non-fatal warnings
    LSOF_OK_RETURNCODES: Tuple[int, ...] = (0, 1)

    DEFAULT_BACKEND: str = "lsof"
    BACKENDS: Tuple[str, ...] = ("lsof", "psutil")


@dataclass(frozen=True)
class Colors:
    """Status icon colors as RGBA tuples (0-255) for PIL."""
    GREEN_RGBA: Tuple[int, int, int, int] = (52, 199, 89, 255)    # macOS green
    YELLOW_RGBA: Tuple[int, int, int, int] = (255, 204, 0, 255)   # macOS yellow
    GRAY_RGBA: Tuple[int, int, int, int] = (142, 142, 147, 255)   # macOS gray


@dataclass(frozen=True)
class UIConfig:
    """UI-related configuration."""
    APP_NAME: str = "PortMon"

    # Menu bar title
    LOADING_TITLE: str = "Loading..."
    TITLE_FORMAT: str = "Utilized Ports: {count}"

    # Socket entries
    ENTRY_TITLE_FORMAT: str = "{port} -- {name}"
    ENTRY_TOOLTIP_FORMAT: str = "PID: {pid}"
    UNKNOWN_PID_TOOLTIP: str = "PID: unknown"

    # Quit item
    QUIT_TITLE: str = "Quit"
    QUIT_TOOLTIP: str = "Quit the whole app"

    # Status icon
    STATUS_ICON_SIZE: int = 18
    STATUS_LOADING: str = "loading"
    STATUS_OK: str = "ok"
    STATUS_STALE: str = "stale"


# Global instances - import these
INTERVALS = Intervals()
STORAGE = StorageConfig()
SAMPLER = SamplerConfig()
COLORS = Colors()
UI = UIConfig()


# Allowed commands for subprocess safety
ALLOWED_SUBPROCESS_COMMANDS = frozenset({
    'lsof',
})
