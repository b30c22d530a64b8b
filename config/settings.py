"""User settings for Port Monitor.

Settings are read once at startup from ~/.port-monitor/settings.json.
The file is optional and never written by the application.

Example settings.json:
    {"poll_interval": 30, "sampler_timeout": 5, "sampler": "psutil"}
"""
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from config.constants import INTERVALS, SAMPLER, STORAGE
from config.exceptions import ConfigurationError
from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class MonitorSettings:
    """Runtime settings."""
    poll_interval: float = INTERVALS.POLL_SECONDS      # seconds between samples
    sampler_timeout: float = INTERVALS.SAMPLER_TIMEOUT_SECONDS
    sampler: str = SAMPLER.DEFAULT_BACKEND             # "lsof" or "psutil"
    debug: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check values, clamping the sampler timeout to the poll interval.

        Raises:
            ConfigurationError: For non-positive durations or an unknown sampler.
        """
        for name in ("poll_interval", "sampler_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number", {name: value})

        if self.sampler not in SAMPLER.BACKENDS:
            raise ConfigurationError(
                f"Unknown sampler: {self.sampler}",
                {"sampler": self.sampler, "allowed": list(SAMPLER.BACKENDS)},
            )

        if self.sampler_timeout > self.poll_interval:
            logger.warning(
                f"sampler_timeout {self.sampler_timeout}s exceeds poll_interval "
                f"{self.poll_interval}s, clamping"
            )
            self.sampler_timeout = self.poll_interval

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MonitorSettings':
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            logger.warning(f"Ignoring unknown settings: {sorted(unknown)}")
        return cls(
            poll_interval=data.get("poll_interval", INTERVALS.POLL_SECONDS),
            sampler_timeout=data.get("sampler_timeout", INTERVALS.SAMPLER_TIMEOUT_SECONDS),
            sampler=data.get("sampler", SAMPLER.DEFAULT_BACKEND),
            debug=bool(data.get("debug", False)),
        )


def load_settings(data_dir: Optional[Path] = None) -> MonitorSettings:
    """Load settings from the data directory.

    A missing file yields defaults. An unreadable or malformed file is
    logged and also yields defaults; invalid values are not forgiven.

    Raises:
        ConfigurationError: If the file holds invalid values.
    """
    if data_dir is None:
        data_dir = Path.home() / STORAGE.DATA_DIR_NAME
    settings_file = data_dir / STORAGE.SETTINGS_FILE

    if not settings_file.exists():
        logger.debug(f"No settings file at {settings_file}, using defaults")
        return MonitorSettings()

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {settings_file}: {e}")
        return MonitorSettings()

    if not isinstance(data, dict):
        logger.warning(f"Settings file {settings_file} is not a JSON object, using defaults")
        return MonitorSettings()

    settings = MonitorSettings.from_dict(data)
    logger.info(f"Loaded settings: {settings.to_dict()}")
    return settings
