"""Configuration module for Port Monitor.

Provides constants, settings, logging, exceptions, and subprocess helpers.
"""
from config.constants import (
    ALLOWED_SUBPROCESS_COMMANDS,
    COLORS,
    INTERVALS,
    SAMPLER,
    STORAGE,
    UI,
    Colors,
    Intervals,
    SamplerConfig,
    StorageConfig,
    UIConfig,
)
from config.exceptions import (
    ConfigurationError,
    ParseSkip,
    PortMonitorError,
    SamplerTransportError,
    SubprocessError,
)
from config.logging_config import get_logger, setup_logging

__all__ = [
    # Constants
    "INTERVALS",
    "STORAGE",
    "SAMPLER",
    "COLORS",
    "UI",
    "Intervals",
    "StorageConfig",
    "SamplerConfig",
    "Colors",
    "UIConfig",
    "ALLOWED_SUBPROCESS_COMMANDS",
    # Exceptions
    "PortMonitorError",
    "ConfigurationError",
    "SubprocessError",
    "SamplerTransportError",
    "ParseSkip",
    # Logging
    "setup_logging",
    "get_logger",
]
