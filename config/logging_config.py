"""Logging configuration for Port Monitor.

Provides a rotating log file in the data directory plus optional
colored console output. Every module logs through get_logger().

Usage:
    from config.logging_config import setup_logging, get_logger

    # Initialize at app startup
    setup_logging(data_dir=Path.home() / ".port-monitor")

    # Get logger in any module
    logger = get_logger(__name__)
    logger.info("Poll loop started")
"""
import copy
import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from config.constants import STORAGE

ROOT_LOGGER_NAME = 'portmon'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Module-level logger cache
_loggers: Dict[str, logging.Logger] = {}
_initialized: bool = False


class PortMonitorFormatter(logging.Formatter):
    """Console formatter that colors the level name on a TTY."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors and sys.stderr.isatty():
            # Color a copy so the file handler still sees the plain level name
            record = copy.copy(record)
            color = self.COLORS.get(record.levelname, '')
            record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logging(
    data_dir: Optional[Path] = None,
    debug: bool = False,
    console_output: bool = True,
    log_to_file: bool = True
) -> logging.Logger:
    """Initialize the logging system.

    Safe to call more than once; later calls replace the handlers.

    Args:
        data_dir: Directory for the log file. Defaults to ~/.port-monitor/
        debug: Enable debug-level logging.
        console_output: Also log to stderr.
        log_to_file: Write logs to a rotating file.

    Returns:
        The root logger for the application.
    """
    global _initialized

    if data_dir is None:
        data_dir = Path.home() / STORAGE.DATA_DIR_NAME

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.handlers.clear()

    if log_to_file:
        data_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            data_dir / STORAGE.LOG_FILE,
            maxBytes=STORAGE.LOG_MAX_BYTES,
            backupCount=STORAGE.LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
        console_handler.setFormatter(PortMonitorFormatter(use_colors=True))
        root_logger.addHandler(console_handler)

    root_logger.info(
        f"Logging initialized - level={'DEBUG' if debug else 'INFO'}, "
        f"file={log_to_file}, console={console_output}"
    )

    _initialized = True
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a child of the 'portmon' logger for a module.

    Only the last two dotted parts of the name are kept, so
    "app.poller" logs as "portmon.app.poller".

    Args:
        name: Usually __name__ of the calling module.
    """
    short_name = '.'.join(name.split('.')[-2:])

    if short_name not in _loggers:
        if not _initialized:
            # setup_logging() not called yet (e.g. under pytest)
            logging.basicConfig(level=logging.INFO)
        _loggers[short_name] = logging.getLogger(f'{ROOT_LOGGER_NAME}.{short_name}')

    return _loggers[short_name]


def log_exception(logger: logging.Logger, message: str, exc: Exception) -> None:
    """Log an exception with full traceback and context."""
    logger.error(
        f"{message}: {type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={'exception_type': type(exc).__name__}
    )


def log_subprocess_call(
    logger: logging.Logger,
    command: list,
    returncode: int,
    duration_ms: float,
    success: bool
) -> None:
    """Log a subprocess call with timing information."""
    level = logging.DEBUG if success else logging.WARNING
    logger.log(
        level,
        f"Subprocess: {' '.join(command[:3])}{'...' if len(command) > 3 else ''} "
        f"-> rc={returncode}, {duration_ms:.1f}ms"
    )


class LogContext:
    """Context manager for logging operation duration.

    Example:
        >>> with LogContext(logger, "Poll cycle"):
        ...     loop.run_once()
        # Logs: "Poll cycle completed in 42ms"
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None

    @property
    def elapsed_ms(self) -> float:
        if self.start_time is None:
            return 0.0
        return (time.monotonic() - self.start_time) * 1000

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.log(self.level, f"{self.operation} starting...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.warning(
                f"{self.operation} failed after {self.elapsed_ms:.0f}ms: {exc_val}"
            )
        else:
            self.logger.log(self.level, f"{self.operation} completed in {self.elapsed_ms:.0f}ms")
        return False  # Don't suppress exceptions
