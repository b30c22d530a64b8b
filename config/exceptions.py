"""Custom exception hierarchy for Port Monitor.

Every error raised by the application derives from PortMonitorError so
callers can catch the whole family with one except clause.
"""

from typing import Optional


class PortMonitorError(Exception):
    """Base exception for all Port Monitor errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigurationError(PortMonitorError):
    """Settings and configuration errors.

    Raised for invalid values in settings.json, e.g. a negative poll
    interval or an unknown sampler backend.

    Examples:
        >>> raise ConfigurationError("Invalid poll interval", {"value": -1})
    """

    pass


class SubprocessError(PortMonitorError):
    """Subprocess execution errors.

    Raised when a command is not allow-listed, cannot be found, fails to
    start, or exceeds its timeout.

    Attributes:
        command: The command that failed.
        returncode: Exit code if available.
        stdout: Standard output if available.
        stderr: Standard error if available.
    """

    def __init__(
        self,
        message: str,
        command: Optional[list] = None,
        returncode: Optional[int] = None,
        stdout: Optional[str] = None,
        stderr: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        details = details or {}
        if command:
            details["command"] = command
        if returncode is not None:
            details["returncode"] = returncode
        if stdout:
            details["stdout"] = stdout[:500]  # Truncate long output
        if stderr:
            details["stderr"] = stderr[:500]

        super().__init__(message, details)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class SamplerTransportError(PortMonitorError):
    """The socket source could not produce a sample.

    Covers a listing command that failed to start, timed out or exited
    abnormally, and platform APIs that refused access. The poll loop
    skips the cycle and keeps the previous menu.

    Examples:
        >>> raise SamplerTransportError("lsof timed out", {"timeout": 10.0})
    """

    pass


class ParseSkip(PortMonitorError):
    """A single sample line was rejected by the parser.

    Only ever raised by parse_line(); parse_sample() catches it per line
    so one malformed line never aborts a whole sample.
    """

    def __init__(self, message: str, line: str = ""):
        super().__init__(message, {"line": line[:200]} if line else None)
        self.line = line
