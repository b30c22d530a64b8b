"""Subprocess execution with safety checks and timing.

Security Note:
    Commands are validated against ALLOWED_SUBPROCESS_COMMANDS and always
    run with shell=False, so sample commands can never be used for shell
    injection.

Usage:
    from config.subprocess_runner import safe_run

    result = safe_run(['lsof', '-nP', '-iTCP', '-sTCP:LISTEN'], timeout=10.0)
"""

# nosec B404 - subprocess usage is required and validated via allowlist
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from config.constants import ALLOWED_SUBPROCESS_COMMANDS, INTERVALS
from config.exceptions import SubprocessError
from config.logging_config import get_logger, log_subprocess_call

logger = get_logger(__name__)


def is_allowed(cmd: List[str]) -> bool:
    """Check the base command name against the allowlist."""
    return Path(cmd[0]).name in ALLOWED_SUBPROCESS_COMMANDS


def safe_run(
    cmd: List[str], timeout: Optional[float] = None, check_allowed: bool = True, **kwargs
) -> subprocess.CompletedProcess:
    """Run a subprocess command with safety checks.

    The child is killed and reaped when the timeout expires, so a hung
    command never outlives the call.

    Args:
        cmd: Command and arguments as list.
        timeout: Command timeout in seconds.
        check_allowed: If True, validate command is in allowlist.
        **kwargs: Additional arguments passed to subprocess.run().

    Returns:
        subprocess.CompletedProcess with text output.

    Raises:
        SubprocessError: If command is not allowed, not found, fails to
            start, times out, or writes output that is not valid UTF-8.
    """
    if not cmd:
        raise SubprocessError("Empty command", command=cmd)

    if check_allowed and not is_allowed(cmd):
        raise SubprocessError(
            f"Command not in allowlist: {Path(cmd[0]).name}",
            command=cmd,
            details={"allowed": sorted(ALLOWED_SUBPROCESS_COMMANDS)},
        )

    timeout = timeout or INTERVALS.SUBPROCESS_TIMEOUT_SECONDS
    kwargs.setdefault("capture_output", True)
    kwargs.setdefault("text", True)
    kwargs.setdefault("encoding", "utf-8")
    kwargs["timeout"] = timeout

    start_time = time.monotonic()
    try:
        result = subprocess.run(cmd, **kwargs)  # nosec B603 - Commands validated via allowlist
    except subprocess.TimeoutExpired as e:
        duration_ms = (time.monotonic() - start_time) * 1000
        logger.warning(f"Command timed out after {duration_ms:.0f}ms: {cmd}")
        raise SubprocessError(
            f"Command timed out after {timeout}s", command=cmd, details={"timeout": timeout}
        ) from e
    except FileNotFoundError as e:
        logger.error(f"Command not found: {cmd[0]}")
        raise SubprocessError(f"Command not found: {cmd[0]}", command=cmd) from e
    except UnicodeDecodeError as e:
        # Undecodable output is rejected rather than passed on garbled
        logger.warning(f"Command produced undecodable output: {cmd}: {e}")
        raise SubprocessError(
            f"Undecodable output: {e.reason}", command=cmd, details={"position": e.start}
        ) from e
    except OSError as e:
        logger.error(f"Subprocess error for {cmd}: {e}")
        raise SubprocessError(f"Subprocess error: {e}", command=cmd) from e

    duration_ms = (time.monotonic() - start_time) * 1000
    log_subprocess_call(
        logger, cmd, result.returncode, duration_ms, success=(result.returncode == 0)
    )
    return result
