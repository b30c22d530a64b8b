"""Socket samplers: obtain a raw snapshot of listening sockets.

Every sampler returns lsof-shaped text so the parser never needs to know
where a sample came from. An empty string is a valid sample meaning no
socket is listening.

Usage:
    from monitor.sampler import create_sampler

    sampler = create_sampler(settings)
    raw = sampler.sample()
"""
import socket
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Iterable, List, Optional, Sequence

import psutil

from config import INTERVALS, SAMPLER, SamplerTransportError, SubprocessError, get_logger
from config.subprocess_runner import safe_run

logger = get_logger(__name__)


class SocketSampler:
    """Base class for listening-socket sources."""

    name = "base"

    def __init__(self, timeout: float = INTERVALS.SAMPLER_TIMEOUT_SECONDS):
        self.timeout = timeout

    def sample(self) -> str:
        """Return the current listening sockets as lsof-shaped text.

        Raises:
            SamplerTransportError: If the source failed or timed out.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any worker resources. Safe to call more than once."""


class LsofSampler(SocketSampler):
    """Samples by running lsof with its listening-state filter."""

    name = "lsof"

    def __init__(
        self,
        timeout: float = INTERVALS.SAMPLER_TIMEOUT_SECONDS,
        command: Sequence[str] = SAMPLER.LSOF_COMMAND,
        ok_returncodes: Iterable[int] = SAMPLER.LSOF_OK_RETURNCODES,
        check_allowed: bool = True,
    ):
        super().__init__(timeout)
        self.command = list(command)
        self.ok_returncodes = frozenset(ok_returncodes)
        self.check_allowed = check_allowed

    def sample(self) -> str:
        try:
            result = safe_run(self.command, timeout=self.timeout, check_allowed=self.check_allowed)
        except SubprocessError as e:
            raise SamplerTransportError(f"Socket listing failed: {e.message}", e.details) from e

        # lsof exits 1 on permission warnings but still prints what it could see
        if result.stdout.strip():
            return result.stdout

        if result.returncode in self.ok_returncodes:
            logger.debug("Socket listing returned no sockets")
            return ""

        raise SamplerTransportError(
            f"Socket listing exited with rc={result.returncode}",
            {
                "command": self.command,
                "returncode": result.returncode,
                "stderr": (result.stderr or "")[:500],
            },
        )


class PsutilSampler(SocketSampler):
    """Samples through psutil.net_connections().

    On macOS this needs root; without it psutil raises AccessDenied,
    which surfaces as a SamplerTransportError.
    """

    name = "psutil"

    def __init__(self, timeout: float = INTERVALS.SAMPLER_TIMEOUT_SECONDS):
        super().__init__(timeout)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="PsutilSampler")
        self._pending: Optional[Future] = None

    def sample(self) -> str:
        # A hung enumeration keeps the only worker; never queue behind it
        if self._pending is not None and not self._pending.done():
            raise SamplerTransportError(
                "Previous socket enumeration still running", {"timeout": self.timeout}
            )

        try:
            future = self._executor.submit(self._collect)
        except RuntimeError as e:
            raise SamplerTransportError(f"Sampler is closed: {e}") from e
        self._pending = future

        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError as e:
            future.cancel()
            raise SamplerTransportError(
                f"Socket enumeration timed out after {self.timeout}s", {"timeout": self.timeout}
            ) from e
        except (psutil.Error, OSError) as e:
            raise SamplerTransportError(f"Socket enumeration failed: {e}") from e
        except Exception as e:
            raise SamplerTransportError(
                f"Socket enumeration failed unexpectedly: {type(e).__name__}: {e}"
            ) from e

    def _collect(self) -> str:
        lines: List[str] = []
        for conn in psutil.net_connections(kind="tcp"):
            if conn.status != psutil.CONN_LISTEN or not conn.laddr:
                continue
            lines.append(self._format_line(conn))
        return "\n".join(lines) + ("\n" if lines else "")

    def _format_line(self, conn) -> str:
        if conn.family == socket.AF_INET:
            family = "IPv4"
            host = "*" if conn.laddr.ip == "0.0.0.0" else conn.laddr.ip  # nosec B104 - display only
        else:
            family = "IPv6"
            host = f"[{conn.laddr.ip}]"

        name = self._process_name(conn.pid).replace(" ", "\\x20")
        pid = str(conn.pid) if conn.pid else "-"
        return f"{name} {pid} - - {family} - - TCP {host}:{conn.laddr.port} (LISTEN)"

    @staticmethod
    def _process_name(pid: Optional[int]) -> str:
        if not pid:
            return "-"
        try:
            return psutil.Process(pid).name() or "-"
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return "-"

    def close(self) -> None:
        self._executor.shutdown(wait=False)


def create_sampler(settings) -> SocketSampler:
    """Build the sampler named by settings.sampler."""
    if settings.sampler == PsutilSampler.name:
        sampler: SocketSampler = PsutilSampler(timeout=settings.sampler_timeout)
    else:
        sampler = LsofSampler(timeout=settings.sampler_timeout)
    logger.info(f"Using {sampler.name} sampler (timeout={sampler.timeout}s)")
    return sampler
