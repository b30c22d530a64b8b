"""Listening socket records and the sample parser.

A sample is lsof-shaped text, one socket per line, e.g.:

    COMMAND   PID USER   FD   TYPE DEVICE SIZE/OFF NODE NAME
    curl      123 user   4u   IPv4 0x0    0t0      TCP  *:8080 (LISTEN)

The layout differs between lsof versions and platforms, so the parser
treats each line as loose whitespace-separated fields rather than
fixed columns.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from config import ParseSkip, get_logger

logger = get_logger(__name__)

_PID_FIELD = re.compile(r"[0-9]+")
LISTEN_MARKER = "LISTEN"
MAX_PORT = 65535


class ProtocolFamily(Enum):
    """Address family reported for a socket."""
    IPV4 = "IPv4"
    IPV6 = "IPv6"
    OTHER = "other"

    @classmethod
    def from_marker(cls, marker: str) -> "ProtocolFamily":
        for family in (cls.IPV4, cls.IPV6):
            if marker == family.value:
                return family
        return cls.OTHER


@dataclass(frozen=True)
class ListeningSocket:
    """One listening socket from a single sample."""
    port: int
    family: ProtocolFamily
    pid: Optional[int]
    process_name: str

    @property
    def identity(self) -> str:
        """Stable key correlating this socket across samples."""
        pid = self.pid if self.pid is not None else "-"
        return f"{self.family.value}|{self.port}|{pid}"


def _find_family(fields: List[str]) -> Optional[ProtocolFamily]:
    for field in fields:
        family = ProtocolFamily.from_marker(field)
        if family is not ProtocolFamily.OTHER:
            return family
    return None


def _find_pid(fields: List[str]) -> Optional[int]:
    # First field made only of digits. Can misattribute the PID when an
    # earlier field happens to be numeric.
    for field in fields:
        if _PID_FIELD.fullmatch(field):
            return int(field)
    return None


def _find_port(fields: List[str], line: str) -> int:
    for field in fields:
        if ":" in field:
            port_text = field.rsplit(":", 1)[1]
            if not _PID_FIELD.fullmatch(port_text):
                raise ParseSkip(f"Non-numeric port: {port_text!r}", line)
            port = int(port_text)
            if port > MAX_PORT:
                raise ParseSkip(f"Port out of range: {port}", line)
            return port
    raise ParseSkip("No host:port field", line)


def parse_line(line: str) -> ListeningSocket:
    """Parse one sample line.

    Raises:
        ParseSkip: If the line is not an IPv4 listening socket or its
            port cannot be read.
    """
    fields = line.split()
    if not fields:
        raise ParseSkip("Empty line", line)

    if not any(LISTEN_MARKER in field for field in fields):
        raise ParseSkip("No LISTEN state marker", line)

    family = _find_family(fields)
    if family is None:
        raise ParseSkip("No protocol family marker", line)
    if family is not ProtocolFamily.IPV4:
        raise ParseSkip(f"Unsupported family: {family.value}", line)

    return ListeningSocket(
        port=_find_port(fields, line),
        family=family,
        pid=_find_pid(fields),
        # lsof escapes spaces in command names
        process_name=fields[0].replace("\\x20", " "),
    )


def parse_sample(raw_text: str) -> List[ListeningSocket]:
    """Parse a raw sample into listening sockets, in input order.

    Rejected lines are logged at debug level and skipped.
    """
    sockets = []
    for line in raw_text.splitlines():
        if not line.strip():
            continue
        try:
            sockets.append(parse_line(line))
        except ParseSkip as e:
            logger.debug(f"Skipping sample line: {e.message}: {line!r}")
    return sockets
