"""Socket discovery components.

Modules:
    sampler: Raw listening-socket snapshots (lsof or psutil)
    sockets: ListeningSocket records and the sample parser

Example:
    >>> from monitor import LsofSampler, parse_sample
    >>> sockets = parse_sample(LsofSampler().sample())
    >>> print([s.port for s in sockets])
"""
from .sampler import LsofSampler, PsutilSampler, SocketSampler, create_sampler
from .sockets import ListeningSocket, ProtocolFamily, parse_line, parse_sample

__all__ = [
    # Sampling
    "SocketSampler",
    "LsofSampler",
    "PsutilSampler",
    "create_sampler",
    # Parsing
    "ListeningSocket",
    "ProtocolFamily",
    "parse_line",
    "parse_sample",
]
