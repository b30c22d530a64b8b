"""Mock implementations for testing Port Monitor.

Usage:
    from tests.mocks import MockSampler, RecordingMenuAdapter

    sampler = MockSampler([LSOF_CURL, ""])
    adapter = RecordingMenuAdapter()
"""

import threading
from typing import List, Optional, Sequence, Tuple, Union

from app.menu_state import MenuEntry
from app.views.adapter import MenuAdapter
from config.exceptions import SamplerTransportError
from monitor.sampler import SocketSampler

# === Sample data ===

LSOF_HEADER = "COMMAND     PID   USER   FD   TYPE             DEVICE SIZE/OFF NODE NAME\n"
LSOF_CURL = "curl    123 user 4u IPv4 0x0 0t0 TCP *:8080 (LISTEN)\n"
LSOF_NODE = "node      4567   user   23u  IPv4 0xabc      0t0  TCP 127.0.0.1:3000 (LISTEN)\n"
LSOF_NODE_V6 = "node      4567   user   24u  IPv6 0xdef      0t0  TCP [::1]:3000 (LISTEN)\n"
LSOF_BAD_PORT = "httpd      890   root    4u  IPv4 0x123      0t0  TCP *:http (LISTEN)\n"

SampleStep = Union[str, Exception]


class MockSampler(SocketSampler):
    """Sampler replaying a scripted sequence of outputs.

    Each step is either raw text or an exception to raise. The last step
    repeats once the script runs out.
    """

    name = "mock"

    def __init__(self, steps: Sequence[SampleStep] = ("",)):
        super().__init__(timeout=1.0)
        self._steps: List[SampleStep] = list(steps)
        self.calls = 0

    def set_steps(self, steps: Sequence[SampleStep]) -> None:
        self._steps = list(steps)

    def sample(self) -> str:
        step = self._steps[min(self.calls, len(self._steps) - 1)]
        self.calls += 1
        if isinstance(step, Exception):
            raise step
        return step


class FailingSampler(MockSampler):
    """Sampler that always raises a transport error."""

    def __init__(self, message: str = "lsof timed out"):
        super().__init__([SamplerTransportError(message)])


class BlockingSampler(SocketSampler):
    """Sampler that blocks until released, to observe in-flight cycles."""

    name = "blocking"

    def __init__(self, output: str = LSOF_CURL):
        super().__init__(timeout=5.0)
        self.output = output
        self.started = threading.Event()
        self.release = threading.Event()

    def sample(self) -> str:
        self.started.set()
        self.release.wait(self.timeout)
        return self.output


class RecordingMenuAdapter(MenuAdapter):
    """Adapter recording every call in order."""

    def __init__(self, fail_on: Optional[str] = None):
        self.calls: List[Tuple[str, object]] = []
        self.title: Optional[str] = None
        self.status: Optional[str] = None
        self._fail_on = fail_on

    def _record(self, name: str, arg: object) -> None:
        if name == self._fail_on:
            raise RuntimeError(f"{name} failed")
        self.calls.append((name, arg))

    def create_or_update_entry(self, entry: MenuEntry) -> None:
        self._record("create_or_update", entry)

    def show_entry(self, entry_id: str) -> None:
        self._record("show", entry_id)

    def hide_entry(self, entry_id: str) -> None:
        self._record("hide", entry_id)

    def set_title(self, title: str) -> None:
        self.title = title
        self._record("title", title)

    def set_status(self, status: str) -> None:
        self.status = status
        self._record("status", status)

    def calls_named(self, name: str) -> List[object]:
        return [arg for call, arg in self.calls if call == name]

    def clear(self) -> None:
        self.calls.clear()
