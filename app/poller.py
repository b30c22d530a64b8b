"""Poll loop: sample, parse, reconcile, apply, sleep, repeat.

The loop runs on one background thread, so cycles never overlap. A
failed cycle leaves the store and the menu exactly as they were: a stale
but consistent menu is preferred over a partial update.

Usage:
    from app.poller import PollLoop

    loop = PollLoop(sampler, store, adapter=adapter, interval=15.0)
    loop.start()
    ...
    loop.stop()
"""
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from app.events import EventBus, EventType
from app.menu_state import MenuStateStore
from app.reconciler import EffectKind, SideEffect, reconcile
from app.views.adapter import MenuAdapter
from config import INTERVALS, PortMonitorError, get_logger
from config.logging_config import LogContext, log_exception
from monitor.sampler import SocketSampler
from monitor.sockets import ListeningSocket, parse_sample

logger = get_logger(__name__)


class PollState(Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    RECONCILING = "reconciling"
    APPLYING = "applying"


@dataclass
class CycleResult:
    """Outcome of one poll cycle."""
    success: bool
    effects: List[SideEffect] = field(default_factory=list)
    visible: int = 0
    error: Optional[Exception] = None


class PollLoop:
    """Drives the sampler -> parser -> reconciler pipeline.

    Attributes:
        interval: Seconds to wait between the end of one cycle and the
            start of the next.
        consecutive_failures: Failed cycles since the last success.
    """

    def __init__(
        self,
        sampler: SocketSampler,
        store: MenuStateStore,
        adapter: Optional[MenuAdapter] = None,
        interval: float = INTERVALS.POLL_SECONDS,
        event_bus: Optional[EventBus] = None,
        parser: Callable[[str], List[ListeningSocket]] = parse_sample,
    ):
        self.sampler = sampler
        self.store = store
        self.adapter = adapter or MenuAdapter()
        self.interval = interval
        self.event_bus = event_bus
        self.parser = parser
        self.consecutive_failures = 0
        self.cycles = 0

        self._state = PollState.IDLE
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> CycleResult:
        """Run a single cycle and return to IDLE."""
        self.cycles += 1
        try:
            with LogContext(logger, f"Poll cycle {self.cycles}"):
                self._state = PollState.SAMPLING
                raw = self.sampler.sample()
                sockets = self.parser(raw)

                self._state = PollState.RECONCILING
                result = reconcile(self.store.snapshot(), sockets)

                self._state = PollState.APPLYING
                for effect in result.effects:
                    self._apply(effect)
        except PortMonitorError as e:
            return self._cycle_failed(e)
        finally:
            self._state = PollState.IDLE

        self.consecutive_failures = 0
        visible = self.store.visible_count()
        if result.effects:
            logger.info(f"Applied {len(result.effects)} menu changes, {visible} ports visible")
        self._publish(EventType.POLL_COMPLETED, {
            'visible': visible,
            'total': len(self.store),
            'effects': len(result.effects),
        })
        return CycleResult(success=True, effects=result.effects, visible=visible)

    def _cycle_failed(self, error: PortMonitorError) -> CycleResult:
        self.consecutive_failures += 1
        logger.warning(
            f"Poll cycle skipped ({self.consecutive_failures} in a row), "
            f"keeping previous menu: {error}"
        )
        self._publish(EventType.POLL_FAILED, {
            'error': str(error),
            'consecutive_failures': self.consecutive_failures,
        })
        return CycleResult(success=False, visible=self.store.visible_count(), error=error)

    def _apply(self, effect: SideEffect) -> None:
        entry = effect.entry
        self.store.upsert(entry)
        try:
            if effect.kind is EffectKind.HIDE:
                self.adapter.hide_entry(entry.id)
            else:
                self.adapter.create_or_update_entry(entry)
                self.adapter.show_entry(entry.id)
        except Exception as e:
            # The store already holds the new state; the next change retries the UI
            log_exception(logger, f"Menu adapter failed to apply {effect.kind.value} for {entry.id}", e)

    def _publish(self, event_type: EventType, data: dict) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, data, source="poller")

    def run(self) -> None:
        """Loop until stop() is called.

        The stop flag is only checked between cycles, so an in-flight
        sample is allowed to finish or hit its own timeout.
        """
        logger.info(f"Poll loop running every {self.interval}s")
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception as e:
                log_exception(logger, "Unexpected poll cycle error", e)
            self._stop_event.wait(self.interval)
        logger.info("Poll loop stopped")

    def start(self) -> None:
        """Run the loop in a background thread."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, daemon=True, name="PollLoop")
        self._thread.start()

    def stop(self, timeout: float = INTERVALS.SHUTDOWN_JOIN_SECONDS) -> None:
        """Request cancellation and wait up to timeout for the thread."""
        self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Poll loop still finishing a sample after stop request")
        self._thread = None
