"""Event bus for internal application communication.

The poll loop reports its results here; the controller listens and
updates the menu bar title and status icon. Neither side holds a
reference to the other.

Usage:
    from app.events import EventBus, EventType

    bus = EventBus(async_mode=False)
    bus.subscribe(EventType.POLL_COMPLETED, lambda e: print(e.data["visible"]))
    bus.publish(EventType.POLL_COMPLETED, {"visible": 3})
"""
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from config import get_logger

logger = get_logger(__name__)


class EventType(Enum):
    """Types of events that can be published/subscribed."""

    # Poll loop
    POLL_COMPLETED = auto()
    POLL_FAILED = auto()


@dataclass
class Event:
    """An event with its payload.

    Attributes:
        event_type: The type of event.
        data: Event-specific payload.
        timestamp: When the event was created.
        source: Optional identifier of the publisher.
    """
    event_type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    source: Optional[str] = None

    def __str__(self) -> str:
        return f"Event({self.event_type.name}, data={self.data})"


EventHandler = Callable[[Event], None]


class EventBus:
    """Thread-safe publish/subscribe event bus.

    In async mode events are queued and dispatched by a worker thread, so
    publish() never blocks on a slow handler. In sync mode handlers run
    on the publishing thread, which is what tests want.
    """

    def __init__(self, async_mode: bool = True):
        self._subscribers: Dict[EventType, List[EventHandler]] = {}
        self._lock = threading.Lock()
        self._async_mode = async_mode
        self._event_queue: queue.Queue = queue.Queue()
        self._running = False
        self._worker_thread: Optional[threading.Thread] = None

        if async_mode:
            self._running = True
            self._worker_thread = threading.Thread(
                target=self._process_events,
                daemon=True,
                name="EventBus-Worker"
            )
            self._worker_thread.start()

    def _process_events(self) -> None:
        while self._running:
            try:
                event = self._event_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            self._dispatch_event(event)
            self._event_queue.task_done()

    def _dispatch_event(self, event: Event) -> None:
        with self._lock:
            handlers = list(self._subscribers.get(event.event_type, []))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error in event handler for {event.event_type.name}: {e}",
                    exc_info=True
                )

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed to {event_type.name}")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """Remove a handler. Returns True if it was subscribed."""
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
        return False

    def publish(self, event_type: EventType, data: Optional[Dict[str, Any]] = None,
                source: Optional[str] = None) -> None:
        event = Event(event_type=event_type, data=data or {}, source=source)

        if self._async_mode:
            self._event_queue.put(event)
        else:
            self._dispatch_event(event)

        logger.debug(f"Published {event_type.name}")

    def get_subscriber_count(self, event_type: EventType) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def shutdown(self) -> None:
        """Stop the worker thread. Events still queued are dropped."""
        self._running = False
        if self._worker_thread and self._worker_thread is not threading.current_thread():
            self._worker_thread.join(timeout=1.0)
            self._worker_thread = None
        logger.debug("EventBus shut down")
