"""
Domain event bus

The reservation service publishes stay events here (``reservation.created``,
``guest.checked_in``, ``guest.checked_out`` and so on). Two consumers listen:
the webhook dispatcher forwards every event to the endpoints subscribed to
it, and the checkout handler queues a cleaning task for the vacated room.
"""
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging
import threading
import uuid

logger = logging.getLogger(__name__)

HISTORY_SIZE = 100

Handler = Callable[["Event"], None]


@dataclass
class Event:
    event_type: str
    timestamp: datetime
    data: Dict[str, Any]
    source: str  # publishing service, e.g. "reservation_service"
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)


def _name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """
    Process-wide bus shared by every service

    Delivery is synchronous, in the publishing request's thread. A handler
    that raises is logged; the rest still receive the event and the publisher
    never sees the error, so a webhook outage cannot fail a check-out.
    """

    _instance = None
    _create_lock = threading.Lock()

    def __new__(cls):
        with cls._create_lock:
            if cls._instance is None:
                bus = super().__new__(cls)
                bus._handlers = defaultdict(list)
                bus._recent = deque(maxlen=HISTORY_SIZE)
                bus._guard = threading.Lock()
                cls._instance = bus
        return cls._instance

    def subscribe(self, event_type: str, handler: Handler) -> None:
        """Register a handler once per event type"""
        with self._guard:
            if handler in self._handlers[event_type]:
                return
            self._handlers[event_type].append(handler)
        logger.debug(f"{_name(handler)} listening for {event_type}")

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        with self._guard:
            if handler in self._handlers.get(event_type, ()):
                self._handlers[event_type].remove(handler)

    def publish(self, event: Event) -> None:
        self._recent.append(event)
        with self._guard:
            handlers = tuple(self._handlers.get(event.event_type, ()))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"{_name(handler)} failed on {event.event_type} ({event.event_id}): {e}",
                             exc_info=True)

    def get_history(self, event_type: Optional[str] = None, limit: int = 50) -> List[Event]:
        """Last published events, newest first"""
        matching = [e for e in reversed(self._recent) if event_type is None or e.event_type == event_type]
        return matching[:limit]

    def clear_history(self) -> None:
        self._recent.clear()


event_bus = EventBus()


def publish_event(event_type, data, source: str) -> Event:
    """
    Publish a payload on the shared bus

    `event_type` may be an EventType member or its string value; `data` a
    payload dataclass with ``to_dict()`` or a plain mapping.
    """
    payload = data.to_dict() if hasattr(data, "to_dict") else dict(data)
    event = Event(
        event_type=getattr(event_type, "value", event_type),
        timestamp=datetime.utcnow(),
        data=payload,
        source=source,
    )
    event_bus.publish(event)
    return event
