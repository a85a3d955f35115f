"""
Event handlers - side effects triggered by domain events

Handlers open their own session, so a failure here never rolls back the
operation that published the event.
"""
import logging
from typing import Callable

from innsync.database import SessionLocal
from innsync.models.events import EventType
from innsync.models.hotel import HousekeepingTask, HousekeepingTaskType, HousekeepingStatus, Room
from innsync.services.event_bus import Event, event_bus
from innsync.services.query_cache import invalidate_dashboard
from innsync.services.webhook_service import webhook_dispatcher
from innsync.utils.dates import today_wib

logger = logging.getLogger(__name__)

CHECKOUT_CLEANING_PRIORITY = 3


class EventHandlers:
    """
    Handler collection

    db_session_factory is injectable for tests.
    """

    def __init__(self, db_session_factory: Callable = None):
        self._db_session_factory = db_session_factory or SessionLocal
        self._registered = False

    def configure(self, db_session_factory: Callable) -> None:
        self._db_session_factory = db_session_factory

    def handle_guest_checked_out(self, event: Event) -> None:
        """Queue a checkout cleaning task for the vacated room"""
        data = event.data
        room_id = data.get("room_id")
        if not room_id:
            logger.warning("Invalid checkout event: missing room_id")
            return

        db = self._db_session_factory()
        try:
            room = db.query(Room).filter(Room.id == room_id).first()
            if not room:
                logger.warning(f"Checkout event for unknown room {room_id}")
                return

            task = HousekeepingTask(
                property_id=room.property_id,
                room_id=room.id,
                task_type=HousekeepingTaskType.CHECKOUT_CLEANING,
                status=HousekeepingStatus.PENDING,
                priority=CHECKOUT_CLEANING_PRIORITY,
                scheduled_date=today_wib(),
                estimated_duration=45,
                notes=f"Pembersihan setelah check-out - {data.get('guest_name', '')}".rstrip(" -"),
            )
            db.add(task)
            db.commit()
            invalidate_dashboard()
            logger.info(f"Auto-created checkout cleaning task {task.id} for room {room.room_number}")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create checkout cleaning task: {e}", exc_info=True)
        finally:
            db.close()

    def register_handlers(self, event_bus_instance=None) -> None:
        if self._registered:
            return
        bus = event_bus_instance or event_bus
        bus.subscribe(EventType.GUEST_CHECKED_OUT.value, self.handle_guest_checked_out)
        self._registered = True
        logger.info("Event handlers registered successfully")

    def unregister_handlers(self, event_bus_instance=None) -> None:
        bus = event_bus_instance or event_bus
        bus.unsubscribe(EventType.GUEST_CHECKED_OUT.value, self.handle_guest_checked_out)
        self._registered = False


event_handlers = EventHandlers()


def register_event_handlers() -> None:
    """Wire handlers and the webhook dispatcher onto the global bus (app startup)"""
    event_handlers.register_handlers()
    webhook_dispatcher.register()
