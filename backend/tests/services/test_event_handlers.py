"""
Event handler tests - checkout cleaning tasks
"""
from datetime import datetime

from innsync.models.events import EventType
from innsync.models.hotel import HousekeepingTask, HousekeepingTaskType, HousekeepingStatus
from innsync.services.event_bus import Event, EventBus, publish_event
from innsync.services.event_handlers import EventHandlers, CHECKOUT_CLEANING_PRIORITY
from innsync.utils.dates import today_wib


def _checkout_event(**data):
    return Event(
        event_type=EventType.GUEST_CHECKED_OUT.value,
        timestamp=datetime.utcnow(),
        data=data,
        source="test",
    )


class TestCheckoutCleaning:
    """handle_guest_checked_out"""

    def test_creates_cleaning_task(self, db_session_factory, db_session, sample_room):
        handlers = EventHandlers(db_session_factory)

        handlers.handle_guest_checked_out(_checkout_event(room_id=sample_room.id, guest_name="Andi Wijaya"))

        task = db_session.query(HousekeepingTask).one()
        assert task.room_id == sample_room.id
        assert task.property_id == sample_room.property_id
        assert task.task_type == HousekeepingTaskType.CHECKOUT_CLEANING
        assert task.status == HousekeepingStatus.PENDING
        assert task.priority == CHECKOUT_CLEANING_PRIORITY
        assert task.estimated_duration == 45
        assert task.scheduled_date == today_wib()
        assert task.notes == "Pembersihan setelah check-out - Andi Wijaya"

    def test_without_guest_name(self, db_session_factory, db_session, sample_room):
        EventHandlers(db_session_factory).handle_guest_checked_out(_checkout_event(room_id=sample_room.id))

        assert db_session.query(HousekeepingTask).one().notes == "Pembersihan setelah check-out"

    def test_missing_room_id_ignored(self, db_session_factory, db_session):
        EventHandlers(db_session_factory).handle_guest_checked_out(_checkout_event(guest_name="Andi"))

        assert db_session.query(HousekeepingTask).count() == 0

    def test_unknown_room_ignored(self, db_session_factory, db_session, sample_property):
        EventHandlers(db_session_factory).handle_guest_checked_out(_checkout_event(room_id=999))

        assert db_session.query(HousekeepingTask).count() == 0

    def test_registered_on_global_bus(self, db_session, sample_room):
        publish_event(EventType.GUEST_CHECKED_OUT, {"room_id": sample_room.id, "guest_name": "Andi"}, "test")

        assert db_session.query(HousekeepingTask).count() == 1


class TestRegistration:
    """register_handlers / unregister_handlers"""

    def test_register_is_idempotent(self, db_session_factory, db_session, sample_room):
        bus = EventBus()
        handlers = EventHandlers(db_session_factory)
        handlers.register_handlers(bus)
        handlers.register_handlers(bus)
        try:
            bus.publish(_checkout_event(room_id=sample_room.id))
        finally:
            handlers.unregister_handlers(bus)

        # the globally registered handler runs too
        assert db_session.query(HousekeepingTask).count() == 2
