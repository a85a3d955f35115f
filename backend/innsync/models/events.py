"""
Domain events published on the in-process event bus
"""
from enum import Enum
from dataclasses import dataclass, field, asdict
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, Dict, Any


class EventType(str, Enum):
    """Event names, also used as webhook event identifiers"""
    RESERVATION_CREATED = "reservation.created"
    RESERVATION_UPDATED = "reservation.updated"
    RESERVATION_CANCELLED = "reservation.cancelled"
    GUEST_CHECKED_IN = "guest.checked_in"
    GUEST_CHECKED_OUT = "guest.checked_out"


WEBHOOK_EVENTS = [e.value for e in EventType]


@dataclass
class BaseEventData:
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly dict"""
        result = asdict(self)
        for key, value in result.items():
            if isinstance(value, (datetime, date)):
                result[key] = value.isoformat()
            elif isinstance(value, Decimal):
                result[key] = float(value)
        return result


@dataclass
class ReservationEventData(BaseEventData):
    """Payload for reservation.* events"""
    reservation_id: int = 0
    confirmation_number: str = ""
    property_id: int = 0
    room_id: int = 0
    room_number: str = ""
    guest_id: int = 0
    guest_name: str = ""
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    status: str = ""
    total_amount: Decimal = Decimal("0")
    previous_status: Optional[str] = None


@dataclass
class StayEventData(ReservationEventData):
    """Payload for guest.checked_in / guest.checked_out events"""
    operator_id: Optional[int] = None


def reservation_event_data(reservation, cls=ReservationEventData, **extra) -> BaseEventData:
    """Build an event payload from a Reservation row"""
    return cls(
        reservation_id=reservation.id,
        confirmation_number=reservation.confirmation_number,
        property_id=reservation.property_id,
        room_id=reservation.room_id,
        room_number=reservation.room.room_number if reservation.room else "",
        guest_id=reservation.guest_id,
        guest_name=reservation.guest.full_name if reservation.guest else "",
        check_in_date=reservation.check_in_date,
        check_out_date=reservation.check_out_date,
        status=reservation.status.value if reservation.status else "",
        total_amount=reservation.total_amount,
        **extra
    )
