"""
Dashboard figures on a fixed business date
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from innsync.models.hotel import Reservation, Room, RoomStatus, BookingStatus, BookingSource
from innsync.services.dashboard_service import DashboardService

TODAY = date(2030, 3, 10)


def _book(db_session, room, guest, number, start, total, status=BookingStatus.CONFIRMED, nights=2):
    reservation = Reservation(
        property_id=room.property_id,
        room_id=room.id,
        guest_id=guest.id,
        confirmation_number=f"INN2030030{number:05d}",
        check_in_date=start,
        check_out_date=start + timedelta(days=nights),
        adults=2,
        total_nights=nights,
        rate_per_night=Decimal(total) / nights,
        total_amount=Decimal(total),
        status=status,
        source=BookingSource.DIRECT,
    )
    db_session.add(reservation)
    db_session.commit()
    return reservation


@pytest.fixture
def second_room(db_session, sample_room):
    room = Room(property_id=sample_room.property_id, room_number="102", room_type="standard",
                floor=1, capacity=2, base_rate=Decimal("500000"), status=RoomStatus.CLEAN)
    db_session.add(room)
    db_session.commit()
    return room


class TestMonthRevenue:
    """revenue_this_month"""

    def test_counts_live_bookings_arriving_this_month(self, db_session, sample_room, sample_guest):
        _book(db_session, sample_room, sample_guest, 1, date(2030, 3, 2), "1000000")
        _book(db_session, sample_room, sample_guest, 2, date(2030, 3, 5), "2000000", BookingStatus.CANCELLED)
        _book(db_session, sample_room, sample_guest, 3, date(2030, 2, 27), "750000", BookingStatus.CHECKED_OUT)
        _book(db_session, sample_room, sample_guest, 4, date(2030, 4, 1), "600000")

        stats = DashboardService(db_session).compute_stats(None, TODAY)

        assert stats["revenue_this_month"] == 1000000
        assert stats["revpar"] == round(1000000 / 10, 2)

    def test_first_of_month_boundary(self, db_session, sample_room, sample_guest):
        _book(db_session, sample_room, sample_guest, 1, date(2030, 3, 1), "500000", nights=1)
        _book(db_session, sample_room, sample_guest, 2, date(2030, 2, 28), "500000", nights=1)

        stats = DashboardService(db_session).compute_stats(None, date(2030, 3, 1))

        assert stats["revenue_this_month"] == 500000


class TestTrends:
    """Today against yesterday"""

    def test_occupancy_and_revenue_rise(self, db_session, sample_room, second_room, sample_guest):
        yesterday = TODAY - timedelta(days=1)
        _book(db_session, sample_room, sample_guest, 1, yesterday, "1000000", BookingStatus.CHECKED_IN)
        _book(db_session, second_room, sample_guest, 2, TODAY, "1500000", BookingStatus.CHECKED_IN)
        _book(db_session, second_room, sample_guest, 3, TODAY, "9000000", BookingStatus.CANCELLED)

        stats = DashboardService(db_session).compute_stats(None, TODAY)

        assert stats["occupancy_rate"] == 100
        assert stats["occupancy_trend"] == 50
        assert stats["revenue_today"] == 1500000
        assert stats["revenue_trend"] == 50.0

    def test_revenue_drop(self, db_session, sample_room, second_room, sample_guest):
        _book(db_session, sample_room, sample_guest, 1, TODAY - timedelta(days=1), "2000000")
        _book(db_session, second_room, sample_guest, 2, TODAY, "500000")

        stats = DashboardService(db_session).compute_stats(None, TODAY)

        assert stats["revenue_trend"] == -75.0
        assert stats["occupancy_trend"] == 0

    def test_no_revenue_yesterday(self, db_session, sample_room, sample_guest):
        _book(db_session, sample_room, sample_guest, 1, TODAY, "1000000")

        stats = DashboardService(db_session).compute_stats(None, TODAY)

        assert stats["revenue_trend"] == 100.0

    def test_quiet_days(self, db_session, sample_room):
        stats = DashboardService(db_session).compute_stats(None, TODAY)

        assert stats["revenue_trend"] == 0.0
        assert stats["occupancy_trend"] == 0
