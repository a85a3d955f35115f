"""
Reservation service tests on a fixed business date
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from innsync.models.hotel import BookingStatus, RoomStatus
from innsync.models.restaurant import RestaurantBill, BillStatus
from innsync.models.schemas import ReservationCreate, ReservationUpdate
from innsync.services.event_bus import event_bus
from innsync.services.reservation_service import ReservationService, CheckoutBlockedError

TODAY = date(2030, 3, 1)


def _create(db_session, room, guest, start=TODAY, nights=2, **extra):
    data = ReservationCreate(
        room_id=room.id,
        guest_id=guest.id,
        check_in_date=start,
        check_out_date=start + timedelta(days=nights),
        adults=2,
        **extra
    )
    return ReservationService(db_session).create_reservation(data, today=TODAY)


class TestCreateReservation:
    """create_reservation"""

    def test_prices_from_room_rate(self, db_session, sample_room, sample_guest):
        reservation = _create(db_session, sample_room, sample_guest, nights=3)

        assert reservation.total_nights == 3
        assert reservation.rate_per_night == Decimal("500000")
        assert reservation.total_amount == Decimal("1500000")
        assert reservation.tax_amount == Decimal("165000")
        assert reservation.property_id == sample_room.property_id

    def test_confirmation_numbers_follow_daily_sequence(self, db_session, sample_room, sample_guest):
        first = _create(db_session, sample_room, sample_guest)
        second = _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=5))

        assert first.confirmation_number[:3] == "INN"
        assert len(first.confirmation_number) == 15
        assert int(second.confirmation_number[-4:]) == int(first.confirmation_number[-4:]) + 1

    def test_confirmation_number_not_reused_after_delete(self, db_session, sample_room, sample_guest):
        """Deleting an earlier booking must not free its sequence slot"""
        first = _create(db_session, sample_room, sample_guest)
        second = _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=5))
        ReservationService(db_session).delete_reservation(first.id)

        third = _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=10))

        assert int(third.confirmation_number[-4:]) == int(second.confirmation_number[-4:]) + 1

    def test_past_arrival_relative_to_business_date(self, db_session, sample_room, sample_guest):
        with pytest.raises(ValueError, match="masa lalu"):
            _create(db_session, sample_room, sample_guest, start=TODAY - timedelta(days=1))

    def test_thirty_nights_allowed(self, db_session, sample_room, sample_guest):
        assert _create(db_session, sample_room, sample_guest, nights=30).total_nights == 30

    def test_overlap_rejected_but_cancelled_ignored(self, db_session, sample_room, sample_guest):
        first = _create(db_session, sample_room, sample_guest)
        with pytest.raises(ValueError, match="tidak tersedia"):
            _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=1))

        ReservationService(db_session).cancel_reservation(first.id)

        assert _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=1)).id

    def test_publishes_created_event(self, db_session, sample_room, sample_guest):
        reservation = _create(db_session, sample_room, sample_guest)

        event = event_bus.get_history("reservation.created")[0]
        assert event.data["reservation_id"] == reservation.id
        assert event.data["guest_name"] == "Andi Wijaya"
        assert event.source == "reservation_service"


class TestUpdateReservation:
    """update_reservation"""

    def test_rate_kept_when_dates_move(self, db_session, sample_room, sample_guest):
        reservation = _create(db_session, sample_room, sample_guest, rate_per_night=Decimal("400000"))

        updated = ReservationService(db_session).update_reservation(
            reservation.id, ReservationUpdate(check_out_date=TODAY + timedelta(days=4)), today=TODAY
        )

        assert updated.total_amount == Decimal("1600000")

    def test_in_house_guest_can_extend(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        reservation = _create(db_session, sample_room, sample_guest)
        service.check_in(reservation.id)

        updated = service.update_reservation(
            reservation.id, ReservationUpdate(check_out_date=TODAY + timedelta(days=3)),
            today=TODAY + timedelta(days=1)
        )

        assert updated.total_nights == 3

    def test_in_house_arrival_date_fixed(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        reservation = _create(db_session, sample_room, sample_guest)
        service.check_in(reservation.id)

        with pytest.raises(ValueError, match="setelah tamu check-in"):
            service.update_reservation(
                reservation.id, ReservationUpdate(check_in_date=TODAY + timedelta(days=1)), today=TODAY
            )


class TestStayLifecycle:
    """check_in, check_out and update_status"""

    def test_check_out_blocked_by_restaurant_bill(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        reservation = _create(db_session, sample_room, sample_guest)
        service.check_in(reservation.id)
        db_session.add(RestaurantBill(reservation_id=reservation.id, guest_id=sample_guest.id,
                                      total_amount=Decimal("45000"), paid_amount=Decimal("0"),
                                      status=BillStatus.OUTSTANDING))
        db_session.commit()

        with pytest.raises(CheckoutBlockedError) as exc_info:
            service.check_out(reservation.id)

        assert exc_info.value.total_outstanding == Decimal("45000")
        assert service.get_reservation(reservation.id).status == BookingStatus.CHECKED_IN

    def test_check_out_marks_room_dirty(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        reservation = _create(db_session, sample_room, sample_guest)
        service.check_in(reservation.id, operator_id=9)

        service.check_out(reservation.id, operator_id=9)

        assert sample_room.status == RoomStatus.DIRTY
        assert event_bus.get_history("guest.checked_out")[0].data["operator_id"] == 9

    def test_room_cannot_hold_two_guests(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        first = _create(db_session, sample_room, sample_guest, nights=1)
        second = _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=1), nights=1)
        service.check_in(first.id)

        with pytest.raises(ValueError, match="masih ditempati"):
            service.check_in(second.id)

    def test_status_route_pending_to_confirmed(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        reservation = _create(db_session, sample_room, sample_guest, status=BookingStatus.PENDING)

        updated = service.update_status(reservation.id, BookingStatus.CONFIRMED)

        assert updated.status == BookingStatus.CONFIRMED
        assert event_bus.get_history("reservation.updated")[0].data["previous_status"] == "pending"

    def test_checked_out_stays_are_final(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        reservation = _create(db_session, sample_room, sample_guest)
        service.check_in(reservation.id)
        service.check_out(reservation.id)

        with pytest.raises(ValueError):
            service.update_status(reservation.id, BookingStatus.CONFIRMED)
        with pytest.raises(ValueError):
            service.cancel_reservation(reservation.id)


class TestReservationQueries:
    """Stats and upcoming arrivals"""

    def test_stats_for_business_date(self, db_session, sample_room, sample_guest):
        service = ReservationService(db_session)
        reservation = _create(db_session, sample_room, sample_guest)
        service.check_in(reservation.id)

        stats = service.get_stats(today=TODAY)

        assert stats["total"] == 1
        assert stats["by_status"]["checked_in"] == 1
        assert stats["today_check_ins"] == 1
        assert stats["current_occupancy"] == 1
        assert stats["total_revenue"] == 1000000

    def test_upcoming_window(self, db_session, sample_room, sample_guest):
        near = _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=2), nights=1)
        _create(db_session, sample_room, sample_guest, start=TODAY + timedelta(days=10), nights=1)

        upcoming = ReservationService(db_session).get_upcoming(days=7, today=TODAY)

        assert [r.id for r in upcoming] == [near.id]
