"""
Reservation API tests
Booking, availability, lifecycle and the restaurant checkout gate
"""
from datetime import timedelta
from decimal import Decimal
from fastapi.testclient import TestClient
from innsync.models.hotel import HousekeepingTask, HousekeepingTaskType, Room, RoomStatus
from innsync.models.restaurant import RestaurantBill, BillStatus
from innsync.services.event_bus import event_bus
from innsync.utils.dates import today_wib, now_wib


def _booking(room_id, guest_id, start_offset=1, nights=2, **extra):
    start = today_wib() + timedelta(days=start_offset)
    payload = {
        "room_id": room_id,
        "guest_id": guest_id,
        "check_in_date": str(start),
        "check_out_date": str(start + timedelta(days=nights)),
        "adults": 2,
    }
    payload.update(extra)
    return payload


def _add_outstanding_bill(db_session, reservation, amount="75000"):
    bill = RestaurantBill(
        reservation_id=reservation.id,
        guest_id=reservation.guest_id,
        total_amount=Decimal(amount),
        paid_amount=Decimal("0"),
        status=BillStatus.OUTSTANDING,
    )
    db_session.add(bill)
    db_session.commit()
    return bill


class TestReservationCreate:
    """POST /reservations"""

    def test_create_prices_stay_with_ppn(self, client: TestClient, auth_headers, sample_room, sample_guest):
        """Create prices stay with ppn"""
        response = client.post("/reservations", headers=auth_headers, json=_booking(sample_room.id, sample_guest.id))

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "confirmed"
        assert data["total_nights"] == 2
        assert float(data["rate_per_night"]) == 500000
        assert float(data["total_amount"]) == 1000000
        assert float(data["tax_amount"]) == 110000
        assert data["guest_name"] == "Andi Wijaya"
        assert data["room_number"] == "101"

    def test_confirmation_number_format(self, client: TestClient, auth_headers, sample_room, sample_guest):
        """Confirmation number format"""
        response = client.post("/reservations", headers=auth_headers, json=_booking(sample_room.id, sample_guest.id))

        expected = f"INN{now_wib().strftime('%Y%m%d')}0001"
        assert response.json()["confirmation_number"] == expected

    def test_explicit_total_overrides_rate(self, client: TestClient, auth_headers, sample_room, sample_guest):
        """Explicit total overrides rate"""
        payload = _booking(sample_room.id, sample_guest.id, total_amount="900000")

        data = client.post("/reservations", headers=auth_headers, json=payload).json()

        assert float(data["total_amount"]) == 900000
        assert float(data["tax_amount"]) == 99000

    def test_create_publishes_event(self, client: TestClient, auth_headers, sample_room, sample_guest):
        """Create publishes event"""
        client.post("/reservations", headers=auth_headers, json=_booking(sample_room.id, sample_guest.id))

        events = event_bus.get_history("reservation.created")
        assert len(events) == 1
        assert events[0].data["room_number"] == "101"
        assert events[0].source == "reservation_service"

    def test_overlapping_booking_rejected(self, client: TestClient, auth_headers, sample_reservation):
        """Overlapping booking rejected"""
        payload = _booking(sample_reservation.room_id, sample_reservation.guest_id, start_offset=1, nights=1)

        response = client.post("/reservations", headers=auth_headers, json=payload)

        assert response.status_code == 400
        assert "tidak tersedia" in response.json()["detail"]

    def test_back_to_back_booking_allowed(self, client: TestClient, auth_headers, sample_reservation):
        """Back to back booking allowed"""
        payload = _booking(sample_reservation.room_id, sample_reservation.guest_id, start_offset=2, nights=1)

        response = client.post("/reservations", headers=auth_headers, json=payload)

        assert response.status_code == 200

    def test_past_check_in_rejected(self, client: TestClient, auth_headers, sample_room, sample_guest):
        """Past check in rejected"""
        payload = _booking(sample_room.id, sample_guest.id, start_offset=-1)

        response = client.post("/reservations", headers=auth_headers, json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Tanggal check-in tidak boleh di masa lalu"

    def test_stay_longer_than_thirty_nights_rejected(self, client: TestClient, auth_headers, sample_room,
                                                     sample_guest):
        """Stay longer than thirty nights rejected"""
        payload = _booking(sample_room.id, sample_guest.id, nights=31)

        response = client.post("/reservations", headers=auth_headers, json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Maksimal menginap 30 hari"

    def test_capacity_exceeded(self, client: TestClient, auth_headers, sample_room, sample_guest):
        """Capacity exceeded"""
        payload = _booking(sample_room.id, sample_guest.id, adults=2, children=1)

        response = client.post("/reservations", headers=auth_headers, json=payload)

        assert response.status_code == 400
        assert "melebihi kapasitas" in response.json()["detail"]

    def test_out_of_order_room_rejected(self, client: TestClient, auth_headers, db_session, sample_room,
                                        sample_guest):
        """Out of order room rejected"""
        sample_room.status = RoomStatus.OUT_OF_ORDER
        db_session.commit()

        response = client.post("/reservations", headers=auth_headers, json=_booking(sample_room.id, sample_guest.id))

        assert response.status_code == 400

    def test_new_reservation_cannot_start_checked_in(self, client: TestClient, auth_headers, sample_room,
                                                     sample_guest):
        """New reservation cannot start checked in"""
        payload = _booking(sample_room.id, sample_guest.id, status="checked_in")

        response = client.post("/reservations", headers=auth_headers, json=payload)

        assert response.status_code == 400

    def test_unknown_room(self, client: TestClient, auth_headers, sample_guest):
        """Unknown room"""
        response = client.post("/reservations", headers=auth_headers, json=_booking(999, sample_guest.id))

        assert response.status_code == 404


class TestReservationQueries:
    """List, detail, calendar, stats and availability"""

    def test_detail_includes_payments_and_restaurant_balance(self, client: TestClient, auth_headers, db_session,
                                                             checked_in_reservation):
        """Detail includes payments and restaurant balance"""
        client.post("/payments", headers=auth_headers, json={
            "reservation_id": checked_in_reservation.id,
            "amount": "400000",
            "payment_method": "cash",
        })
        _add_outstanding_bill(db_session, checked_in_reservation)

        response = client.get(f"/reservations/{checked_in_reservation.id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data["payments"]) == 1
        assert float(data["paid_amount"]) == 400000
        assert float(data["restaurant_outstanding"]) == 75000

    def test_missing_reservation(self, client: TestClient, auth_headers):
        """Missing reservation"""
        assert client.get("/reservations/999", headers=auth_headers).status_code == 404

    def test_search_by_guest_name(self, client: TestClient, auth_headers, sample_reservation):
        """Search by guest name"""
        response = client.get("/reservations", headers=auth_headers, params={"search": "wijaya"})

        assert [r["id"] for r in response.json()] == [sample_reservation.id]

    def test_calendar_window(self, client: TestClient, auth_headers, sample_reservation):
        """Calendar window"""
        today = today_wib()
        inside = {"start": str(today + timedelta(days=1)), "end": str(today + timedelta(days=5))}
        outside = {"start": str(today + timedelta(days=10)), "end": str(today + timedelta(days=12))}

        assert len(client.get("/reservations/calendar", headers=auth_headers, params=inside).json()) == 1
        assert client.get("/reservations/calendar", headers=auth_headers, params=outside).json() == []

    def test_lookup_by_confirmation_number(self, client: TestClient, auth_headers, sample_reservation):
        """Lookup by confirmation number"""
        response = client.get("/reservations/confirmation/inn202401010001", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == sample_reservation.id
        assert client.get("/reservations/confirmation/INN000", headers=auth_headers).status_code == 404

    def test_upcoming_arrivals(self, client: TestClient, auth_headers, sample_reservation, sample_guest):
        """Upcoming arrivals"""
        later = client.post("/reservations", headers=auth_headers,
                            json=_booking(sample_reservation.room_id, sample_guest.id, start_offset=10)).json()

        week = client.get("/reservations/upcoming", headers=auth_headers).json()
        fortnight = client.get("/reservations/upcoming", headers=auth_headers, params={"days": 14}).json()

        assert [r["id"] for r in week] == [sample_reservation.id]
        assert [r["id"] for r in fortnight] == [sample_reservation.id, later["id"]]

    def test_calendar_reversed_range(self, client: TestClient, auth_headers):
        """Calendar reversed range"""
        today = today_wib()
        params = {"start": str(today), "end": str(today - timedelta(days=1))}

        assert client.get("/reservations/calendar", headers=auth_headers, params=params).status_code == 400

    def test_stats(self, client: TestClient, auth_headers, sample_reservation):
        """Stats"""
        data = client.get("/reservations/stats", headers=auth_headers).json()

        assert data["total"] == 1
        assert data["by_status"]["confirmed"] == 1
        assert data["today_check_ins"] == 1
        assert data["total_revenue"] == 1000000

    def test_availability_reports_conflicts(self, client: TestClient, auth_headers, sample_reservation):
        """Availability reports conflicts"""
        today = today_wib()
        params = {
            "room_id": sample_reservation.room_id,
            "check_in_date": str(today + timedelta(days=1)),
            "check_out_date": str(today + timedelta(days=3)),
        }

        data = client.get("/reservations/availability", headers=auth_headers, params=params).json()

        assert data["available"] is False
        assert data["conflicting_reservation_ids"] == [sample_reservation.id]

        params["exclude_reservation_id"] = sample_reservation.id
        data = client.get("/reservations/availability", headers=auth_headers, params=params).json()
        assert data["available"] is True


class TestReservationUpdate:
    """PUT /reservations/{id}"""

    def test_extend_stay_reprices(self, client: TestClient, auth_headers, sample_reservation):
        """Extend stay reprices"""
        new_checkout = sample_reservation.check_out_date + timedelta(days=1)

        response = client.put(
            f"/reservations/{sample_reservation.id}", headers=auth_headers,
            json={"check_out_date": str(new_checkout)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_nights"] == 3
        assert float(data["total_amount"]) == 1500000
        assert float(data["tax_amount"]) == 165000

    def test_notes_only_update_keeps_price(self, client: TestClient, auth_headers, sample_reservation):
        """Notes only update keeps price"""
        response = client.put(
            f"/reservations/{sample_reservation.id}", headers=auth_headers, json={"notes": "Kamar non-smoking"}
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "Kamar non-smoking"
        assert float(response.json()["total_amount"]) == 1000000


class TestReservationLifecycle:
    """Check-in, check-out, cancel and delete"""

    def test_check_in(self, client: TestClient, receptionist_auth_headers, sample_reservation):
        """Check in"""
        response = client.post(f"/reservations/{sample_reservation.id}/check-in", headers=receptionist_auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "checked_in"
        events = event_bus.get_history("guest.checked_in")
        assert events[0].data["previous_status"] == "confirmed"
        assert events[0].data["operator_id"] is not None

    def test_check_in_twice_rejected(self, client: TestClient, auth_headers, checked_in_reservation):
        """Check in twice rejected"""
        response = client.post(f"/reservations/{checked_in_reservation.id}/check-in", headers=auth_headers)

        assert response.status_code == 400

    def test_check_out_marks_room_dirty_and_queues_cleaning(self, client: TestClient, auth_headers, db_session,
                                                            checked_in_reservation):
        """Check out marks room dirty and queues cleaning"""
        response = client.post(f"/reservations/{checked_in_reservation.id}/check-out", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "checked_out"

        db_session.expire_all()
        room = db_session.query(Room).filter(Room.id == checked_in_reservation.room_id).first()
        assert room.status.value == "dirty"

        tasks = db_session.query(HousekeepingTask).filter(HousekeepingTask.room_id == room.id).all()
        assert len(tasks) == 1
        assert tasks[0].task_type == HousekeepingTaskType.CHECKOUT_CLEANING
        assert tasks[0].priority == 3
        assert tasks[0].estimated_duration == 45
        assert tasks[0].notes == "Pembersihan setelah check-out - Andi Wijaya"

    def test_check_out_blocked_by_restaurant_bill(self, client: TestClient, auth_headers, db_session,
                                                  checked_in_reservation):
        """Check out blocked by restaurant bill"""
        _add_outstanding_bill(db_session, checked_in_reservation)

        response = client.post(f"/reservations/{checked_in_reservation.id}/check-out", headers=auth_headers)

        assert response.status_code == 409
        assert "75000" in response.json()["detail"]
        assert db_session.query(HousekeepingTask).count() == 0

    def test_status_route_enforces_checkout_gate(self, client: TestClient, auth_headers, db_session,
                                                 checked_in_reservation):
        """Status route enforces checkout gate"""
        _add_outstanding_bill(db_session, checked_in_reservation)

        response = client.patch(
            f"/reservations/{checked_in_reservation.id}/status", headers=auth_headers, json={"status": "checked_out"}
        )

        assert response.status_code == 409

    def test_check_out_after_bill_paid(self, client: TestClient, auth_headers, db_session, checked_in_reservation):
        """Check out after bill paid"""
        bill = _add_outstanding_bill(db_session, checked_in_reservation)
        client.post(f"/restaurant/bills/{bill.id}/pay", headers=auth_headers)

        response = client.post(f"/reservations/{checked_in_reservation.id}/check-out", headers=auth_headers)

        assert response.status_code == 200

    def test_check_out_requires_checked_in(self, client: TestClient, auth_headers, sample_reservation):
        """Check out requires checked in"""
        response = client.post(f"/reservations/{sample_reservation.id}/check-out", headers=auth_headers)

        assert response.status_code == 400

    def test_cancel_with_reason(self, client: TestClient, auth_headers, sample_reservation):
        """Cancel with reason"""
        response = client.post(
            f"/reservations/{sample_reservation.id}/cancel", headers=auth_headers, json={"reason": "Sakit"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert "Dibatalkan: Sakit" in response.json()["notes"]

    def test_cancel_without_body(self, client: TestClient, auth_headers, sample_reservation):
        """Cancel without body"""
        response = client.post(f"/reservations/{sample_reservation.id}/cancel", headers=auth_headers)

        assert response.status_code == 200

    def test_cancelled_stay_frees_room(self, client: TestClient, auth_headers, sample_reservation):
        """Cancelled stay frees room"""
        client.post(f"/reservations/{sample_reservation.id}/cancel", headers=auth_headers)
        payload = _booking(sample_reservation.room_id, sample_reservation.guest_id, start_offset=0, nights=2)

        assert client.post("/reservations", headers=auth_headers, json=payload).status_code == 200

    def test_cannot_cancel_checked_in(self, client: TestClient, auth_headers, checked_in_reservation):
        """Cannot cancel checked in"""
        response = client.post(f"/reservations/{checked_in_reservation.id}/cancel", headers=auth_headers)

        assert response.status_code == 400

    def test_delete_reservation(self, client: TestClient, auth_headers, sample_reservation):
        """Delete reservation"""
        assert client.delete(f"/reservations/{sample_reservation.id}", headers=auth_headers).status_code == 200
        assert client.get(f"/reservations/{sample_reservation.id}", headers=auth_headers).status_code == 404

    def test_delete_checked_in_rejected(self, client: TestClient, auth_headers, checked_in_reservation):
        """Delete checked in rejected"""
        assert client.delete(f"/reservations/{checked_in_reservation.id}", headers=auth_headers).status_code == 400
