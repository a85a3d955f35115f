"""
Room API tests
"""
from datetime import timedelta
from fastapi.testclient import TestClient
from innsync.utils.dates import today_wib


class TestRoomCrud:
    """Room inventory"""

    def test_create_room_updates_total(self, client: TestClient, auth_headers, sample_room):
        """Create room updates total"""
        response = client.post("/rooms", headers=auth_headers, json={
            "property_id": sample_room.property_id,
            "room_number": "102",
            "room_type": "deluxe",
            "floor": 1,
            "capacity": 3,
            "base_rate": "750000",
            "amenities": ["wifi", "tv"],
        })

        assert response.status_code == 200
        assert response.json()["status"] == "clean"
        prop = client.get(f"/properties/{sample_room.property_id}", headers=auth_headers).json()
        assert prop["total_rooms"] == 2

    def test_duplicate_room_number_rejected(self, client: TestClient, auth_headers, sample_room):
        """Duplicate room number rejected"""
        response = client.post("/rooms", headers=auth_headers, json={
            "property_id": sample_room.property_id,
            "room_number": "101",
            "room_type": "standard",
            "base_rate": "500000",
        })

        assert response.status_code == 400
        assert "101" in response.json()["detail"]

    def test_create_room_unknown_property(self, client: TestClient, auth_headers):
        """Create room unknown property"""
        response = client.post("/rooms", headers=auth_headers, json={
            "property_id": 999,
            "room_number": "101",
            "room_type": "standard",
            "base_rate": "500000",
        })

        assert response.status_code == 404

    def test_filter_by_status(self, client: TestClient, auth_headers, sample_room):
        """Filter by status"""
        assert len(client.get("/rooms", headers=auth_headers, params={"status": "clean"}).json()) == 1
        assert client.get("/rooms", headers=auth_headers, params={"status": "dirty"}).json() == []

    def test_get_room(self, client: TestClient, auth_headers, sample_room):
        """Get room"""
        response = client.get(f"/rooms/{sample_room.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["room_number"] == "101"
        assert float(response.json()["base_rate"]) == 500000

    def test_get_missing_room(self, client: TestClient, auth_headers):
        """Get missing room"""
        assert client.get("/rooms/999", headers=auth_headers).status_code == 404


class TestRoomStatus:
    """PATCH /rooms/{id}/status"""

    def test_housekeeping_can_mark_dirty(self, client: TestClient, housekeeping_auth_headers, sample_room):
        """Housekeeping can mark dirty"""
        response = client.patch(
            f"/rooms/{sample_room.id}/status", headers=housekeeping_auth_headers, json={"status": "dirty"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "dirty"

    def test_invalid_status_rejected(self, client: TestClient, auth_headers, sample_room):
        """Invalid status rejected"""
        response = client.patch(f"/rooms/{sample_room.id}/status", headers=auth_headers, json={"status": "rusak"})

        assert response.status_code == 422


class TestRoomDeactivation:
    """DELETE /rooms/{id}"""

    def test_deactivate_room(self, client: TestClient, auth_headers, sample_room):
        """Deactivate room"""
        response = client.delete(f"/rooms/{sample_room.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_occupied_room_cannot_be_deactivated(self, client: TestClient, auth_headers, checked_in_reservation):
        """Occupied room cannot be deactivated"""
        response = client.delete(f"/rooms/{checked_in_reservation.room_id}", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Kamar sedang ditempati"


class TestAvailableRooms:
    """GET /rooms/available"""

    def test_booked_room_is_excluded(self, client: TestClient, auth_headers, sample_reservation):
        """Booked room is excluded"""
        today = today_wib()
        params = {"check_in_date": str(today), "check_out_date": str(today + timedelta(days=1))}

        response = client.get("/rooms/available", headers=auth_headers, params=params)

        assert response.status_code == 200
        assert response.json() == []

    def test_room_free_from_checkout_day(self, client: TestClient, auth_headers, sample_reservation):
        """Room free from checkout day"""
        start = sample_reservation.check_out_date
        params = {"check_in_date": str(start), "check_out_date": str(start + timedelta(days=1))}

        response = client.get("/rooms/available", headers=auth_headers, params=params)

        assert [r["room_number"] for r in response.json()] == ["101"]

    def test_capacity_filter(self, client: TestClient, auth_headers, sample_room):
        """Capacity filter"""
        today = today_wib()
        params = {"check_in_date": str(today), "check_out_date": str(today + timedelta(days=1)), "guests": 3}

        assert client.get("/rooms/available", headers=auth_headers, params=params).json() == []

    def test_reversed_dates_rejected(self, client: TestClient, auth_headers, sample_room):
        """Reversed dates rejected"""
        today = today_wib()
        params = {"check_in_date": str(today), "check_out_date": str(today)}

        assert client.get("/rooms/available", headers=auth_headers, params=params).status_code == 400
