"""
Property API tests, including the setup wizard
"""
from fastapi.testclient import TestClient


def _setup_payload(**overrides):
    payload = {
        "property": {
            "name": "Losmen Sari",
            "address": "Jl. Pantai Kuta 5",
            "city": "Denpasar",
            "state": "Bali",
            "phone": "0361123456",
        },
        "rooms": [
            {"room_number": "101", "room_type": "standard", "floor": 1, "base_rate": "350000"},
            {"room_number": "102", "room_type": "standard", "floor": 1, "base_rate": "350000"},
            {"room_number": "201", "room_type": "deluxe", "floor": 2, "capacity": 3, "base_rate": "550000"},
        ],
    }
    payload.update(overrides)
    return payload


class TestPropertySetup:
    """POST /properties/setup"""

    def test_setup_creates_property_and_rooms(self, client: TestClient, auth_headers):
        """Setup creates property and rooms"""
        response = client.post("/properties/setup", headers=auth_headers, json=_setup_payload())

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Losmen Sari"
        assert data["total_rooms"] == 3

        rooms = client.get("/rooms", headers=auth_headers, params={"property_id": data["id"]}).json()
        assert sorted(r["room_number"] for r in rooms) == ["101", "102", "201"]
        assert all(r["status"] == "clean" for r in rooms)

    def test_setup_rejects_duplicate_room_numbers(self, client: TestClient, auth_headers):
        """Setup rejects duplicate room numbers"""
        payload = _setup_payload(rooms=[
            {"room_number": "101", "room_type": "standard", "base_rate": "350000"},
            {"room_number": "101", "room_type": "deluxe", "base_rate": "550000"},
        ])

        response = client.post("/properties/setup", headers=auth_headers, json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Nomor kamar tidak boleh duplikat"
        assert client.get("/properties", headers=auth_headers).json() == []

    def test_setup_requires_property_write(self, client: TestClient, receptionist_auth_headers):
        """Setup requires property write"""
        response = client.post("/properties/setup", headers=receptionist_auth_headers, json=_setup_payload())

        assert response.status_code == 403


class TestPropertyCrud:
    """GET/POST/PUT/DELETE /properties"""

    def test_list_and_get(self, client: TestClient, auth_headers, sample_property):
        """List and get"""
        listed = client.get("/properties", headers=auth_headers).json()
        assert [p["name"] for p in listed] == ["Hotel Melati"]

        response = client.get(f"/properties/{sample_property.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["city"] == "Yogyakarta"

    def test_get_missing_property(self, client: TestClient, auth_headers):
        """Get missing property"""
        response = client.get("/properties/999", headers=auth_headers)

        assert response.status_code == 404

    def test_update_property(self, client: TestClient, auth_headers, sample_property):
        """Update property"""
        response = client.put(
            f"/properties/{sample_property.id}", headers=auth_headers, json={"name": "Hotel Melati Indah"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Hotel Melati Indah"
        assert response.json()["city"] == "Yogyakarta"

    def test_delete_missing_property(self, client: TestClient, auth_headers):
        """Delete missing property"""
        response = client.delete("/properties/999", headers=auth_headers)

        assert response.status_code == 404
