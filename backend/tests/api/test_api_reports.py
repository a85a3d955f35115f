"""
Report and analytics API tests
"""
from fastapi.testclient import TestClient
from innsync.utils.dates import today_wib


def _pay(client, headers, reservation_id, amount="400000"):
    response = client.post("/payments", headers=headers, json={
        "reservation_id": reservation_id, "amount": amount, "payment_method": "cash",
    })
    assert response.status_code == 200


class TestReports:
    """/reports"""

    def test_all_reports(self, client: TestClient, auth_headers, checked_in_reservation):
        """All reports"""
        data = client.get("/reports", headers=auth_headers).json()

        for section in ("occupancy", "revenue", "guest", "housekeeping", "payment", "performance"):
            assert section in data
        assert data["generated_for"] == today_wib().isoformat()
        assert len(data["time_series"]) == 7
        assert data["occupancy"]["occupancy_rate"] == 100.0
        assert data["occupancy"]["average_length_of_stay"] == 2.0

    def test_revenue_counts_completed_payments(self, client: TestClient, auth_headers, checked_in_reservation):
        """Revenue counts completed payments"""
        _pay(client, auth_headers, checked_in_reservation.id)

        data = client.get("/reports/revenue", headers=auth_headers).json()

        assert data["room_revenue"] == 400000
        assert data["fnb_revenue"] == 0

    def test_payment_breakdown(self, client: TestClient, auth_headers, sample_reservation):
        """Payment breakdown"""
        _pay(client, auth_headers, sample_reservation.id, amount="250000")

        data = client.get("/reports/payment", headers=auth_headers).json()

        assert data["cash"] == 250000
        assert data["transaction_count"] == 1

    def test_unknown_report_type(self, client: TestClient, auth_headers):
        """Unknown report type"""
        response = client.get("/reports/inventory", headers=auth_headers)

        assert response.status_code == 400
        assert "Jenis laporan tidak dikenal" in response.json()["detail"]

    def test_occupancy_by_room_type(self, client: TestClient, auth_headers, checked_in_reservation):
        """Occupancy by room type"""
        data = client.get("/reports/occupancy-by-room-type", headers=auth_headers).json()

        assert data == [{"room_type": "standard", "total_rooms": 1, "occupied_rooms": 1, "occupancy_rate": 100.0}]

    def test_time_series_window(self, client: TestClient, auth_headers, checked_in_reservation):
        """Time series window"""
        data = client.get("/reports/time-series", headers=auth_headers, params={"days": 3}).json()

        assert len(data) == 3
        assert data[-1]["date"] == today_wib().isoformat()
        assert data[-1]["occupied_rooms"] == 1

    def test_time_series_bounds(self, client: TestClient, auth_headers):
        """Time series bounds"""
        assert client.get("/reports/time-series", headers=auth_headers, params={"days": 91}).status_code == 422

    def test_housekeeping_staff_cannot_read_reports(self, client: TestClient, housekeeping_auth_headers):
        """Housekeeping staff cannot read reports"""
        assert client.get("/reports", headers=housekeeping_auth_headers).status_code == 403


class TestAnalytics:
    """/analytics"""

    def test_guest_analytics(self, client: TestClient, auth_headers, sample_guest):
        """Guest analytics"""
        data = client.get("/analytics/guests", headers=auth_headers).json()

        assert data["total_guests"] == 1
        assert data["local_guests"] == 1
        assert data["top_cities"] == [{"city": "Jakarta", "count": 1}]
        assert len(data["registration_trend"]) == 12

    def test_room_analytics_include_capacity(self, client: TestClient, auth_headers, checked_in_reservation):
        """Room analytics include capacity"""
        data = client.get("/analytics/rooms", headers=auth_headers).json()

        assert data["total_rooms"] == 1
        assert data["occupancy_rate"] == 100.0
        assert data["utilization_rate"] == 100.0
        assert data["capacity"]["total_capacity"] == 2

    def test_housekeeping_analytics(self, client: TestClient, housekeeping_auth_headers, sample_room,
                                    housekeeping_user):
        """Housekeeping analytics"""
        client.post("/housekeeping/tasks", headers=housekeeping_auth_headers, json={
            "room_id": sample_room.id, "task_type": "cleaning", "assigned_to": housekeeping_user.id,
        })

        data = client.get("/analytics/housekeeping", headers=housekeeping_auth_headers).json()
        staff = client.get("/analytics/housekeeping/staff", headers=housekeeping_auth_headers).json()

        assert data["total_tasks"] == 1
        assert data["pending_tasks"] == 1
        assert staff["total_staff"] == 1
        assert staff["staff_workload"][0]["staff_name"] == "Wayan"

    def test_housekeeping_summary_is_text(self, client: TestClient, housekeeping_auth_headers, sample_property):
        """Housekeeping summary is text"""
        response = client.get("/analytics/housekeeping/summary", headers=housekeeping_auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("RINGKASAN HOUSEKEEPING")
        assert "Belum ada data" in response.text
