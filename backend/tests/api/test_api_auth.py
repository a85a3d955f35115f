"""
Authentication API tests
Login, rate limiting, current user and role checks
"""
from fastapi.testclient import TestClient


class TestAuthLogin:
    """POST /auth/login"""

    def test_login_success(self, client: TestClient, manager_user):
        """Login success"""
        response = client.post("/auth/login", json={"username": "manager", "password": "Rahasia123!"})

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["staff"]["username"] == "manager"
        assert data["staff"]["role"] == "manager"

    def test_login_wrong_password(self, client: TestClient, manager_user):
        """Login wrong password"""
        response = client.post("/auth/login", json={"username": "manager", "password": "salah"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Username atau password salah"

    def test_login_unknown_user(self, client: TestClient):
        """Login unknown user"""
        response = client.post("/auth/login", json={"username": "siapa", "password": "Rahasia123!"})

        assert response.status_code == 401

    def test_login_inactive_user(self, client: TestClient, db_session, manager_user):
        """Login inactive user"""
        manager_user.is_active = False
        db_session.commit()

        response = client.post("/auth/login", json={"username": "manager", "password": "Rahasia123!"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Akun tidak aktif"

    def test_login_rate_limited_after_five_attempts(self, client: TestClient, manager_user):
        """Login rate limited after five attempts"""
        for _ in range(5):
            response = client.post("/auth/login", json={"username": "manager", "password": "salah"})
            assert response.status_code == 401

        response = client.post("/auth/login", json={"username": "manager", "password": "Rahasia123!"})

        assert response.status_code == 429

    def test_rate_limit_is_per_username(self, client: TestClient, manager_user, receptionist_user):
        """Rate limit is per username"""
        for _ in range(5):
            client.post("/auth/login", json={"username": "manager", "password": "salah"})

        response = client.post("/auth/login", json={"username": "front1", "password": "Rahasia123!"})

        assert response.status_code == 200

    def test_successful_login_resets_counter(self, client: TestClient, manager_user):
        """Successful login resets counter"""
        for _ in range(4):
            client.post("/auth/login", json={"username": "manager", "password": "salah"})
        assert client.post("/auth/login", json={"username": "manager", "password": "Rahasia123!"}).status_code == 200

        for _ in range(4):
            client.post("/auth/login", json={"username": "manager", "password": "salah"})
        response = client.post("/auth/login", json={"username": "manager", "password": "Rahasia123!"})

        assert response.status_code == 200


class TestCurrentUser:
    """GET /auth/me"""

    def test_me_returns_staff(self, client: TestClient, auth_headers):
        """Me returns staff"""
        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["username"] == "manager"

    def test_me_without_token(self, client: TestClient):
        """Me without token"""
        response = client.get("/auth/me")

        assert response.status_code in (401, 403)

    def test_me_with_invalid_token(self, client: TestClient):
        """Me with invalid token"""
        response = client.get("/auth/me", headers={"Authorization": "Bearer bukan-token"})

        assert response.status_code == 401


class TestPasswordStrength:
    """POST /auth/password-strength"""

    def test_strong_password(self, client: TestClient):
        """Strong password"""
        response = client.post("/auth/password-strength", json={"password": "Rahasia123!"})

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 5
        assert data["is_strong"] is True
        assert data["feedback"] == []

    def test_weak_password_feedback(self, client: TestClient):
        """Weak password feedback"""
        response = client.post("/auth/password-strength", json={"password": "abc"})

        data = response.json()
        assert data["is_strong"] is False
        assert "Password minimal 8 karakter" in data["feedback"]


class TestRolePermissions:
    """Endpoint guards per staff role"""

    def test_housekeeping_cannot_read_reservations(self, client: TestClient, housekeeping_auth_headers):
        """Housekeeping cannot read reservations"""
        response = client.get("/reservations", headers=housekeeping_auth_headers)

        assert response.status_code == 403

    def test_housekeeping_can_read_tasks(self, client: TestClient, housekeeping_auth_headers):
        """Housekeeping can read tasks"""
        response = client.get("/housekeeping/tasks", headers=housekeeping_auth_headers)

        assert response.status_code == 200

    def test_kitchen_can_read_orders_not_guests(self, client: TestClient, kitchen_auth_headers):
        """Kitchen can read orders not guests"""
        assert client.get("/restaurant/orders", headers=kitchen_auth_headers).status_code == 200
        assert client.get("/guests", headers=kitchen_auth_headers).status_code == 403

    def test_receptionist_cannot_create_rooms(self, client: TestClient, receptionist_auth_headers, sample_property):
        """Receptionist cannot create rooms"""
        response = client.post("/rooms", headers=receptionist_auth_headers, json={
            "property_id": sample_property.id,
            "room_number": "201",
            "room_type": "deluxe",
            "base_rate": "750000",
        })

        assert response.status_code == 403

    def test_admin_holds_every_permission(self, client: TestClient, admin_auth_headers):
        """Admin holds every permission"""
        assert client.get("/webhooks", headers=admin_auth_headers).status_code == 200
        assert client.get("/backup", headers=admin_auth_headers).status_code == 200
