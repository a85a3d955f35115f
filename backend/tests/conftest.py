"""
Pytest configuration and shared fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from datetime import timedelta
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from innsync.database import Base, get_db
from innsync.models import hotel, restaurant, system  # noqa: F401
from innsync.models.hotel import (
    Property, Room, RoomStatus, Guest, Reservation, BookingStatus, BookingSource, Staff, StaffRole
)
from innsync.models.restaurant import RestaurantCategory, RestaurantItem
from innsync.security.auth import get_password_hash, create_access_token, login_rate_limiter
from innsync.services.event_bus import event_bus
from innsync.services.event_handlers import event_handlers
from innsync.services.query_cache import dashboard_cache, kitchen_cache
from innsync.services.webhook_service import webhook_dispatcher
from innsync.utils.dates import today_wib
from innsync.main import app


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(db_session_factory):
    """Database session"""
    session = db_session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def webhook_requests():
    """Requests captured by the mock webhook transport"""
    return []


@pytest.fixture(autouse=True)
def isolated_runtime(db_session_factory, webhook_requests):
    """Point handlers at the test database and reset process-wide state"""
    def handler(request: httpx.Request) -> httpx.Response:
        webhook_requests.append(request)
        return httpx.Response(200, json={"ok": True})

    event_handlers.configure(db_session_factory)
    webhook_dispatcher.configure(
        db_session_factory=db_session_factory,
        client_factory=lambda: httpx.Client(transport=httpx.MockTransport(handler)),
    )
    event_handlers.register_handlers()
    webhook_dispatcher.register()
    dashboard_cache.clear()
    kitchen_cache.clear()
    login_rate_limiter.reset()
    event_bus.clear_history()
    yield
    dashboard_cache.clear()
    kitchen_cache.clear()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client sharing the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Auth fixtures ==============

def _make_staff(db_session, username: str, role: StaffRole, first_name: str) -> Staff:
    staff = Staff(
        username=username,
        password_hash=get_password_hash("Rahasia123!"),
        first_name=first_name,
        role=role,
        is_active=True
    )
    db_session.add(staff)
    db_session.commit()
    db_session.refresh(staff)
    return staff


@pytest.fixture
def admin_user(db_session):
    return _make_staff(db_session, "admin", StaffRole.ADMIN, "Admin")


@pytest.fixture
def manager_user(db_session):
    return _make_staff(db_session, "manager", StaffRole.MANAGER, "Budi")


@pytest.fixture
def receptionist_user(db_session):
    return _make_staff(db_session, "front1", StaffRole.RECEPTIONIST, "Siti")


@pytest.fixture
def housekeeping_user(db_session):
    return _make_staff(db_session, "hk1", StaffRole.HOUSEKEEPING, "Wayan")


@pytest.fixture
def kitchen_user(db_session):
    return _make_staff(db_session, "chef1", StaffRole.KITCHEN, "Made")


@pytest.fixture
def manager_token(manager_user):
    return create_access_token(manager_user.id, manager_user.role)


@pytest.fixture
def auth_headers(manager_token):
    """Manager bearer header"""
    return {"Authorization": f"Bearer {manager_token}"}


@pytest.fixture
def admin_auth_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(admin_user.id, admin_user.role)}"}


@pytest.fixture
def receptionist_auth_headers(receptionist_user):
    return {"Authorization": f"Bearer {create_access_token(receptionist_user.id, receptionist_user.role)}"}


@pytest.fixture
def housekeeping_auth_headers(housekeeping_user):
    return {"Authorization": f"Bearer {create_access_token(housekeeping_user.id, housekeeping_user.role)}"}


@pytest.fixture
def kitchen_auth_headers(kitchen_user):
    return {"Authorization": f"Bearer {create_access_token(kitchen_user.id, kitchen_user.role)}"}


# ============== Entity fixtures ==============

@pytest.fixture
def sample_property(db_session):
    prop = Property(
        name="Hotel Melati",
        address="Jl. Malioboro No. 10",
        city="Yogyakarta",
        state="DI Yogyakarta",
        phone="0274123456",
        total_rooms=1,
    )
    db_session.add(prop)
    db_session.commit()
    db_session.refresh(prop)
    return prop


@pytest.fixture
def sample_room(db_session, sample_property):
    room = Room(
        property_id=sample_property.id,
        room_number="101",
        room_type="standard",
        floor=1,
        capacity=2,
        base_rate=Decimal("500000"),
        amenities=["wifi", "ac"],
        status=RoomStatus.CLEAN,
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_guest(db_session):
    guest = Guest(
        first_name="Andi",
        last_name="Wijaya",
        email="andi@example.com",
        phone="081234567890",
        city="Jakarta",
        nationality="Indonesia",
        identification_type="KTP",
        identification_number="3171012345670001",
    )
    db_session.add(guest)
    db_session.commit()
    db_session.refresh(guest)
    return guest


@pytest.fixture
def sample_reservation(db_session, sample_room, sample_guest):
    """Confirmed two-night stay arriving today"""
    today = today_wib()
    reservation = Reservation(
        property_id=sample_room.property_id,
        room_id=sample_room.id,
        guest_id=sample_guest.id,
        confirmation_number="INN202401010001",
        check_in_date=today,
        check_out_date=today + timedelta(days=2),
        adults=2,
        children=0,
        total_nights=2,
        rate_per_night=Decimal("500000"),
        total_amount=Decimal("1000000"),
        tax_amount=Decimal("110000"),
        status=BookingStatus.CONFIRMED,
        source=BookingSource.DIRECT,
    )
    db_session.add(reservation)
    db_session.commit()
    db_session.refresh(reservation)
    return reservation


@pytest.fixture
def checked_in_reservation(db_session, sample_reservation):
    sample_reservation.status = BookingStatus.CHECKED_IN
    db_session.commit()
    db_session.refresh(sample_reservation)
    return sample_reservation


@pytest.fixture
def sample_menu(db_session, sample_property):
    """One category with a nasi goreng (15 min) and es teh (5 min)"""
    category = RestaurantCategory(property_id=sample_property.id, name="Makanan Utama", display_order=0)
    db_session.add(category)
    db_session.flush()
    nasi = RestaurantItem(
        category_id=category.id, name="Nasi Goreng", price=Decimal("35000"),
        preparation_time=15, dietary_info=["halal"],
    )
    teh = RestaurantItem(
        category_id=category.id, name="Es Teh", price=Decimal("8000"),
        preparation_time=5, dietary_info=["halal", "vegetarian"],
    )
    db_session.add_all([nasi, teh])
    db_session.commit()
    return {"category": category, "nasi": nasi, "teh": teh}
