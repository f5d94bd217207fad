"""
Pytest configuration and shared fixtures for testing the BikeRide API.
"""
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bikeride.database import Base
from bikeride.main import app
from bikeride.deps import get_db, get_password_hash
from bikeride import models


# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Tests fire many requests from the same client address
app.state.limiter.enabled = False


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with the test database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db_session, username, email, password, display_name=None):
    user = models.User(
        username=username,
        email=email,
        display_name=display_name,
        hashed_password=get_password_hash(password),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def customer(db_session):
    """
    Create a regular customer account.
    """
    return _make_user(db_session, "rider", "rider@example.com", "riderpass123", "Rita Rider")


@pytest.fixture
def other_customer(db_session):
    return _make_user(db_session, "otherrider", "other@example.com", "otherpass123")


@pytest.fixture
def admin_user(db_session):
    """
    Create a user and grant them admin rights.
    """
    user = _make_user(db_session, "admin", "admin@example.com", "adminpass123", "Admin User")
    db_session.add(models.AdminUser(user_id=user.id, role="admin"))
    db_session.commit()
    return user


def _login(client, username, password):
    response = client.post(
        "/users/login",
        params={"username": username, "password": password},
    )
    return response.json()["access_token"]


@pytest.fixture
def customer_token(client, customer):
    """
    Get a customer authentication token.
    """
    return _login(client, "rider", "riderpass123")


@pytest.fixture
def other_token(client, other_customer):
    return _login(client, "otherrider", "otherpass123")


@pytest.fixture
def admin_token(client, admin_user):
    """
    Get an admin authentication token.
    """
    return _login(client, "admin", "adminpass123")


@pytest.fixture
def sample_bike(db_session):
    """
    Create one available bike.
    """
    bike = models.Bike(
        name="Trail Blazer",
        type="Mountain",
        description="Full suspension mountain bike",
        hourly_rate=12.5,
        daily_rate=60.0,
        image_url="https://example.com/trail.jpg",
        is_available=True,
        bike_number="MT-001",
    )
    db_session.add(bike)
    db_session.commit()
    db_session.refresh(bike)
    return bike


@pytest.fixture
def sample_bikes(db_session):
    """
    Create a small fleet with one unavailable bike.
    """
    bikes = [
        models.Bike(
            name="City Cruiser",
            type="City",
            description="Comfortable commuter with a basket",
            hourly_rate=8.0,
            daily_rate=35.0,
            is_available=True,
        ),
        models.Bike(
            name="Volt E-Bike",
            type="Electric",
            description="Pedal assist up to 25 km/h",
            hourly_rate=15.0,
            daily_rate=70.0,
            is_available=True,
        ),
        models.Bike(
            name="Aero Road",
            type="Road",
            description="Lightweight carbon frame",
            hourly_rate=11.0,
            daily_rate=50.0,
            is_available=True,
        ),
        models.Bike(
            name="Broken Tandem",
            type="Tandem",
            description="Waiting for a new chain",
            hourly_rate=20.0,
            daily_rate=90.0,
            is_available=False,
        ),
    ]
    for bike in bikes:
        db_session.add(bike)
    db_session.commit()
    for bike in bikes:
        db_session.refresh(bike)
    return bikes


def make_booking(db_session, user, bike, status="pending", total_amount=25.0,
                 booking_type="pre_reservation", created_at=None, bike_id=None):
    start = datetime.utcnow() + timedelta(days=1)
    booking = models.Booking(
        user_id=user.id,
        bike_id=bike_id if bike_id is not None else bike.id,
        booking_type=booking_type,
        start_time=start,
        end_time=start + timedelta(hours=2),
        total_amount=total_amount,
        status=status,
        customer_name=user.display_name or user.username,
        customer_email=user.email,
        customer_phone="+15550001111",
        notes=None,
        created_at=created_at or datetime.utcnow(),
    )
    db_session.add(booking)
    db_session.commit()
    db_session.refresh(booking)
    return booking


@pytest.fixture
def booking_factory(db_session):
    """
    Build bookings directly in the database.
    """
    def _factory(user, bike, **kwargs):
        return make_booking(db_session, user, bike, **kwargs)
    return _factory


@pytest.fixture
def sample_booking(db_session, customer, sample_bike):
    """
    Create a pending pre-reservation for the customer.
    """
    return make_booking(db_session, customer, sample_bike)


def get_auth_header(token: str) -> dict:
    """
    Helper function to create authorization header.
    """
    return {"Authorization": f"Bearer {token}"}
