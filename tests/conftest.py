"""
Pytest configuration and fixtures for API tests.
"""

import os

# Settings are read at import time, so the environment must be set first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ordo_api.main import app
from ordo_api.models import (
    Base,
    DiningTable,
    ItemModifier,
    MenuCategory,
    MenuItem,
    RestaurantConfig,
    User,
)
from ordo_shared.infrastructure.db import get_db
from ordo_shared.security.auth import sign_session_token
from ordo_shared.security.password import hash_password
from tests.helpers import OPENING_HOURS


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
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


# =============================================================================
# Users
# =============================================================================


def _make_user(db_session, email: str, role: str, password: str = "secret123") -> User:
    user = User(
        email=email,
        name=f"Test {role.title()}",
        password=hash_password(password),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers_for(user: User) -> dict[str, str]:
    token = sign_session_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session):
    return _make_user(db_session, "admin@test.com", "ADMIN", password="admin123")


@pytest.fixture
def kitchen_user(db_session):
    return _make_user(db_session, "kitchen@test.com", "KITCHEN")


@pytest.fixture
def waiter_user(db_session):
    return _make_user(db_session, "waiter@test.com", "WAITER")


@pytest.fixture
def customer_user(db_session):
    return _make_user(db_session, "customer@test.com", "CUSTOMER")


@pytest.fixture
def admin_headers(admin_user):
    return _headers_for(admin_user)


@pytest.fixture
def kitchen_headers(kitchen_user):
    return _headers_for(kitchen_user)


@pytest.fixture
def waiter_headers(waiter_user):
    return _headers_for(waiter_user)


@pytest.fixture
def customer_headers(customer_user):
    return _headers_for(customer_user)


# =============================================================================
# Restaurant and menu
# =============================================================================


@pytest.fixture
def restaurant_config(db_session):
    """Open Monday-Saturday, closed Sunday; delivery $25 fee, $150 minimum, free over $300."""
    config = RestaurantConfig(
        name="Test Restaurant",
        slug="test-restaurant",
        contact_info={},
        address={},
        opening_hours=OPENING_HOURS,
        services={"dine_in": True, "takeout": True, "delivery": True, "reservations": True},
        delivery_config={
            "fee_cents": 2500,
            "minimum_order_cents": 15000,
            "radius_km": 5.0,
            "estimated_time_minutes": 45,
            "free_over_cents": 30000,
        },
        branding={},
    )
    db_session.add(config)
    db_session.commit()
    db_session.refresh(config)
    return config


@pytest.fixture
def menu_category(db_session):
    category = MenuCategory(name="Entradas", sort_order=1)
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def guacamole(db_session, menu_category):
    """$85.00 item."""
    item = MenuItem(
        category_id=menu_category.id,
        name="Guacamole Tradicional",
        description="Aguacate, cebolla y cilantro",
        price_cents=8500,
        ingredients=["aguacate", "cebolla", "cilantro"],
        is_featured=True,
    )
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


@pytest.fixture
def extra_cheese(db_session, guacamole):
    """+$15.00 modifier on the guacamole."""
    modifier = ItemModifier(
        menu_item_id=guacamole.id,
        name="Queso extra",
        price_adjustment_cents=1500,
        options=[{"name": "Oaxaca"}, {"name": "Cotija"}],
    )
    db_session.add(modifier)
    db_session.commit()
    db_session.refresh(modifier)
    return modifier


@pytest.fixture
def dining_tables(db_session):
    tables = [DiningTable(number=1, seats=2), DiningTable(number=2, seats=4)]
    db_session.add_all(tables)
    db_session.commit()
    for table in tables:
        db_session.refresh(table)
    return tables
