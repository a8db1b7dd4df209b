"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Configure the app for tests before anything reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["OUTBOX_PROCESSOR_ENABLED"] = "false"
os.environ["SESSION_SWEEP_INTERVAL_SECONDS"] = "0"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from tableside_api.main import app
from tableside_api.models import (
    Base,
    Category,
    Dish,
    Option,
    OptionGroup,
    StaffUser,
    Table,
)
from tableside_shared.config.constants import Roles, SelectionType
from tableside_shared.infrastructure.db import SessionLocal, engine, get_db
from tableside_shared.security.password import hash_password
from tableside_shared.security.rate_limit import limiter

limiter.enabled = False

# The shared engine is an in-memory SQLite database on a StaticPool, so the
# test session, the app and background helpers all see the same data.
TestingSessionLocal = SessionLocal

ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "testpass123"
WAITER_EMAIL = "waiter@test.com"
WAITER_PASSWORD = "waiter123"


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
# Catalog
# =============================================================================


@pytest.fixture
def seed_category(db_session):
    """The "🍔 Burgers" category, without option groups."""
    category = Category(name="Burgers", emoji="🍔", display_order=1)
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def seed_plain_category(db_session):
    """A category that owns no option groups."""
    category = Category(name="Drinks", emoji="🥤", display_order=2)
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def seed_dish(db_session, seed_category):
    """A burger at 5000 in the Burgers category."""
    dish = Dish(
        name="Classic Burger",
        description="Bun, beef, lettuce, tomato",
        price_cents=5000,
        category_id=seed_category.id,
        legacy_category=seed_category.label,
    )
    db_session.add(dish)
    db_session.commit()
    db_session.refresh(dish)
    return dish


@pytest.fixture
def seed_plain_dish(db_session, seed_plain_category):
    """A drink at 1200 whose category has no option groups."""
    dish = Dish(name="Hibiscus Juice", price_cents=1200, category_id=seed_plain_category.id)
    db_session.add(dish)
    db_session.commit()
    db_session.refresh(dish)
    return dish


@pytest.fixture
def seed_groups(db_session, seed_category):
    """
    Option groups of the Burgers category:

    - Cooking (single, required): Rare, Medium, Well done
    - Sauce (single): Mayo, Ketchup
    - Extras (multiple): Bacon +500, Egg +300, Cheese +300 (unavailable)

    Returns a dict keyed by group name, each value (group, {option name: option}).
    """
    definitions = [
        ("Cooking", SelectionType.SINGLE, True, [("Rare", 0, True), ("Medium", 0, True), ("Well done", 0, True)]),
        ("Sauce", SelectionType.SINGLE, False, [("Mayo", 0, True), ("Ketchup", 0, True)]),
        ("Extras", SelectionType.MULTIPLE, False, [("Bacon", 500, True), ("Egg", 300, True), ("Cheese", 300, False)]),
    ]
    result = {}
    for group_order, (name, selection_type, required, options) in enumerate(definitions):
        group = OptionGroup(
            category_id=seed_category.id,
            name=name,
            selection_type=selection_type,
            is_required=required,
            display_order=group_order,
        )
        db_session.add(group)
        db_session.flush()

        by_name = {}
        for option_order, (option_name, extra, available) in enumerate(options):
            option = Option(
                option_group_id=group.id,
                name=option_name,
                extra_price_cents=extra,
                is_available=available,
                display_order=option_order,
            )
            db_session.add(option)
            by_name[option_name] = option
        result[name] = (group, by_name)

    db_session.commit()
    return result


def selection(groups, group_name, option_name):
    """Request payload for one pick from the ``seed_groups`` fixture."""
    group, options = groups[group_name]
    return {"groupId": group.id, "optionId": options[option_name].id}


# =============================================================================
# Tables and staff
# =============================================================================


@pytest.fixture
def seed_tables(db_session):
    """Tables 1 to 3."""
    tables = [Table(number=n, label=f"Table {n}") for n in range(1, 4)]
    db_session.add_all(tables)
    db_session.commit()
    return tables


@pytest.fixture
def seed_admin_user(db_session):
    """Create an admin user for testing authenticated endpoints."""
    user = StaffUser(
        email=ADMIN_EMAIL,
        password=hash_password(ADMIN_PASSWORD, rounds=4),
        full_name="Test Admin",
        role=Roles.ADMIN,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def seed_waiter_user(db_session):
    """Create a waiter user for testing."""
    user = StaffUser(
        email=WAITER_EMAIL,
        password=hash_password(WAITER_PASSWORD, rounds=4),
        full_name="Test Waiter",
        role=Roles.WAITER,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _login(client, email, password):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, f"Login failed: {response.json()}"
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client, seed_admin_user):
    """Get authentication headers for API calls."""
    return _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def waiter_auth_headers(client, seed_waiter_user):
    """Get authentication headers for waiter API calls."""
    return _login(client, WAITER_EMAIL, WAITER_PASSWORD)


@pytest.fixture
def table_session(client, seed_tables):
    """Scan table 1; returns the session payload."""
    response = client.post("/api/diner/sessions", json={"tableNumber": 1})
    assert response.status_code == 201, response.json()
    return response.json()


@pytest.fixture
def table_headers(table_session):
    """X-Table-Token header for the scanned table."""
    return {"X-Table-Token": table_session["tableToken"]}
