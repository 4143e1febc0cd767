"""
Pytest configuration and fixtures for backend tests.
"""

import os
import tempfile

# Settings are read once at import time; point them at throwaway storage first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="mooprompt-test-"))
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mooprompt_api.main import app
from mooprompt_api.models import (
    Base,
    Department,
    ExtraCharge,
    MenuCategory,
    MenuItem,
    Package,
    Table,
    Template,
    TemplateCheckpoint,
    User,
)
from mooprompt_api.services.domain.session_service import SessionService
from mooprompt_api.services.flow import WorkOrderService
from shared.config.constants import ChargeType, Roles, TableStatus
from shared.infrastructure.db import get_db
from shared.infrastructure.events import set_event_publisher
from shared.security.auth import sign_user_token
from shared.security.password import hash_password
from shared.security.rate_limit import limiter
from shared.utils.flow_schemas import WorkOrderCreate
from shared.utils.pos_schemas import SessionOpen


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpass123"


class RecordingPublisher:
    """Collects emitted events instead of publishing them to Redis."""

    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)
        return 1

    def of_type(self, event_type):
        return [e for e in self.events if e.type == event_type]


@pytest.fixture(autouse=True)
def events():
    """Every test gets a fresh event recorder."""
    publisher = RecordingPublisher()
    set_event_publisher(publisher)
    limiter.reset()
    yield publisher
    set_event_publisher(None)


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


def make_user(db_session, username, role, department_id=None, password=TEST_PASSWORD):
    user = User(
        username=username,
        name=username.capitalize(),
        password_hash=hash_password(password),
        role=role,
        department_id=department_id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def headers_for(user):
    """Bearer headers for a user without going through the login endpoint."""
    return {"Authorization": f"Bearer {sign_user_token(user)}"}


@pytest.fixture
def seed_admin_user(db_session):
    return make_user(db_session, "admin", Roles.ADMIN)


@pytest.fixture
def seed_manager_user(db_session):
    return make_user(db_session, "manager", Roles.MANAGER)


@pytest.fixture
def seed_cashier_user(db_session):
    return make_user(db_session, "cashier", Roles.CASHIER)


@pytest.fixture
def seed_kitchen_user(db_session):
    return make_user(db_session, "kitchen", Roles.KITCHEN)


@pytest.fixture
def auth_headers(client, seed_admin_user):
    """Get authentication headers for API calls."""
    response = client.post(
        "/api/auth/login",
        json={"username": "admin", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200, f"Login failed: {response.json()}"
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def manager_headers(seed_manager_user):
    return headers_for(seed_manager_user)


@pytest.fixture
def cashier_headers(seed_cashier_user):
    return headers_for(seed_cashier_user)


@pytest.fixture
def kitchen_headers(seed_kitchen_user):
    return headers_for(seed_kitchen_user)


# =============================================================================
# POS fixtures
# =============================================================================


@pytest.fixture
def seed_table(db_session):
    table = Table(name="A1", status=TableStatus.AVAILABLE)
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


@pytest.fixture
def seed_package(db_session):
    package = Package(name="Buffet 299", price_per_person=299.0, duration_minutes=90)
    db_session.add(package)
    db_session.commit()
    db_session.refresh(package)
    return package


@pytest.fixture
def seed_extra_charges(db_session):
    water = ExtraCharge(name="Water refill", price=20.0, charge_type=ChargeType.PER_PERSON)
    corkage = ExtraCharge(name="Corkage", price=100.0, charge_type=ChargeType.PER_SESSION)
    db_session.add_all([water, corkage])
    db_session.commit()
    return water, corkage


@pytest.fixture
def seed_menu(db_session):
    """
    Two categories:
    - Grill: pork belly (free in buffet), wagyu (never free)
    - Drinks: thai tea (a-la-carte only)
    """
    grill = MenuCategory(name="Grill")
    drinks = MenuCategory(name="Drinks")
    db_session.add_all([grill, drinks])
    db_session.flush()

    pork = MenuItem(category_id=grill.id, name="Pork belly", price=129.0, is_popular=True)
    wagyu = MenuItem(category_id=grill.id, name="Wagyu", price=390.0, is_free_in_buffet=False)
    tea = MenuItem(
        category_id=drinks.id,
        name="Thai tea",
        price=45.0,
        is_buffet_item=False,
        is_free_in_buffet=False,
    )
    db_session.add_all([pork, wagyu, tea])
    db_session.commit()
    return {"pork": pork, "wagyu": wagyu, "tea": tea, "grill": grill, "drinks": drinks}


@pytest.fixture
def buffet_session(db_session, seed_table, seed_package):
    """A two-person buffet sitting at table A1."""
    session = SessionService(db_session).open(
        SessionOpen(table_id=seed_table.id, people_count=2, package_id=seed_package.id),
        None,
    )
    db_session.commit()
    return session


@pytest.fixture
def a_la_carte_session(db_session, seed_table):
    session = SessionService(db_session).open(
        SessionOpen(table_id=seed_table.id, people_count=3),
        None,
    )
    db_session.commit()
    return session


# =============================================================================
# FlowTrak fixtures
# =============================================================================


@pytest.fixture
def seed_departments(db_session):
    sales = Department(name="Sales")
    production = Department(name="Production")
    db_session.add_all([sales, production])
    db_session.commit()
    return sales, production


@pytest.fixture
def seed_template(db_session, seed_departments):
    """Quote (Sales) -> Build (Production) -> Deliver (Sales)."""
    sales, production = seed_departments
    template = Template(name="Standard job", description="Three step job")
    db_session.add(template)
    db_session.flush()
    db_session.add_all(
        [
            TemplateCheckpoint(template_id=template.id, name="Quote", owner_dept_id=sales.id, order=1),
            TemplateCheckpoint(template_id=template.id, name="Build", owner_dept_id=production.id, order=2),
            TemplateCheckpoint(template_id=template.id, name="Deliver", owner_dept_id=sales.id, order=3),
        ]
    )
    db_session.commit()
    db_session.refresh(template)
    return template


@pytest.fixture
def seed_work_order(db_session, seed_template):
    work = WorkOrderService(db_session).create(
        WorkOrderCreate(company="ACME", title="Signboard", template_id=seed_template.id),
        None,
    )
    db_session.commit()
    return work


@pytest.fixture
def sales_member(db_session, seed_departments):
    return make_user(db_session, "sally", Roles.STAFF, department_id=seed_departments[0].id)


@pytest.fixture
def production_member(db_session, seed_departments):
    return make_user(db_session, "pete", Roles.STAFF, department_id=seed_departments[1].id)
