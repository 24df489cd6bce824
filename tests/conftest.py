# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os
import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["CLEANUP_SESSIONS_ON_STARTUP"] = "false"

from dealerdesk.database import get_db
from dealerdesk.main import app
from dealerdesk.models import Corporation, Role, User
from dealerdesk.models.base import Base, utcnow
from dealerdesk.models.session import Session as SessionModel
from dealerdesk.rbac import resources
from dealerdesk.schemas.corporation import CorporationAdminCreate
from dealerdesk.services import corporation_service, role_service
from dealerdesk.services.rbac_seed_service import seed_rbac_data

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SUPER_ADMIN_EMAIL = "root@dealerdesk.io"
DEALER_RESOURCES = [
    resources.ROLES,
    resources.CUSTOMERS,
    resources.VEHICLES,
    resources.AGREEMENTS,
]


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def system_corporation(db_session) -> Corporation:
    """Seed the catalog, the system corporation and the Super Admin user."""
    return seed_rbac_data(db_session, super_admin_email=SUPER_ADMIN_EMAIL)


@pytest.fixture
def dealer(db_session, system_corporation) -> Corporation:
    """A dealership onboarded by the system corporation, with an Admin user."""
    return corporation_service.create_corporation(
        db_session,
        "Bilhallen AB",
        DEALER_RESOURCES,
        admin=CorporationAdminCreate(
            email="admin@bilhallen.se", first_name="Anna", last_name="Berg"
        ),
        requested_by=system_corporation.id,
    )


@pytest.fixture
def dealer_admin_role(db_session, dealer) -> Role:
    return role_service.get_system_role(db_session, dealer.id)


@pytest.fixture
def sales_role(db_session, dealer) -> Role:
    """A custom role of the dealer, denied everything."""
    return role_service.create_custom_role(
        db_session, dealer.id, "Sales", "Sells vehicles"
    )


@pytest.fixture
def sales_user(db_session, dealer, sales_role) -> User:
    user = User(
        corporation_id=dealer.id,
        role_id=sales_role.id,
        email="sales@bilhallen.se",
        first_name="Sven",
        last_name="Lind",
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def create_session(db_session, user_id, expires_in: timedelta = timedelta(days=7)) -> str:
    """Issue a session token the way the login service does."""
    token = str(uuid.uuid4())
    db_session.add(
        SessionModel(user_id=user_id, token=token, expires_at=utcnow() + expires_in)
    )
    db_session.commit()
    return token


@pytest.fixture
def make_session(db_session):
    """Factory issuing session tokens for a user id."""

    def factory(user_id, expires_in: timedelta = timedelta(days=7)) -> str:
        return create_session(db_session, user_id, expires_in)

    return factory


def _login(client, db_session, email: str):
    user = db_session.query(User).filter(User.email == email).one()
    token = create_session(db_session, user.id)
    client.cookies.set("session", token)
    return client


@pytest.fixture
def super_admin_client(client, db_session, system_corporation):
    """Client authenticated as the Super Admin of the system corporation."""
    return _login(client, db_session, SUPER_ADMIN_EMAIL)


@pytest.fixture
def dealer_admin_client(client, db_session, dealer):
    """Client authenticated as the dealer's Admin."""
    return _login(client, db_session, "admin@bilhallen.se")


@pytest.fixture
def sales_client(client, db_session, sales_user):
    """Client authenticated as a dealer user holding the Sales role."""
    return _login(client, db_session, sales_user.email)
