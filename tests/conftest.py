"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dealership.core.security import create_access_token, get_password_hash
from dealership.db.session import get_db
from dealership.main import app
from dealership.models import Base, Customer, User


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the test database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db_session, username: str, is_active: bool = True) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        full_name=username.title(),
        role="admin",
        hashed_password=get_password_hash("secret123"),
        is_active=is_active,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user(db_session) -> User:
    return make_user(db_session, "seller")


@pytest.fixture
def other_user(db_session) -> User:
    return make_user(db_session, "manager")


@pytest.fixture
def auth_headers(user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


@pytest.fixture
def other_auth_headers(other_user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject=other_user.id)}"}


@pytest.fixture
def customer(db_session) -> Customer:
    customer = Customer(
        name="Maria Souza",
        ident_document="12345678901",
        email="maria@example.com",
        phone="(16) 99999-0000",
    )
    db_session.add(customer)
    db_session.commit()
    db_session.refresh(customer)
    return customer


@pytest.fixture
def car_payload() -> Dict[str, Any]:
    """A payload that passes every car validation rule."""
    return {
        "brand": "Volkswagen",
        "model": "Gol",
        "color": "PRATA",
        "year_manufacture": 2018,
        "imported": False,
        "plates": "ABC-1D23",
        "selling_date": "2023-05-10",
        "selling_price": 45000.0,
    }
