"""
pytest configuration and fixtures.
"""

import base64
import os
from typing import Callable, Generator

import pytest

# Settings must exist before the app modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from courses_api.api.core import UserCreate, create_user
from courses_api.api.main import app
from courses_api.db.db import get_db, init_db
from courses_api.db.models import User

USER_PASSWORD = "correct horse battery staple"


@pytest.fixture
def engine():
    """Fresh in-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """TestClient whose requests use the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def basic_auth() -> Callable[[str, str], dict]:
    """Build an Authorization header for the given email and password."""

    def build(email: str, password: str) -> dict:
        token = base64.b64encode(f"{email}:{password}".encode()).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    return build


@pytest.fixture
def user_password() -> str:
    return USER_PASSWORD


@pytest.fixture
def user(db, user_password) -> User:
    """A registered user."""
    return create_user(db, UserCreate(
        firstName="Joe",
        lastName="Smith",
        emailAddress="joe@smith.com",
        password=user_password,
    ))


@pytest.fixture
def auth_headers(user, user_password, basic_auth) -> dict:
    return basic_auth(user.emailAddress, user_password)


@pytest.fixture
def course_payload(user) -> dict:
    return {
        "title": "Build a Basic Bookcase",
        "description": "High-end furniture projects are great to dream about.",
        "userId": user.id,
    }
