"""Shared pytest fixtures."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import create_app
from xclone.core.config import Settings, get_settings
from xclone.core.security import hash_password
from xclone.crud import user as user_crud
from xclone.db.session import get_db, init_db

TEST_PASSWORD = "password1"


@pytest.fixture
def settings():
    return Settings(
        app_env="dev",
        jwt_secret="test-secret",
        access_token_ttl=timedelta(minutes=5),
        bcrypt_rounds=4,
    )


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of a test, FKs enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(settings, session_factory):
    app = create_app(settings)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a user over HTTP and return the auth headers for it."""
    def _register(username, password=TEST_PASSWORD, first_name="Test", last_name="User", **extra):
        response = client.post("/auth/register", json={
            "username": username,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            **extra,
        })
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register


@pytest.fixture
def make_user(db):
    """Insert a user directly, bypassing the API."""
    def _make(username, password=TEST_PASSWORD):
        user = user_crud.create_user(
            db,
            username=username,
            password=hash_password(password, rounds=4),
            first_name="Test",
            last_name="User",
        )
        db.commit()
        db.refresh(user)
        return user

    return _make
