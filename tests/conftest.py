"""Shared fixtures: in-memory SQLite database, storage handle and API clients.

The environment is set before ``servicehub`` is imported so the engine binds to
the in-memory database and no log file is written.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from servicehub.database import Base, SessionLocal, engine
from servicehub.main import app
from servicehub.services.storage import DatabaseStorage


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(db):
    return DatabaseStorage(db)


@pytest.fixture
def make_client():
    """Each client keeps its own cookie jar, i.e. its own login session"""

    def _make_client():
        return TestClient(app)

    return _make_client


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def register():
    def _register(client, username, user_type="customer", password="secret123"):
        response = client.post(
            "/api/register",
            json={
                "username": username,
                "password": password,
                "userType": user_type,
                "name": username.title(),
                "email": f"{username}@example.com",
                "phone": "555-0100",
                "address": "1 Main Street",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def make_user(storage):
    def _make_user(username, user_type="customer"):
        return storage.create_user(
            {
                "username": username,
                "password": "not-a-real-hash",
                "user_type": user_type,
                "name": username.title(),
                "email": f"{username}@example.com",
                "phone": "555-0100",
                "address": "1 Main Street",
            }
        )

    return _make_user


@pytest.fixture
def worker_payload():
    def _worker_payload(user_id, **overrides):
        payload = {
            "userId": user_id,
            "workingStatus": "employed",
            "location": "Springfield",
            "services": ["Plumbing"],
            "experience": 5,
            "availability": {
                "days": ["Monday"],
                "timeSlots": [{"start": "09:00", "end": "12:00"}],
            },
            "about": "Licensed plumber, fixes leaks fast.",
            "certifications": ["City plumbing license"],
        }
        payload.update(overrides)
        return payload

    return _worker_payload
