from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from habit_tracker.database import Database
from habit_tracker.main import create_app

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def client(database):
    app = create_app(database=database, clock=lambda: FIXED_NOW)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def user(client):
    r = client.post("/api/v1/users", json={"name": "Demo User", "email": "demo@example.com"})
    assert r.status_code == 201
    return r.json()


@pytest.fixture
def make_habit(client, user):
    def _make(**overrides):
        body = {"name": "Run", "start_date": "2024-01-01", "frequency_of_task": 7}
        body.update(overrides)
        r = client.post(f"/api/v1/users/{user['id']}/habits", json=body)
        assert r.status_code == 201, r.text
        return r.json()
    return _make
