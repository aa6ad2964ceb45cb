from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from campusvote.core.rate_limit import limiter
from campusvote.dependencies import get_election_service
from campusvote.main import app
from campusvote.service import ElectionService
from campusvote.store import RecordStore

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    return RecordStore(tmp_path / "election.json")


@pytest.fixture
def service(store: RecordStore, clock: FakeClock) -> ElectionService:
    return ElectionService(store, clock=clock)


@pytest.fixture
def open_service(service: ElectionService, clock: FakeClock) -> ElectionService:
    """Service with an election that started an hour ago and ends in an hour."""
    service.set_election_schedule(clock.now - timedelta(hours=1), clock.now + timedelta(hours=1))
    return service


@pytest.fixture
def client(service: ElectionService):
    app.dependency_overrides[get_election_service] = lambda: service
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    response = client.post("/auth/admin/login", json={"password": "admin123"})
    assert response.status_code == 200
    return client
