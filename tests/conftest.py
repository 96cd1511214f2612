"""Shared fixtures: file-backed SQLite per test, fake MQTT gateway, step clock."""

from __future__ import annotations

from concurrent.futures import Future
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.deps import get_db
from api.main import create_app
from core.clock import format_timestamp
from core.mqtt_gateway import PublishOutcome
from core.reconciler import StatusReconciler
from core.tag_locks import TagLockRegistry
from database.db import build_engine, init_db, make_session_factory


class FakeGateway:
    """Records payloads; `dispatch` completes synchronously."""

    def __init__(self, ok: bool = True, error: str = "not_connected") -> None:
        self.ok = ok
        self.error = error
        self.published: list[str] = []
        self.state = "connected"

    def publish(self, payload: str) -> PublishOutcome:
        self.published.append(payload)
        if self.ok:
            return PublishOutcome(True, payload)
        return PublishOutcome(False, payload, self.error)

    def dispatch(self, payload: str) -> Future:
        future: Future = Future()
        future.set_result(self.publish(payload))
        return future

    def status(self) -> dict:
        return {
            "status": self.state,
            "host": "broker.test",
            "port": 1883,
            "topic": "rfid/status",
            "last_error": None,
        }


class StepClock:
    """Canonical timestamps one second apart, starting at a fixed instant."""

    def __init__(self, start: datetime | None = None) -> None:
        self.moment = start or datetime(2024, 5, 1, 0, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> str:
        value = format_timestamp(self.moment)
        self.moment += timedelta(seconds=1)
        return value


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'rfid.db'}")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def reconciler(session_factory, gateway, clock) -> StatusReconciler:
    return StatusReconciler(
        session_factory,
        gateway,
        clock=clock,
        locks=TagLockRegistry(),
        publish_timeout=0.5,
    )


def make_client(session_factory, gateway, reconciler) -> TestClient:
    app = create_app()
    app.state.gateway = gateway
    app.state.reconciler = reconciler

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # no context manager: the lifespan (real MQTT, real DB) never runs
    return TestClient(app)


@pytest.fixture
def client_factory():
    return make_client


@pytest.fixture
def client(session_factory, gateway, reconciler) -> TestClient:
    return make_client(session_factory, gateway, reconciler)
