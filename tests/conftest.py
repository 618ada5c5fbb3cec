"""Shared fixtures: a throwaway SQLite database and a recording transport."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"

from ispmedia.infrastructure.realtime import ConnectionRegistry, RealtimeHub  # noqa: E402


class RecordingTransport:
    """Transport double that records every send instead of touching sockets."""

    def __init__(self, failing: set | None = None) -> None:
        self.sent: list[tuple[object, str, object]] = []
        self.closed: list[tuple[object, int]] = []
        self.failing = failing or set()

    def send(self, connection, event, payload) -> None:
        if connection in self.failing:
            raise ConnectionError(f"connection {connection} is gone")
        self.sent.append((connection, event, payload))

    def close(self, connection, *, code: int = 1000) -> None:
        self.closed.append((connection, code))

    def sends_to(self, connection) -> list[object]:
        return [payload for target, _, payload in self.sent if target == connection]


@pytest.fixture()
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def hub(registry: ConnectionRegistry, transport: RecordingTransport) -> RealtimeHub:
    return RealtimeHub(registry, transport)


@pytest.fixture()
def db_session():
    """Yield a session bound to freshly created tables."""

    from ispmedia.infrastructure import database

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.initialize_database()
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


def pytest_sessionfinish(session, exitstatus):
    from ispmedia.infrastructure import database

    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
