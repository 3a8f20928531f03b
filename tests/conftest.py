from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.timeclock.timeclock.container import AppOptions, build_services
from tests.fakes import InMemoryRecords, InMemorySessions, InMemoryUsers, RecordingNotifier


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday 2026-01-14 12:00 Pacific
    return datetime(2026, 1, 14, 20, 0, tzinfo=timezone.utc)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def records() -> InMemoryRecords:
    return InMemoryRecords()


@pytest.fixture
def sessions() -> InMemorySessions:
    return InMemorySessions()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def container(users, records, sessions, notifier):
    return build_services(
        users_repo=users,
        records_repo=records,
        sessions_repo=sessions,
        options=AppOptions(timezone="America/Los_Angeles"),
        notifier=notifier,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.timeclock.timeclock.main import create_app

    flask_app = create_app(container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
