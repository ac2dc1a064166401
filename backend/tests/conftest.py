from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

# must be set before charitybox is imported: the default app is built at import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_DATABASE"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from charitybox.core.config import Settings
from charitybox.database import Base, build_engine, build_session_factory
from charitybox.main import create_app
from charitybox.models import donation  # noqa: F401

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


class SteppingClock:
    """Hands out strictly increasing timestamps, one second apart."""

    def __init__(self, start: datetime = NOW - timedelta(hours=1)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'charitybox_test.db'}"


@pytest.fixture
def engine(database_url: str) -> Engine:
    engine = build_engine(database_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Session:
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def settings(database_url: str, monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("AUTO_CREATE_DATABASE", "false")
    return Settings()


@pytest.fixture
def client(settings: Settings, engine: Engine) -> TestClient:
    app = create_app(settings=settings, engine=engine)
    with TestClient(app) as test_client:
        yield test_client
