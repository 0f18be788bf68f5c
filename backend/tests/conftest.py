"""Test configuration -- per-test SQLite database, core components and TestClient."""

import os

# Settings are read at import time; these must exist before formulary is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./formulary-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import Callable, Iterator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from formulary.config import Settings  # noqa: E402
from formulary.database import Database  # noqa: E402
from formulary.models import Formula  # noqa: E402
from formulary.services.event_store import EventStore  # noqa: E402
from formulary.services.ranking import RankingEngine  # noqa: E402
from formulary.services.rate_limiter import RateLimiter  # noqa: E402

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def database(tmp_path: Path) -> Iterator[Database]:
    """Initialized file-backed SQLite database"""
    db = Database(f"sqlite:///{tmp_path / 'core_test.db'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def event_store(database: Database) -> EventStore:
    return EventStore(database, RateLimiter())


@pytest.fixture
def ranking_engine(event_store: EventStore) -> RankingEngine:
    return RankingEngine(event_store)


@pytest.fixture
def make_formula(database: Database) -> Callable[..., str]:
    """Insert a formula row directly, with an optional counter baseline"""

    def _make(
        formula_id: str,
        total_events: int = 0,
        last_event_at: Optional[datetime] = None,
        created_at: datetime = NOW - timedelta(days=60),
    ) -> str:
        with database.transaction() as db:
            db.add(
                Formula(
                    id=formula_id,
                    name=f"Formula {formula_id}",
                    description="Test formula",
                    formula="=SUM(A1:A10)",
                    video_url="",
                    total_events=total_events,
                    last_event_at=last_event_at,
                    created_at=created_at,
                    updated_at=created_at,
                )
            )
        return formula_id

    return _make


@pytest.fixture
def app_settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'api_test.db'}",
        secret_key="test-secret",
        environment="test",
        admin_token=None,
    )


@pytest.fixture
def client(app_settings: Settings) -> Iterator[TestClient]:
    """TestClient with the lifespan running, so stores are on app.state"""
    from formulary.main import create_app

    with TestClient(create_app(app_settings)) as test_client:
        yield test_client
