"""Pytest fixtures and configuration."""
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import fakeredis
import pytest
from fastapi.testclient import TestClient

from trustscore.database.base import PRODUCTION_NAMESPACE
from trustscore.database.connection import build_engine, init_db, make_session_factory
from trustscore.database.orm import (
    BehavioralVectorRow,
    Dispute,
    EmploymentRecord,
    FraudFlag,
    Reference,
    RehireEntry,
)
from trustscore.models import Production, Sandbox
from trustscore.services.redis_cache import RedisCache



@pytest.fixture
def engine(tmp_path):
    """SQLite file database with every table created."""
    eng = build_engine(f"sqlite:///{tmp_path / 'trustscore.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def fake_redis():
    """In-memory Redis client."""
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def cache(fake_redis):
    """RedisCache backed by fakeredis."""
    return RedisCache(client=fake_redis)


@pytest.fixture
def mock_redis():
    """Mock Redis service."""
    mock = MagicMock()
    mock.health_check = MagicMock(return_value=(True, None))
    mock.get = MagicMock(return_value=None)
    mock.set = MagicMock(return_value=True)
    mock.delete = MagicMock(return_value=True)
    mock.delete_pattern = MagicMock(return_value=0)
    return mock


@pytest.fixture
def production():
    return Production()


@pytest.fixture
def sandbox():
    return Sandbox(
        session_id="sess-1",
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=10),
    )


@pytest.fixture
def seed(session_factory):
    """Insert ORM rows, stamping each with a namespace ("" = production)."""
    def _seed(*rows, namespace: str = PRODUCTION_NAMESPACE):
        with session_factory() as db:
            for row in rows:
                if hasattr(row, "sandbox_session_id"):
                    row.sandbox_session_id = namespace
                db.add(row)
            db.commit()
    return _seed


@pytest.fixture
def seed_profile(seed):
    """A scorable entity: two counted jobs, references, a dispute and a vector."""
    def _seed_profile(
        entity_id: str,
        namespace: str = PRODUCTION_NAMESPACE,
        employer_id: str = "EMP1",
        industry_key: str = "retail",
        with_vector: bool = True,
        **dims,
    ):
        rows = [
            EmploymentRecord(entity_id=entity_id, employer_id=employer_id,
                             start_date=date(2023, 1, 1), end_date=date(2024, 1, 1),
                             verification_status="verified"),
            EmploymentRecord(entity_id=entity_id, employer_id="EMP-OLD",
                             start_date=date(2024, 3, 1), end_date=date(2025, 3, 1),
                             verification_status="matched"),
            Reference(entity_id=entity_id, status="responded", rating=4.0, sentiment=0.5),
            Reference(entity_id=entity_id, status="requested"),
            Dispute(entity_id=entity_id, status="resolved"),
            RehireEntry(entity_id=entity_id, employer_id=employer_id, rehire_eligible=True),
            FraudFlag(entity_id=entity_id, confidence=0.2, reason="address mismatch"),
        ]
        if with_vector:
            rows.append(BehavioralVectorRow(entity_id=entity_id, industry_key=industry_key, **dims))
        seed(*rows, namespace=namespace)
    return _seed_profile


@pytest.fixture
def client(engine, session_factory, cache, mock_redis):
    """Create test client with the database and cache swapped for test doubles."""
    with patch("trustscore.routers.health.get_engine", return_value=engine), \
            patch("trustscore.routers.health.get_redis_cache", return_value=mock_redis), \
            patch("trustscore.routers.scores.get_session_factory", return_value=session_factory), \
            patch("trustscore.routers.scores.get_redis_cache", return_value=cache), \
            patch("trustscore.routers.sandbox.get_session_factory", return_value=session_factory), \
            patch("trustscore.routers.sandbox.get_redis_cache", return_value=cache):
        from trustscore.main import app
        yield TestClient(app)
