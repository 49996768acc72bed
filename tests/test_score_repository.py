"""Tests for score persistence and the environment isolation guard."""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from trustscore.database.orm import SandboxScoreRecordRow, ScoreRecordRow
from trustscore.models import EnvironmentName, Production, Sandbox, ScoreRecord, ScoreType
from trustscore.services.isolation import (
    EnvironmentIsolationError,
    assert_environment,
    assert_sandbox,
)
from trustscore.services.score_repository import ScoreRepository

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def risk_record(env, value=60, tenant_id=None, computed_at=NOW):
    return ScoreRecord.for_environment(
        env,
        entity_id="E1",
        tenant_id=tenant_id,
        score_type=ScoreType.RISK,
        value=value,
        model_version="1.0",
        breakdown={"tenure": 0.0},
        computed_at=computed_at,
    )


def row_count(session_factory, model) -> int:
    with session_factory() as db:
        return db.scalar(select(func.count()).select_from(model))


@pytest.fixture
def expiring_sandbox():
    return Sandbox(session_id="sess-1", expires_at=NOW + timedelta(minutes=10))


class TestIsolationGuard:
    """Cross-environment writes always raise."""

    def test_assert_sandbox_rejects_production(self):
        with pytest.raises(EnvironmentIsolationError):
            assert_sandbox(Production())

    def test_assert_sandbox_returns_sandbox(self, expiring_sandbox):
        assert assert_sandbox(expiring_sandbox) is expiring_sandbox

    def test_production_record_to_sandbox_table(self):
        with pytest.raises(EnvironmentIsolationError):
            assert_environment(EnvironmentName.SANDBOX, risk_record(Production()))

    def test_sandbox_record_to_production_table(self, expiring_sandbox):
        with pytest.raises(EnvironmentIsolationError):
            assert_environment(EnvironmentName.PRODUCTION, risk_record(expiring_sandbox))

    def test_untagged_sandbox_record(self):
        record = ScoreRecord.model_construct(
            entity_id="E1", score_type=ScoreType.RISK, value=60, model_version="1.0",
            environment=EnvironmentName.SANDBOX, sandbox_session_id=None, expires_at=None,
        )
        with pytest.raises(EnvironmentIsolationError):
            assert_environment(EnvironmentName.SANDBOX, record)

    def test_production_record_with_session(self):
        record = ScoreRecord.model_construct(
            entity_id="E1", score_type=ScoreType.RISK, value=60, model_version="1.0",
            environment=EnvironmentName.PRODUCTION, sandbox_session_id="sess-1", expires_at=None,
        )
        with pytest.raises(EnvironmentIsolationError):
            assert_environment(EnvironmentName.PRODUCTION, record)


class TestScoreRepository:
    """Tests for ScoreRepository against SQLite."""

    def test_upsert_is_idempotent(self, session_factory):
        repo = ScoreRepository(session_factory, EnvironmentName.PRODUCTION)
        assert repo.upsert(risk_record(Production(), value=60)).ok
        assert repo.upsert(risk_record(Production(), value=72)).ok
        assert row_count(session_factory, ScoreRecordRow) == 1
        assert repo.get_latest("E1", ScoreType.RISK).value == 72

    def test_tenant_is_part_of_the_key(self, session_factory):
        repo = ScoreRepository(session_factory, EnvironmentName.PRODUCTION)
        repo.upsert(risk_record(Production(), value=60))
        repo.upsert(risk_record(Production(), value=80, tenant_id="EMP1"))
        assert row_count(session_factory, ScoreRecordRow) == 2
        assert repo.get_latest("E1", ScoreType.RISK).value == 60
        assert repo.get_latest("E1", ScoreType.RISK, tenant_id="EMP1").value == 80

    def test_round_trip_fields(self, session_factory):
        repo = ScoreRepository(session_factory, EnvironmentName.PRODUCTION)
        repo.upsert(risk_record(Production()))
        record = repo.get_latest("E1", ScoreType.RISK)
        assert record.tenant_id is None
        assert record.sandbox_session_id is None
        assert record.breakdown == {"tenure": 0.0}
        assert record.computed_at == NOW

    def test_wrong_table_raises_and_writes_nothing(self, session_factory, expiring_sandbox):
        sandbox_repo = ScoreRepository(session_factory, EnvironmentName.SANDBOX)
        with pytest.raises(EnvironmentIsolationError):
            sandbox_repo.upsert(risk_record(Production()))
        production_repo = ScoreRepository(session_factory, EnvironmentName.PRODUCTION)
        with pytest.raises(EnvironmentIsolationError):
            production_repo.upsert(risk_record(expiring_sandbox))
        assert row_count(session_factory, ScoreRecordRow) == 0
        assert row_count(session_factory, SandboxScoreRecordRow) == 0

    def test_write_failure_returned(self):
        broken = MagicMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))
        result = ScoreRepository(broken, EnvironmentName.PRODUCTION).upsert(risk_record(Production()))
        assert result.ok is False
        assert "disk full" in result.error

    def test_sandbox_record_served_until_expiry(self, session_factory, expiring_sandbox):
        repo = ScoreRepository(session_factory, EnvironmentName.SANDBOX)
        assert repo.upsert(risk_record(expiring_sandbox)).ok
        assert repo.get_latest("E1", ScoreType.RISK, sandbox_session_id="sess-1", now=NOW).value == 60
        later = NOW + timedelta(minutes=11)
        assert repo.get_latest("E1", ScoreType.RISK, sandbox_session_id="sess-1", now=later) is None

    def test_sandbox_lookup_requires_session(self, session_factory, expiring_sandbox):
        repo = ScoreRepository(session_factory, EnvironmentName.SANDBOX)
        repo.upsert(risk_record(expiring_sandbox))
        assert repo.get_latest("E1", ScoreType.RISK, now=NOW) is None
        assert repo.get_latest("E1", ScoreType.RISK, sandbox_session_id="other", now=NOW) is None

    def test_sandbox_scores_invisible_to_production(self, session_factory, expiring_sandbox):
        ScoreRepository(session_factory, EnvironmentName.SANDBOX).upsert(risk_record(expiring_sandbox))
        assert ScoreRepository(session_factory, EnvironmentName.PRODUCTION).get_latest("E1", ScoreType.RISK) is None

    def test_purge_expired(self, session_factory, expiring_sandbox):
        repo = ScoreRepository(session_factory, EnvironmentName.SANDBOX)
        repo.upsert(risk_record(expiring_sandbox))
        assert repo.purge_expired(NOW) == 0
        assert repo.purge_expired(NOW + timedelta(minutes=11)) == 1
        assert row_count(session_factory, SandboxScoreRecordRow) == 0
