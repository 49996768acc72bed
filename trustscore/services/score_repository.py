"""Score persistence layer.

One repository per isolation target. ``upsert`` runs the environment guard
first (violations raise), then issues a single INSERT ... ON CONFLICT DO
UPDATE on the record key, so concurrent rescoring of the same key cannot
lose an update or create a duplicate row. Database errors come back as
``WriteResult(ok=False)``.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from trustscore.database.base import PRODUCTION_NAMESPACE
from trustscore.database.orm import SandboxScoreRecordRow, ScoreRecordRow
from trustscore.database.orm.score_record import SCORE_KEY_COLUMNS
from trustscore.database.upsert import upsert_statement
from trustscore.models.enums import EnvironmentName, ScoreType
from trustscore.models.score import ScoreRecord, WriteResult, as_utc, utcnow
from trustscore.services.isolation import assert_environment

logger = logging.getLogger(__name__)

_TABLES = {
    EnvironmentName.PRODUCTION: ScoreRecordRow,
    EnvironmentName.SANDBOX: SandboxScoreRecordRow,
}


def record_from_row(row) -> ScoreRecord:
    sandbox = row.environment == EnvironmentName.SANDBOX.value
    return ScoreRecord(
        entity_id=row.entity_id,
        tenant_id=row.tenant_id or None,
        score_type=ScoreType(row.score_type),
        value=row.value,
        breakdown=row.breakdown or {},
        model_version=row.model_version,
        confidence=row.confidence,
        computed_at=as_utc(row.computed_at),
        environment=EnvironmentName(row.environment),
        sandbox_session_id=row.sandbox_session_id if sandbox else None,
        expires_at=as_utc(row.expires_at) if sandbox and row.expires_at else None,
    )


class ScoreRepository:
    """Idempotent score writes and latest-score reads for one table."""

    def __init__(self, session_factory: sessionmaker, target: EnvironmentName):
        self._session_factory = session_factory
        self.target = EnvironmentName(target)
        self.table = _TABLES[self.target]

    def upsert(self, record: ScoreRecord) -> WriteResult:
        """Write ``record`` in place of any existing row with the same key.

        Raises:
            EnvironmentIsolationError: If the record does not belong in this table.
        """
        assert_environment(self.table.isolation_tag, record)

        values = {
            "entity_id": record.entity_id,
            "tenant_id": record.tenant_id or PRODUCTION_NAMESPACE,
            "score_type": ScoreType(record.score_type).value,
            "environment": EnvironmentName(record.environment).value,
            "sandbox_session_id": record.sandbox_session_id or PRODUCTION_NAMESPACE,
            "value": record.value,
            "breakdown": dict(record.breakdown),
            "model_version": record.model_version,
            "confidence": record.confidence,
            "computed_at": record.computed_at,
            "expires_at": record.expires_at,
            "updated_at": utcnow(),
        }
        if self.table is SandboxScoreRecordRow:
            values["is_sandbox"] = True

        try:
            with self._session_factory() as session:
                session.execute(upsert_statement(session, self.table, values, SCORE_KEY_COLUMNS))
                session.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"Score upsert failed for {record.entity_id}/{values['score_type']} "
                f"({self.target.value}): {e}"
            )
            return WriteResult(ok=False, error=str(e))
        return WriteResult(ok=True)

    def get_latest(
        self,
        entity_id: str,
        score_type: ScoreType,
        tenant_id: Optional[str] = None,
        sandbox_session_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[ScoreRecord]:
        """Latest record for the key, or None. Expired sandbox records are never served."""
        if self.target == EnvironmentName.SANDBOX and not sandbox_session_id:
            return None
        current = now or utcnow()
        stmt = select(self.table).where(
            self.table.entity_id == entity_id,
            self.table.score_type == ScoreType(score_type).value,
            self.table.tenant_id == (tenant_id or PRODUCTION_NAMESPACE),
            self.table.environment == self.target.value,
            self.table.sandbox_session_id == (sandbox_session_id or PRODUCTION_NAMESPACE),
        )
        if self.target == EnvironmentName.SANDBOX:
            stmt = stmt.where(self.table.expires_at > current)
        with self._session_factory() as session:
            row = session.scalars(stmt.order_by(self.table.computed_at.desc())).first()
            if row is None:
                return None
            record = record_from_row(row)
        if record.is_expired(current):
            return None
        return record

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete sandbox records whose session has expired. Returns rows removed."""
        current = now or utcnow()
        with self._session_factory() as session:
            result = session.execute(
                delete(SandboxScoreRecordRow).where(SandboxScoreRecordRow.expires_at <= current)
            )
            session.commit()
        removed = result.rowcount or 0
        logger.info(f"Purged {removed} expired sandbox score records")
        return removed
