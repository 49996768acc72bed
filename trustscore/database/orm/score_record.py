"""Score record ORM models.

Production and sandbox scores live in separate tables. Each table carries an
isolation tag checked before every write.
"""
from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from trustscore.database.base import PRODUCTION_NAMESPACE, Base, new_id, utcnow
from trustscore.models.enums import EnvironmentName

SCORE_KEY_COLUMNS = ("entity_id", "tenant_id", "score_type", "environment", "sandbox_session_id")


class _ScoreColumns:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    # Unique key (NULL tenant / session stored as "")
    entity_id: Mapped[str] = mapped_column(String(64), index=True)
    tenant_id: Mapped[str] = mapped_column(String(64), default=PRODUCTION_NAMESPACE)
    score_type: Mapped[str] = mapped_column(String(32))
    environment: Mapped[str] = mapped_column(String(16))
    sandbox_session_id: Mapped[str] = mapped_column(String(64), default=PRODUCTION_NAMESPACE)

    # Payload
    value: Mapped[int] = mapped_column(Integer)
    breakdown: Mapped[dict] = mapped_column(JSON, default=dict)
    model_version: Mapped[str] = mapped_column(String(32))
    confidence: Mapped[int] = mapped_column(Integer, default=0)
    computed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )


class ScoreRecordRow(_ScoreColumns, Base):
    """Production scores."""
    __tablename__ = "score_records"
    __table_args__ = (UniqueConstraint(*SCORE_KEY_COLUMNS, name="uq_score_records_key"),)

    isolation_tag: ClassVar[EnvironmentName] = EnvironmentName.PRODUCTION

    def __repr__(self):
        return f"<ScoreRecordRow(entity_id={self.entity_id}, type={self.score_type}, value={self.value})>"


class SandboxScoreRecordRow(_ScoreColumns, Base):
    """Simulation scores; every row expires with its session."""
    __tablename__ = "sandbox_score_records"
    __table_args__ = (UniqueConstraint(*SCORE_KEY_COLUMNS, name="uq_sandbox_score_records_key"),)

    isolation_tag: ClassVar[EnvironmentName] = EnvironmentName.SANDBOX

    is_sandbox: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self):
        return (
            f"<SandboxScoreRecordRow(session={self.sandbox_session_id}, "
            f"entity_id={self.entity_id}, type={self.score_type})>"
        )
