"""Sandbox session ORM models."""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from trustscore.database.base import Base, new_id, utcnow


class SandboxSession(Base):
    """Time-boxed simulation namespace."""
    __tablename__ = "sandbox_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    industry_key: Mapped[str] = mapped_column(String(64), default="corporate")
    employer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    is_sandbox: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self):
        return f"<SandboxSession(id={self.id}, expires_at={self.expires_at})>"


class SandboxProfile(Base):
    """An entity simulated inside a session."""
    __tablename__ = "sandbox_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    sandbox_session_id: Mapped[str] = mapped_column(ForeignKey("sandbox_sessions.id"), index=True)
    entity_id: Mapped[str] = mapped_column(String(64))
    is_sandbox: Mapped[bool] = mapped_column(Boolean, default=True)
