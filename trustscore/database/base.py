"""Declarative base and shared column mixins."""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Float, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Stored in key columns in place of NULL so unique constraints apply
PRODUCTION_NAMESPACE = ""


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class NamespacedMixin:
    """Rows readable only from their own environment ("" = production)."""

    sandbox_session_id: Mapped[str] = mapped_column(
        String(64),
        default=PRODUCTION_NAMESPACE,
        index=True,
    )


class BehavioralDimensionsMixin:
    """The eight behavioral dimensions; NULL reads as neutral."""

    pressure: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    structure: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    communication: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    leadership: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reliability: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    initiative: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    conflict_risk: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    tone_stability: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
