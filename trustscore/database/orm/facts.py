"""Collaborator fact tables (read-only for the scoring engine)."""
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, Float, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from trustscore.database.base import (
    Base,
    BehavioralDimensionsMixin,
    NamespacedMixin,
    new_id,
)


class EmploymentRecord(NamespacedMixin, Base):
    """One job held by an entity."""
    __tablename__ = "employment_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    entity_id: Mapped[str] = mapped_column(String(64), index=True)
    employer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    verification_status: Mapped[str] = mapped_column(String(20), default="pending")

    def __repr__(self):
        return f"<EmploymentRecord(entity_id={self.entity_id}, status={self.verification_status})>"


class Reference(NamespacedMixin, Base):
    """A requested peer reference; rating and sentiment are set once it responds."""
    __tablename__ = "reference_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    entity_id: Mapped[str] = mapped_column(String(64), index=True)
    status: Mapped[str] = mapped_column(String(20), default="requested")
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    sentiment: Mapped[Optional[float]] = mapped_column(Float, nullable=True)


class Dispute(NamespacedMixin, Base):
    __tablename__ = "disputes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    entity_id: Mapped[str] = mapped_column(String(64), index=True)
    status: Mapped[str] = mapped_column(String(20), default="open")


class RehireEntry(NamespacedMixin, Base):
    """Rehire eligibility flag per entity per employer."""
    __tablename__ = "rehire_registry"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    entity_id: Mapped[str] = mapped_column(String(64), index=True)
    employer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    rehire_eligible: Mapped[bool] = mapped_column(Boolean, default=False)


class FraudFlag(NamespacedMixin, Base):
    __tablename__ = "fraud_flags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    entity_id: Mapped[str] = mapped_column(String(64), index=True)
    confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class BehavioralVectorRow(BehavioralDimensionsMixin, NamespacedMixin, Base):
    """Pre-aggregated behavioral snapshot, one per entity per namespace."""
    __tablename__ = "behavioral_vectors"
    __table_args__ = (
        UniqueConstraint("entity_id", "sandbox_session_id", name="uq_behavioral_vectors_entity"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    entity_id: Mapped[str] = mapped_column(String(64), index=True)
    industry_key: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)


class EmployerAccount(NamespacedMixin, Base):
    """Tenant account: industry and whether weight overrides are allowed."""
    __tablename__ = "employer_accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    industry_key: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    risk_override_allowed: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self):
        return f"<EmployerAccount(id={self.id}, industry={self.industry_key})>"
