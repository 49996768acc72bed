"""Baseline and weight-configuration ORM models."""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from trustscore.database.base import (
    Base,
    BehavioralDimensionsMixin,
    NamespacedMixin,
    new_id,
    utcnow,
)


class _StructuralAverages:
    avg_tenure_months: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_verified_count: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    avg_reference_count: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    sample_size: Mapped[int] = mapped_column(Integer, default=0)
    model_version: Mapped[str] = mapped_column(String(64), default="behavioral_baseline_v1")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )


class IndustryBaselineRow(_StructuralAverages, BehavioralDimensionsMixin, NamespacedMixin, Base):
    """Industry-wide behavioral baseline."""
    __tablename__ = "industry_baselines"
    __table_args__ = (
        UniqueConstraint("industry_key", "sandbox_session_id", name="uq_industry_baselines_key"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    industry_key: Mapped[str] = mapped_column(String(64))

    def __repr__(self):
        return f"<IndustryBaselineRow(industry={self.industry_key}, n={self.sample_size})>"


class EmployerBaselineRow(_StructuralAverages, BehavioralDimensionsMixin, NamespacedMixin, Base):
    """Employer-specific baseline from its verified workforce."""
    __tablename__ = "employer_baselines"
    __table_args__ = (
        UniqueConstraint("employer_id", "sandbox_session_id", name="uq_employer_baselines_key"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    employer_id: Mapped[str] = mapped_column(String(64))
    industry_key: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    def __repr__(self):
        return f"<EmployerBaselineRow(employer={self.employer_id}, n={self.sample_size})>"


class RiskModelConfigRow(NamespacedMixin, Base):
    """Industry preset (employer_id NULL) or employer override weights."""
    __tablename__ = "risk_model_configs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    employer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    industry_key: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    tenure_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reference_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rehire_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    dispute_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gap_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    fraud_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    override_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
