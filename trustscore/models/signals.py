"""Scoring input models: per-entity signals, behavioral vectors and baselines."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from trustscore.models.enums import BehavioralDimension, NEUTRAL_SCORE
from trustscore.scoring.utils import safe_number

DIMENSION_NAMES: tuple[str, ...] = tuple(d.value for d in BehavioralDimension)


class SignalSet(BaseModel):
    """Fixed-shape numeric inputs derived from an entity's raw facts.

    Recomputed on demand by the signal aggregator; never stored on its own.
    Non-numeric values are coerced to the field default instead of failing.
    """
    model_config = ConfigDict(frozen=True)

    tenure_months: float = Field(default=0.0, ge=0)
    verified_job_count: int = Field(default=0, ge=0)
    reference_total: int = Field(default=0, ge=0)
    reference_responded: int = Field(default=0, ge=0)
    dispute_total: int = Field(default=0, ge=0)
    dispute_resolved: int = Field(default=0, ge=0)
    gap_months: float = Field(default=0.0, ge=0)
    rehire_eligible: bool = False
    fraud_score: Optional[float] = Field(default=None, ge=0)
    fraud_count: Optional[int] = Field(default=None, ge=0)

    # Review signals used by the profile-strength composite
    review_count: int = Field(default=0, ge=0)
    sentiment_average: Optional[float] = Field(default=None, ge=-1, le=1)
    average_rating: Optional[float] = Field(default=None, ge=1, le=5)

    @field_validator("tenure_months", "gap_months", mode="before")
    @classmethod
    def _coerce_months(cls, v):
        return max(0.0, safe_number(v, 0.0))

    @field_validator(
        "verified_job_count", "reference_total", "reference_responded",
        "dispute_total", "dispute_resolved", "review_count",
        mode="before",
    )
    @classmethod
    def _coerce_counts(cls, v):
        return max(0, int(safe_number(v, 0)))

    @field_validator("fraud_score", mode="before")
    @classmethod
    def _coerce_fraud_score(cls, v):
        if v is None:
            return None
        return max(0.0, safe_number(v, 0.0))

    @field_validator("fraud_count", mode="before")
    @classmethod
    def _coerce_fraud_count(cls, v):
        if v is None:
            return None
        return max(0, int(safe_number(v, 0)))

    @field_validator("sentiment_average", mode="before")
    @classmethod
    def _coerce_sentiment(cls, v):
        if v is None:
            return None
        return max(-1.0, min(1.0, safe_number(v, 0.0)))

    @field_validator("average_rating", mode="before")
    @classmethod
    def _coerce_rating(cls, v):
        if v is None:
            return None
        return max(1.0, min(5.0, safe_number(v, 3.0)))


class _DimensionVector(BaseModel):
    """Eight behavioral dimensions on the 0-100 scale; gaps become 50."""
    model_config = ConfigDict(frozen=True)

    pressure: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)
    structure: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)
    communication: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)
    leadership: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)
    reliability: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)
    initiative: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)
    conflict_risk: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)
    tone_stability: float = Field(default=NEUTRAL_SCORE, ge=0, le=100)

    @field_validator(*DIMENSION_NAMES, mode="before")
    @classmethod
    def _coerce_dimension(cls, v):
        return max(0.0, min(100.0, safe_number(v, float(NEUTRAL_SCORE))))

    def dimensions(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in DIMENSION_NAMES}


class BehavioralVector(_DimensionVector):
    """Pre-aggregated behavioral snapshot of one entity (read-only input)."""


class Baseline(_DimensionVector):
    """Reference profile a candidate is compared against.

    ``employer_id`` is set for hybrid baselines; ``employer_weight`` and
    ``industry_weight`` record how the blend was formed.
    """
    industry_key: str
    employer_id: Optional[str] = None
    avg_tenure_months: float = Field(default=24.0, ge=0)
    avg_verified_count: float = Field(default=1.0, ge=0)
    avg_reference_count: float = Field(default=0.0, ge=0)
    sample_size: int = Field(default=0, ge=0)
    employer_weight: float = Field(default=0.0, ge=0, le=1)
    industry_weight: float = Field(default=1.0, ge=0, le=1)

    @field_validator("avg_tenure_months", mode="before")
    @classmethod
    def _coerce_tenure(cls, v):
        return max(0.0, safe_number(v, 24.0))

    @field_validator("avg_verified_count", mode="before")
    @classmethod
    def _coerce_verified(cls, v):
        return max(0.0, safe_number(v, 1.0))

    @field_validator("avg_reference_count", mode="before")
    @classmethod
    def _coerce_references(cls, v):
        return max(0.0, safe_number(v, 0.0))

    @field_validator("sample_size", mode="before")
    @classmethod
    def _coerce_sample(cls, v):
        return max(0, int(safe_number(v, 0)))


class RiskModelConfig(BaseModel):
    """Fully populated weight set for the config-weighted risk composite."""
    model_config = ConfigDict(frozen=True)

    tenure: float = Field(default=1.0, gt=0)
    reference: float = Field(default=1.0, gt=0)
    rehire: float = Field(default=1.0, gt=0)
    dispute: float = Field(default=1.0, gt=0)
    gap: float = Field(default=1.0, gt=0)
    fraud: float = Field(default=1.0, gt=0)
    override_enabled: bool = False

    @field_validator("tenure", "reference", "rehire", "dispute", "gap", "fraud", mode="before")
    @classmethod
    def _coerce_weight(cls, v):
        weight = safe_number(v, 1.0)
        return weight if weight > 0 else 1.0

    def weights(self) -> dict[str, float]:
        return {
            "tenure": self.tenure,
            "reference": self.reference,
            "rehire": self.rehire,
            "dispute": self.dispute,
            "gap": self.gap,
            "fraud": self.fraud,
        }
