"""Score records, environments and calculator result types."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator

from trustscore.models.enums import EnvironmentName, ScoreType


# ---------------------------------------------------------------------------
# Environment sum type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Production:
    """The live data namespace. Carries no session fields."""

    @property
    def name(self) -> EnvironmentName:
        return EnvironmentName.PRODUCTION

    @property
    def namespace(self) -> str:
        return "production"


@dataclass(frozen=True)
class Sandbox:
    """A time-boxed simulation namespace."""

    session_id: str
    expires_at: datetime

    def __post_init__(self) -> None:
        if not self.session_id:
            raise ValueError("Sandbox environment requires a session id")

    @property
    def name(self) -> EnvironmentName:
        return EnvironmentName.SANDBOX

    @property
    def namespace(self) -> str:
        return f"sandbox:{self.session_id}"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return as_utc(self.expires_at) <= as_utc(now or utcnow())


Environment = Union[Production, Sandbox]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Persisted record
# ---------------------------------------------------------------------------

class ScoreRecord(BaseModel):
    """One persisted score, unique per
    (entity_id, tenant_id, score_type, environment, sandbox_session_id)."""

    entity_id: str = Field(..., min_length=1)
    tenant_id: Optional[str] = None
    score_type: ScoreType
    value: int = Field(..., ge=0, le=100)
    breakdown: dict[str, float] = Field(default_factory=dict)
    model_version: str = Field(..., min_length=1)
    confidence: int = Field(default=0, ge=0, le=100)
    computed_at: datetime = Field(default_factory=utcnow)
    environment: EnvironmentName
    sandbox_session_id: Optional[str] = None
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_environment_fields(self) -> "ScoreRecord":
        if self.environment == EnvironmentName.SANDBOX:
            if not self.sandbox_session_id or self.expires_at is None:
                raise ValueError("sandbox records require sandbox_session_id and expires_at")
        elif self.sandbox_session_id is not None or self.expires_at is not None:
            raise ValueError("production records must not carry sandbox fields")
        return self

    @classmethod
    def for_environment(
        cls,
        env: Environment,
        *,
        entity_id: str,
        score_type: ScoreType,
        value: int,
        model_version: str,
        tenant_id: Optional[str] = None,
        breakdown: Optional[dict[str, float]] = None,
        confidence: int = 0,
        computed_at: Optional[datetime] = None,
    ) -> "ScoreRecord":
        """Build a record whose sandbox fields can only come from a Sandbox value."""
        session_id: Optional[str] = None
        expires_at: Optional[datetime] = None
        if isinstance(env, Sandbox):
            session_id = env.session_id
            expires_at = env.expires_at
        return cls(
            entity_id=entity_id,
            tenant_id=tenant_id or None,
            score_type=score_type,
            value=value,
            breakdown=breakdown or {},
            model_version=model_version,
            confidence=confidence,
            computed_at=computed_at or utcnow(),
            environment=env.name,
            sandbox_session_id=session_id,
            expires_at=expires_at,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return as_utc(self.expires_at) <= as_utc(now or utcnow())


# ---------------------------------------------------------------------------
# Calculator results
# ---------------------------------------------------------------------------

@dataclass
class RiskScoreResult:
    """Overall risk composite with its audit trail."""

    overall: int
    components: dict[str, int]
    fraud_penalty: float
    confidence: int
    sufficient_data: bool
    model_version: str
    weights: dict[str, float] = field(default_factory=dict)

    def breakdown(self) -> dict[str, float]:
        out: dict[str, float] = {k: float(v) for k, v in self.components.items()}
        out["fraud_penalty"] = self.fraud_penalty
        for name, weight in self.weights.items():
            out[f"weight_{name}"] = weight
        return out

    def to_dict(self) -> dict:
        return {
            "overall": self.overall,
            "components": dict(self.components),
            "fraud_penalty": self.fraud_penalty,
            "confidence": self.confidence,
            "sufficient_data": self.sufficient_data,
            "model_version": self.model_version,
            "weights": dict(self.weights),
        }


@dataclass
class TeamFitResult:
    """Team-fit alignment score."""

    alignment_score: int
    structural_score: int
    behavioral_score: Optional[int]
    tenure_ratio: float
    verified_ratio: float
    reference_ratio: float
    team_sample_size: int
    model_version: str

    def breakdown(self) -> dict[str, float]:
        out = {
            "structural_score": float(self.structural_score),
            "tenure_ratio": self.tenure_ratio,
            "verified_ratio": self.verified_ratio,
            "reference_ratio": self.reference_ratio,
            "team_sample_size": float(self.team_sample_size),
        }
        if self.behavioral_score is not None:
            out["behavioral_score"] = float(self.behavioral_score)
        return out

    def to_dict(self) -> dict:
        return {
            "alignment_score": self.alignment_score,
            "structural_score": self.structural_score,
            "behavioral_score": self.behavioral_score,
            "tenure_ratio": self.tenure_ratio,
            "verified_ratio": self.verified_ratio,
            "reference_ratio": self.reference_ratio,
            "team_sample_size": self.team_sample_size,
            "model_version": self.model_version,
        }


@dataclass
class HiringConfidenceResult:
    """Hiring-confidence composite."""

    composite_score: int
    alignment_score: float
    risk_score: float
    baseline_alignment: float
    model_version: str

    def breakdown(self) -> dict[str, float]:
        return {
            "alignment_score": self.alignment_score,
            "risk_score": self.risk_score,
            "baseline_alignment": self.baseline_alignment,
        }

    def to_dict(self) -> dict:
        return {"composite_score": self.composite_score, **self.breakdown(),
                "model_version": self.model_version}


@dataclass
class ProfileStrengthResult:
    """Profile-strength trust composite."""

    score: int
    components: dict[str, float]
    fraud_penalty: float
    model_version: str

    def breakdown(self) -> dict[str, float]:
        return {**self.components, "fraud_penalty": self.fraud_penalty}

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "components": dict(self.components),
            "fraud_penalty": self.fraud_penalty,
            "model_version": self.model_version,
        }


# ---------------------------------------------------------------------------
# Operation outcomes
# ---------------------------------------------------------------------------

@dataclass
class WriteResult:
    ok: bool
    error: Optional[str] = None


@dataclass
class ScoringFailure:
    """Typed failure returned (not raised) by the scoring pipeline."""

    stage: str
    error: str
    entity_id: Optional[str] = None

    ok: bool = field(default=False, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "stage": self.stage, "error": self.error,
                "entity_id": self.entity_id}


@dataclass
class BatchResult:
    """Outcome of a sandbox batch run."""

    ok: bool
    error: Optional[str] = None
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    timed_out: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "timed_out": self.timed_out,
        }
