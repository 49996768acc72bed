"""Pydantic models and result types for the trust score engine."""

# Common Models
from trustscore.models.common import (
    HealthResponse,
    ErrorResponse,
)

# Enums
from trustscore.models.enums import (
    ScoreType,
    EnvironmentName,
    BehavioralDimension,
    JobVerificationStatus,
    COUNTED_JOB_STATUSES,
    RISK_COMPONENT_WEIGHTS,
    HIRING_CONFIDENCE_WEIGHTS,
    NEUTRAL_SCORE,
)

# Scoring inputs
from trustscore.models.signals import (
    DIMENSION_NAMES,
    SignalSet,
    BehavioralVector,
    Baseline,
    RiskModelConfig,
)

# Records and results
from trustscore.models.score import (
    Environment,
    Production,
    Sandbox,
    ScoreRecord,
    RiskScoreResult,
    TeamFitResult,
    HiringConfidenceResult,
    ProfileStrengthResult,
    WriteResult,
    ScoringFailure,
    BatchResult,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ScoreType",
    "EnvironmentName",
    "BehavioralDimension",
    "JobVerificationStatus",
    "COUNTED_JOB_STATUSES",
    "RISK_COMPONENT_WEIGHTS",
    "HIRING_CONFIDENCE_WEIGHTS",
    "NEUTRAL_SCORE",
    "DIMENSION_NAMES",
    "SignalSet",
    "BehavioralVector",
    "Baseline",
    "RiskModelConfig",
    "Environment",
    "Production",
    "Sandbox",
    "ScoreRecord",
    "RiskScoreResult",
    "TeamFitResult",
    "HiringConfidenceResult",
    "ProfileStrengthResult",
    "WriteResult",
    "ScoringFailure",
    "BatchResult",
]
