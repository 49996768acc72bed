"""Enumeration types for the trust score engine."""
from enum import Enum


class ScoreType(str, Enum):
    """Kinds of persisted scores."""
    RISK = "risk"
    TEAM_FIT = "team_fit"
    HIRING_CONFIDENCE = "hiring_confidence"
    PROFILE_STRENGTH = "profile_strength"


class EnvironmentName(str, Enum):
    """Data namespaces a score can be written to."""
    PRODUCTION = "production"
    SANDBOX = "sandbox"


class BehavioralDimension(str, Enum):
    """The eight normalized behavioral dimensions (0-100)."""
    PRESSURE = "pressure"
    STRUCTURE = "structure"
    COMMUNICATION = "communication"
    LEADERSHIP = "leadership"
    RELIABILITY = "reliability"
    INITIATIVE = "initiative"
    CONFLICT_RISK = "conflict_risk"
    TONE_STABILITY = "tone_stability"


class JobVerificationStatus(str, Enum):
    """Verification states of an employment record."""
    PENDING = "pending"
    VERIFIED = "verified"
    MATCHED = "matched"
    REJECTED = "rejected"


# Employment records counted toward tenure and the verified-job count
COUNTED_JOB_STATUSES: frozenset[str] = frozenset(
    {JobVerificationStatus.VERIFIED.value, JobVerificationStatus.MATCHED.value}
)


# Composite risk weights (must sum to 1.0)
RISK_COMPONENT_WEIGHTS: dict[str, float] = {
    "tenure": 0.25,
    "reference": 0.20,
    "dispute": 0.25,
    "gap": 0.15,
    "rehire": 0.15,
}

# Team-fit blend when a behavioral vector exists
TEAM_FIT_STRUCTURAL_WEIGHT: float = 0.75
TEAM_FIT_BEHAVIORAL_WEIGHT: float = 0.25

# Hiring-confidence composite weights
HIRING_CONFIDENCE_WEIGHTS: dict[str, float] = {
    "alignment": 0.50,
    "inverse_risk": 0.25,
    "baseline_alignment": 0.25,
}

NEUTRAL_SCORE: int = 50
