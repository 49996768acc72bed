"""Data-completeness confidence.

  confidence = clamp(verified_jobs × 10 + responded_references × 0.2 + bonus)

This is a heuristic measure of how much verified data backs a score. It is
not a statistical confidence interval and must not be presented as one.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from trustscore.models.signals import SignalSet
from trustscore.scoring.utils import to_decimal, to_score

PER_VERIFIED_JOB: Decimal = Decimal("10")
PER_RESPONDED_REFERENCE: Decimal = Decimal("0.2")
DATA_COMPLETENESS_BONUS: Decimal = Decimal("5")


@dataclass
class ConfidenceEstimate:
    confidence: int
    sufficient_data: bool

    def to_dict(self) -> dict:
        return {"confidence": self.confidence, "sufficient_data": self.sufficient_data}


def data_completeness_bonus(signals: SignalSet) -> Decimal:
    """5 points once the entity has any verified job, else 0."""
    return DATA_COMPLETENESS_BONUS if signals.verified_job_count > 0 else Decimal(0)


def calculate_confidence(
    signals: SignalSet,
    bonus: Optional[float] = None,
) -> ConfidenceEstimate:
    """Estimate confidence; ``bonus`` defaults to :func:`data_completeness_bonus`."""
    extra = data_completeness_bonus(signals) if bonus is None else to_decimal(bonus)
    raw = (
        Decimal(signals.verified_job_count) * PER_VERIFIED_JOB
        + Decimal(signals.reference_responded) * PER_RESPONDED_REFERENCE
        + extra
    )
    return ConfidenceEstimate(
        confidence=to_score(raw),
        sufficient_data=signals.verified_job_count > 0,
    )
