"""Fraud penalty modifier.

Two input forms, both capped at 15 points:
  continuous:  penalty = min(fraud_score × 15, 15),  fraud_score normalized to [0, 1]
  discrete:    penalty = min(fraud_count × 5, 15)

Absent input is identical to zero. When both forms are given the continuous
score wins. The penalty is subtracted from a composite after weighting.
"""
from decimal import Decimal
from typing import Optional

from trustscore.scoring.utils import clamp, safe_number, to_decimal

MAX_FRAUD_PENALTY: Decimal = Decimal("15")
PENALTY_PER_FLAG: Decimal = Decimal("5")


def fraud_penalty(
    fraud_score: Optional[float] = None,
    fraud_count: Optional[int] = None,
) -> Decimal:
    """Return the capped penalty in points, in [0, 15]."""
    if fraud_score is not None:
        score = min(1.0, max(0.0, safe_number(fraud_score, 0.0)))
        return clamp(to_decimal(score) * MAX_FRAUD_PENALTY, Decimal(0), MAX_FRAUD_PENALTY)
    if fraud_count is not None:
        count = min(3.0, max(0.0, safe_number(fraud_count, 0.0)))
        return clamp(to_decimal(count) * PENALTY_PER_FLAG, Decimal(0), MAX_FRAUD_PENALTY)
    return Decimal(0)


def fraud_resistance_score(
    fraud_score: Optional[float] = None,
    fraud_count: Optional[int] = None,
) -> Decimal:
    """Positive form used by the config-weighted risk: 100 with no fraud, 0 at the cap."""
    penalty = fraud_penalty(fraud_score, fraud_count)
    return clamp(Decimal(100) - penalty / MAX_FRAUD_PENALTY * Decimal(100))
