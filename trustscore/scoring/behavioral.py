"""Behavioral distance scorer.

  distance  = mean(|candidate.dim − baseline.dim|) over the 8 dimensions
  alignment = clamp(100 − min(100, distance))

All eight dimensions weigh the same and deviation is unsigned: being above or
below the baseline is equally misaligned.

The behavioral risk score is directional instead. Starting from 50 it adds
min(33, excess / 2) for each of: conflict risk above the baseline, reliability
below the baseline, tone stability below the baseline.
"""
from decimal import Decimal
from typing import Union

from trustscore.models.enums import NEUTRAL_SCORE
from trustscore.models.signals import DIMENSION_NAMES, Baseline, BehavioralVector
from trustscore.scoring.utils import clamp, to_decimal, to_score

MAX_DEVIATION_PER_TRAIT: Decimal = Decimal("33")

Profile = Union[BehavioralVector, Baseline]


def behavioral_distance(vector: Profile, baseline: Profile) -> Decimal:
    total = Decimal(0)
    for name in DIMENSION_NAMES:
        total += abs(to_decimal(getattr(vector, name)) - to_decimal(getattr(baseline, name)))
    return to_decimal(total / Decimal(len(DIMENSION_NAMES)))


def alignment_from_distance(distance: Union[Decimal, float]) -> int:
    return to_score(clamp(Decimal(100) - min(Decimal(100), to_decimal(distance))))


def behavioral_alignment(vector: Profile, baseline: Profile) -> int:
    """0-100 closeness of ``vector`` to ``baseline``."""
    return alignment_from_distance(behavioral_distance(vector, baseline))


def behavioral_risk_score(vector: BehavioralVector, baseline: Baseline) -> int:
    """Higher means riskier relative to the baseline."""
    deviation = Decimal(0)
    conflict_excess = to_decimal(vector.conflict_risk) - to_decimal(baseline.conflict_risk)
    reliability_shortfall = to_decimal(baseline.reliability) - to_decimal(vector.reliability)
    tone_shortfall = to_decimal(baseline.tone_stability) - to_decimal(vector.tone_stability)
    for excess in (conflict_excess, reliability_shortfall, tone_shortfall):
        if excess > 0:
            deviation += min(MAX_DEVIATION_PER_TRAIT, excess / Decimal(2))
    return to_score(Decimal(NEUTRAL_SCORE) + deviation)
