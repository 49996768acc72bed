"""Team-fit alignment.

Structural component
--------------------
  tenure_ratio    = min(1.5, candidate_tenure / team_avg_tenure)        (1 if team avg is 0)
  verified_ratio  = min(1.5, candidate_verified / team_avg_verified)    (1 if team avg is 0)
  reference_ratio = min(1.5, candidate_refs / team_avg_refs)
                    (team avg 0: 1 if the candidate has references, else 0.5)

  structural = clamp(50 + (tenure_ratio − 1) × 15 + (verified_ratio − 1) × 15
                        + (reference_ratio − 0.5) × 20)

Blend
-----
  alignment = clamp(structural × 0.75 + behavioral × 0.25)   when a vector exists
  alignment = structural                                      otherwise
"""
from decimal import Decimal
from typing import Optional

import structlog

from trustscore.models.enums import (
    NEUTRAL_SCORE,
    TEAM_FIT_BEHAVIORAL_WEIGHT,
    TEAM_FIT_STRUCTURAL_WEIGHT,
)
from trustscore.models.score import TeamFitResult
from trustscore.models.signals import Baseline, BehavioralVector, SignalSet
from trustscore.scoring.behavioral import behavioral_alignment
from trustscore.scoring.utils import to_decimal, to_score

logger = structlog.get_logger(__name__)

TEAM_FIT_MODEL_VERSION = "1"

MAX_RATIO: Decimal = Decimal("1.5")
TENURE_RATIO_COEFF: Decimal = Decimal("15")
VERIFIED_RATIO_COEFF: Decimal = Decimal("15")
REFERENCE_RATIO_COEFF: Decimal = Decimal("20")
REFERENCE_RATIO_PIVOT: Decimal = Decimal("0.5")


def _ratio(candidate: float, team_average: float) -> Decimal:
    average = to_decimal(team_average)
    if average <= 0:
        return Decimal(1)
    return min(MAX_RATIO, to_decimal(candidate) / average)


def _reference_ratio(candidate_refs: int, team_average: float) -> Decimal:
    if to_decimal(team_average) <= 0:
        return Decimal(1) if candidate_refs > 0 else REFERENCE_RATIO_PIVOT
    return _ratio(candidate_refs, team_average)


def structural_alignment(signals: SignalSet, team_baseline: Baseline) -> tuple[int, dict[str, Decimal]]:
    """Structural score plus the three ratios that produced it."""
    ratios = {
        "tenure": _ratio(signals.tenure_months, team_baseline.avg_tenure_months),
        "verified": _ratio(signals.verified_job_count, team_baseline.avg_verified_count),
        "reference": _reference_ratio(signals.reference_responded, team_baseline.avg_reference_count),
    }
    raw = (
        Decimal(NEUTRAL_SCORE)
        + (ratios["tenure"] - 1) * TENURE_RATIO_COEFF
        + (ratios["verified"] - 1) * VERIFIED_RATIO_COEFF
        + (ratios["reference"] - REFERENCE_RATIO_PIVOT) * REFERENCE_RATIO_COEFF
    )
    return to_score(raw), ratios


def calculate_team_fit(
    signals: SignalSet,
    team_baseline: Baseline,
    vector: Optional[BehavioralVector] = None,
    behavioral_baseline: Optional[Baseline] = None,
) -> TeamFitResult:
    """Blend structural and behavioral alignment against the team.

    Args:
        signals: Candidate signals.
        team_baseline: Structural team averages (and behavioral dims when
            ``behavioral_baseline`` is not given).
        vector: Candidate behavioral vector; structural-only when None.
        behavioral_baseline: Baseline for the behavioral distance.
    """
    structural, ratios = structural_alignment(signals, team_baseline)

    behavioral: Optional[int] = None
    if vector is not None:
        behavioral = behavioral_alignment(vector, behavioral_baseline or team_baseline)
        alignment = to_score(
            Decimal(structural) * to_decimal(TEAM_FIT_STRUCTURAL_WEIGHT)
            + Decimal(behavioral) * to_decimal(TEAM_FIT_BEHAVIORAL_WEIGHT)
        )
    else:
        alignment = structural

    result = TeamFitResult(
        alignment_score=alignment,
        structural_score=structural,
        behavioral_score=behavioral,
        tenure_ratio=float(ratios["tenure"]),
        verified_ratio=float(ratios["verified"]),
        reference_ratio=float(ratios["reference"]),
        team_sample_size=team_baseline.sample_size,
        model_version=TEAM_FIT_MODEL_VERSION,
    )
    logger.info("team_fit_calculated", **result.to_dict())
    return result
