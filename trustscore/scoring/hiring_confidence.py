"""Hiring-confidence composite.

  hiring = clamp(alignment × 0.50 + (100 − risk) × 0.25 + baseline_alignment × 0.25)

``alignment`` compares the candidate to the team; ``baseline_alignment``
compares the candidate to the blended (hybrid) baseline, so the two can
differ. ``risk`` is higher-is-riskier. Missing inputs default to 50.
"""
from decimal import Decimal
from typing import Optional

import structlog

from trustscore.models.enums import HIRING_CONFIDENCE_WEIGHTS, NEUTRAL_SCORE
from trustscore.models.score import HiringConfidenceResult
from trustscore.scoring.utils import safe_number, to_decimal, to_score

logger = structlog.get_logger(__name__)

HIRING_CONFIDENCE_MODEL_VERSION = "1"


def _input(value: Optional[float]) -> Decimal:
    return to_decimal(max(0.0, min(100.0, safe_number(value, float(NEUTRAL_SCORE)))))


def calculate_hiring_confidence(
    alignment_score: Optional[float],
    risk_score: Optional[float],
    baseline_alignment: Optional[float],
) -> HiringConfidenceResult:
    alignment = _input(alignment_score)
    risk = _input(risk_score)
    baseline = _input(baseline_alignment)

    raw = (
        alignment * to_decimal(HIRING_CONFIDENCE_WEIGHTS["alignment"])
        + (Decimal(100) - risk) * to_decimal(HIRING_CONFIDENCE_WEIGHTS["inverse_risk"])
        + baseline * to_decimal(HIRING_CONFIDENCE_WEIGHTS["baseline_alignment"])
    )

    result = HiringConfidenceResult(
        composite_score=to_score(raw),
        alignment_score=float(alignment),
        risk_score=float(risk),
        baseline_alignment=float(baseline),
        model_version=HIRING_CONFIDENCE_MODEL_VERSION,
    )
    logger.info("hiring_confidence_calculated", **result.to_dict())
    return result
