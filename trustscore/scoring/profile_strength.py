"""Profile-strength trust composite (v1).

Formula
-------
  PS = clamp(BASE + TS + RVS + SS + RS + HS − FraudPenalty)

Where:
  BASE = 20
  TS   = min(30, tenure_months × 0.25)             tenure, capped at 30 points
  RVS  = 25 × (1 − e^(−reviews / 8))               review volume, saturating at 25
  SS   = sentiment × 20                            sentiment in [−1, 1], absent = 0
  RS   = (rating − 3) × 7.5                        rating in [1, 5], absent = 3
  HS   = 10 if rehire eligible else 0

Every term is monotone in its input, so more tenure, more reviews, better
sentiment and rehire eligibility never lower the score.
"""
import math
from decimal import Decimal

import structlog

from trustscore.models.score import ProfileStrengthResult
from trustscore.models.signals import SignalSet
from trustscore.scoring.fraud import fraud_penalty
from trustscore.scoring.utils import clamp, to_decimal, to_score

logger = structlog.get_logger(__name__)

PROFILE_STRENGTH_VERSIONS = ("v1",)

BASE_POINTS: Decimal = Decimal("20")
TENURE_POINTS_PER_MONTH: Decimal = Decimal("0.25")
MAX_TENURE_POINTS: Decimal = Decimal("30")
MAX_REVIEW_POINTS: Decimal = Decimal("25")
REVIEW_SATURATION: float = 8.0
SENTIMENT_POINTS: Decimal = Decimal("20")
NEUTRAL_RATING: Decimal = Decimal("3")
RATING_POINTS_PER_STAR: Decimal = Decimal("7.5")
REHIRE_POINTS: Decimal = Decimal("10")


def calculate_profile_strength(signals: SignalSet, version: str = "v1") -> ProfileStrengthResult:
    """Compute the profile-strength composite.

    Raises:
        ValueError: If ``version`` is not a known model version.
    """
    if version not in PROFILE_STRENGTH_VERSIONS:
        raise ValueError(f"Unknown profile strength version: {version}")

    tenure = min(MAX_TENURE_POINTS, to_decimal(signals.tenure_months) * TENURE_POINTS_PER_MONTH)
    reviews = MAX_REVIEW_POINTS * to_decimal(1 - math.exp(-signals.review_count / REVIEW_SATURATION))
    sentiment = to_decimal(signals.sentiment_average or 0.0) * SENTIMENT_POINTS
    rating = signals.average_rating if signals.average_rating is not None else 3.0
    rating_points = (to_decimal(rating) - NEUTRAL_RATING) * RATING_POINTS_PER_STAR
    rehire = REHIRE_POINTS if signals.rehire_eligible else Decimal(0)
    penalty = fraud_penalty(signals.fraud_score, signals.fraud_count)

    raw = BASE_POINTS + tenure + reviews + sentiment + rating_points + rehire - penalty

    result = ProfileStrengthResult(
        score=to_score(clamp(raw)),
        components={
            "base": float(BASE_POINTS),
            "tenure": float(tenure),
            "review_volume": float(reviews),
            "sentiment": float(sentiment),
            "rating": float(rating_points),
            "rehire": float(rehire),
        },
        fraud_penalty=float(penalty),
        model_version=version,
    )
    logger.info("profile_strength_calculated", **result.to_dict())
    return result
