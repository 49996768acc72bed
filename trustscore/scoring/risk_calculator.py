"""Overall risk composite.

Two deliberately separate formulas.

Plain composite (model version "1.0")
-------------------------------------
  overall = clamp(T × 0.25 + R × 0.20 + D × 0.25 + G × 0.15 + H × 0.15)
  overall = clamp(overall − FraudPenalty)

Config-weighted composite (model version "enterprise-1")
--------------------------------------------------------
  overall = clamp(Σ component_i × w_i / Σ w)   over
            tenure, reference, rehire, dispute, gap, fraud_resistance

  Fraud enters as a positive resistance score (100 = clean) instead of being
  subtracted, so the two variants are parallel but not algebraically equal.

Higher is better (lower risk) in both. Audit trail emitted via structlog.
"""
from decimal import Decimal

import structlog

from trustscore.models.enums import RISK_COMPONENT_WEIGHTS
from trustscore.models.score import RiskScoreResult
from trustscore.models.signals import RiskModelConfig, SignalSet
from trustscore.scoring.components import component_scores
from trustscore.scoring.confidence import calculate_confidence
from trustscore.scoring.fraud import fraud_penalty, fraud_resistance_score
from trustscore.scoring.utils import clamp, to_decimal, to_score, weighted_sum

logger = structlog.get_logger(__name__)

RISK_MODEL_VERSION = "1.0"
WEIGHTED_RISK_MODEL_VERSION = "enterprise-1"

_COMPONENT_ORDER = ("tenure", "reference", "dispute", "gap", "rehire")
_WEIGHTED_ORDER = ("tenure", "reference", "rehire", "dispute", "gap", "fraud")


def calculate_overall_risk(signals: SignalSet) -> RiskScoreResult:
    """Plain component-weighted risk with the fraud penalty subtracted last."""
    components = component_scores(signals)
    weighted = weighted_sum(
        [Decimal(components[name]) for name in _COMPONENT_ORDER],
        [to_decimal(RISK_COMPONENT_WEIGHTS[name]) for name in _COMPONENT_ORDER],
    )
    penalty = fraud_penalty(signals.fraud_score, signals.fraud_count)
    overall = to_score(clamp(clamp(weighted) - penalty))
    estimate = calculate_confidence(signals)

    result = RiskScoreResult(
        overall=overall,
        components=components,
        fraud_penalty=float(penalty),
        confidence=estimate.confidence,
        sufficient_data=estimate.sufficient_data,
        model_version=RISK_MODEL_VERSION,
    )
    logger.info("risk_calculated", **result.to_dict())
    return result


def calculate_weighted_risk(signals: SignalSet, config: RiskModelConfig) -> RiskScoreResult:
    """Config-normalized risk with fraud scored as resistance."""
    components = component_scores(signals)
    components["fraud"] = to_score(
        fraud_resistance_score(signals.fraud_score, signals.fraud_count)
    )
    weights = config.weights()
    total_weight = sum(to_decimal(weights[name]) for name in _WEIGHTED_ORDER)
    scale = Decimal(1) / total_weight if total_weight > 0 else Decimal(1)

    weighted = weighted_sum(
        [Decimal(components[name]) for name in _WEIGHTED_ORDER],
        [to_decimal(weights[name]) * scale for name in _WEIGHTED_ORDER],
    )
    estimate = calculate_confidence(signals)

    result = RiskScoreResult(
        overall=to_score(weighted),
        components=components,
        fraud_penalty=float(fraud_penalty(signals.fraud_score, signals.fraud_count)),
        confidence=estimate.confidence,
        sufficient_data=estimate.sufficient_data,
        model_version=WEIGHTED_RISK_MODEL_VERSION,
        weights=dict(weights),
    )
    logger.info("weighted_risk_calculated", override=config.override_enabled, **result.to_dict())
    return result
