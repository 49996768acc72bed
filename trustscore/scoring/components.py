"""Component scorers for the risk composite.

Formulas
--------
  Tenure    = min(100, tenure_months / 24 × 100)
  Reference = 100                                   if total ≤ 0
            = responded / total × 100               otherwise
  Dispute   = 100 − open × 25 − total × 5,          open = total − resolved
  Gap       = 100                                   if tenure_months ≤ 0
            = 100 − min(80, gap / tenure × 100)     otherwise
  Rehire    = 100 if eligible else 0

Every component is clamped to [0, 100] and rounded half up to an int.
Tenure credit stops at 24 months; the gap penalty stops at 80 points.
"""
from decimal import Decimal

from trustscore.models.signals import SignalSet
from trustscore.scoring.utils import to_decimal, to_score

TENURE_CAP_MONTHS: Decimal = Decimal("24")
OPEN_DISPUTE_PENALTY: Decimal = Decimal("25")
DISPUTE_VOLUME_PENALTY: Decimal = Decimal("5")
MAX_GAP_PENALTY: Decimal = Decimal("80")

_HUNDRED = Decimal("100")


def tenure_score(signals: SignalSet) -> int:
    months = to_decimal(min(signals.tenure_months, float(TENURE_CAP_MONTHS)))
    return to_score(min(_HUNDRED, months / TENURE_CAP_MONTHS * _HUNDRED))


def reference_score(signals: SignalSet) -> int:
    """No requested references is not penalized."""
    total = signals.reference_total
    if total <= 0:
        return 100
    return to_score(Decimal(signals.reference_responded) / Decimal(total) * _HUNDRED)


def dispute_score(signals: SignalSet) -> int:
    total = Decimal(signals.dispute_total)
    open_disputes = max(Decimal(0), total - Decimal(signals.dispute_resolved))
    return to_score(_HUNDRED - open_disputes * OPEN_DISPUTE_PENALTY - total * DISPUTE_VOLUME_PENALTY)


def gap_score(signals: SignalSet) -> int:
    tenure = to_decimal(signals.tenure_months)
    if tenure <= 0:
        return 100
    ratio = min(Decimal(1), to_decimal(signals.gap_months) / tenure)
    return to_score(_HUNDRED - min(MAX_GAP_PENALTY, ratio * _HUNDRED))


def rehire_score(signals: SignalSet) -> int:
    return 100 if signals.rehire_eligible else 0


def component_scores(signals: SignalSet) -> dict[str, int]:
    """All five components keyed by the risk weight names."""
    return {
        "tenure": tenure_score(signals),
        "reference": reference_score(signals),
        "dispute": dispute_score(signals),
        "gap": gap_score(signals),
        "rehire": rehire_score(signals),
    }
