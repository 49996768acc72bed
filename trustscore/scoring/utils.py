"""Decimal utilities shared by every scorer.

All score arithmetic runs on Decimal so that the half-up rounding of the final
integer score is exact and reproducible across platforms.
"""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, List


def to_decimal(value: float, places: int = 4) -> Decimal:
    """Convert float to Decimal with explicit precision and ROUND_HALF_UP rounding.

    The quantize runs with enough precision for the value's magnitude, so
    very large inputs convert instead of raising ``InvalidOperation``.

    Args:
        value: Numeric value to convert.
        places: Number of decimal places to quantize to.

    Returns:
        Decimal with the specified precision.
    """
    dec = value if isinstance(value, Decimal) else Decimal(str(value))
    exponent = Decimal(10) ** -places
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, dec.adjusted() + places + 2)
        return dec.quantize(exponent, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal(0),
    max_val: Decimal = Decimal(100),
) -> Decimal:
    """Clamp a Decimal value to [min_val, max_val].

    Args:
        value: Value to clamp.
        min_val: Lower bound (default 0).
        max_val: Upper bound (default 100).

    Returns:
        Clamped Decimal.
    """
    return max(min_val, min(max_val, value))


def to_score(value: Any) -> int:
    """Clamp to [0, 100] and round half up to an integer score."""
    dec = clamp(to_decimal(value))
    return int(dec.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def safe_number(value: Any, default: float) -> float:
    """Return ``value`` as a finite float, or ``default`` when it is missing or non-numeric."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def weighted_sum(values: List[Decimal], weights: List[Decimal]) -> Decimal:
    """Calculate sum(value * weight).

    Raises:
        ValueError: If lengths differ.
    """
    if len(values) != len(weights):
        raise ValueError("Values and weights must have the same length")
    if not values:
        return Decimal(0)
    total = sum(v * w for v, w in zip(values, weights))
    return total.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
