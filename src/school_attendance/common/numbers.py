from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like a report would: 66.65 -> 66.7, not banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: int, total: int, digits: int = 1) -> float:
    """part/total as a rounded percentage, 0 when total is not positive."""
    if total <= 0:
        return 0.0
    return round_half_up(part / total * 100, digits)
