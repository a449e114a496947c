"""
calculator.py - Penalty escalation for repeat offenses.

Regulation article 3.5: the fine grows with the number of times the same
breach occurred within a rolling 12-month window.

PURE FUNCTION: no I/O, no configuration, deterministic.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from app.errors import base_amount_invalid, occurrence_count_invalid

# Occurrences at or above the last key use its multiplier.
ESCALATION_MULTIPLIERS: dict[int, Decimal] = {
    1: Decimal("1"),
    2: Decimal("1"),  # Second offense is a written warning; the fine stays at base
    3: Decimal("1.5"),
    4: Decimal("2"),
}
MAX_ESCALATION_STEP = max(ESCALATION_MULTIPLIERS)


def escalation_multiplier(occurrence_count: int) -> Decimal:
    """
    Return the multiplier applied to the base fine.

    Raises:
        ValidationError: occurrence_count is not a positive integer
    """
    if isinstance(occurrence_count, bool) or not isinstance(occurrence_count, int):
        raise occurrence_count_invalid(occurrence_count)
    if occurrence_count <= 0:
        raise occurrence_count_invalid(occurrence_count)
    return ESCALATION_MULTIPLIERS[min(occurrence_count, MAX_ESCALATION_STEP)]


def to_amount(value: Decimal | float | int | str) -> Decimal:
    """
    Coerce a monetary input to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.

    Raises:
        ValidationError: value is not a finite, non-negative number
    """
    if isinstance(value, bool):
        raise base_amount_invalid(value)
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise base_amount_invalid(value) from None
    if not amount.is_finite() or amount < 0:
        raise base_amount_invalid(value)
    return amount


def calculate(base_amount: Decimal | float | int | str, occurrence_count: int) -> Decimal:
    """
    Compute the final penalty for a breach.

    Args:
        base_amount: Catalog base fine, non-negative
        occurrence_count: 1-based count of this breach within 12 months

    Returns:
        1st and 2nd occurrence: base amount
        3rd occurrence: base amount + 50%
        4th and later: base amount doubled (no further escalation)

    Raises:
        ValidationError: negative/non-numeric base amount, or a count that is
            not a positive integer
    """
    multiplier = escalation_multiplier(occurrence_count)
    return to_amount(base_amount) * multiplier
