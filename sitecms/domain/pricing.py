"""Pricing display rules.

Pure functions with no external dependencies.
"""

import math
from collections.abc import Sequence
from typing import Protocol

PLACEHOLDER_PRICE = "$0.00"
UNLIMITED_DISPLAY = "∞"
MISSING_LIMIT_DISPLAY = "0"
NO_BASIC_FEATURES_MESSAGE = "No basic features assigned"
NO_PLANS_MESSAGE = "No pricing plans available"
HIGHLIGHT_COUNT = 4
CARD_BASIC_FEATURE_COUNT = 6
MONTHS_PER_YEAR = 12


class CycleLike(Protocol):
    id: str
    multiplier: int
    is_default: bool


class LimitLike(Protocol):
    value: str | None
    is_unlimited: bool


def format_price(price_cents: int) -> str:
    """Format integer cents as dollars, dropping ``.00`` on whole amounts.

    >>> format_price(2900)
    '$29'
    >>> format_price(2999)
    '$29.99'
    """
    if price_cents % 100 == 0:
        return f"${price_cents // 100}"
    return f"${price_cents / 100:.2f}"


def display_price(price_cents: int | None) -> str:
    """Display price for a plan/cycle pair; missing pricing is not an error."""
    if price_cents is None:
        return PLACEHOLDER_PRICE
    return format_price(price_cents)


def display_limit(limit: LimitLike | None) -> str:
    """Resolve a feature limit cell: unlimited wins, then the raw value, then "0"."""
    if limit is None:
        return MISSING_LIMIT_DISPLAY
    if limit.is_unlimited:
        return UNLIMITED_DISPLAY
    return limit.value or MISSING_LIMIT_DISPLAY


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def calculate_savings(multiplier: int, monthly_cents: int | None, cycle_cents: int | None) -> int:
    """Savings badge percentage for a billing cycle.

    Compares twelve monthly payments against the cycle price. Returns 0 for
    cycles of one month or less and whenever either price is unknown.
    """
    if multiplier <= 1:
        return 0
    if monthly_cents is None or cycle_cents is None or monthly_cents <= 0:
        return 0

    monthly_total = monthly_cents * MONTHS_PER_YEAR
    savings = (monthly_total - cycle_cents) / monthly_total * 100
    return round_half_up(savings)


def select_billing_cycle(cycles: Sequence[CycleLike], requested_id: str | None = None) -> CycleLike | None:
    """Pick the cycle to display.

    The requested cycle if it exists, else the default cycle, else the first.
    """
    if not cycles:
        return None
    if requested_id is not None:
        for cycle in cycles:
            if cycle.id == requested_id:
                return cycle
    for cycle in cycles:
        if cycle.is_default:
            return cycle
    return cycles[0]


def find_base_cycle(cycles: Sequence[CycleLike]) -> CycleLike | None:
    """The one-month cycle that savings are measured against."""
    for cycle in cycles:
        if cycle.multiplier == 1:
            return cycle
    return None
