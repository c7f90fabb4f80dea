"""Tests for pricing display rules (formatting, limits, savings, cycle selection)."""

from types import SimpleNamespace

import pytest

from sitecms.domain.pricing import (
    PLACEHOLDER_PRICE,
    UNLIMITED_DISPLAY,
    calculate_savings,
    display_limit,
    display_price,
    find_base_cycle,
    format_price,
    round_half_up,
    select_billing_cycle,
)

pytestmark = pytest.mark.unit


def _cycle(id, multiplier=1, is_default=False):
    return SimpleNamespace(id=id, multiplier=multiplier, is_default=is_default)


class TestFormatPrice:
    def test_whole_dollars_drop_cents(self):
        assert format_price(2900) == "$29"

    def test_fractional_amount_keeps_two_decimals(self):
        assert format_price(2999) == "$29.99"

    def test_single_digit_cents_are_padded(self):
        assert format_price(1005) == "$10.05"

    def test_zero(self):
        assert format_price(0) == "$0"

    def test_missing_price_shows_placeholder(self):
        assert display_price(None) == PLACEHOLDER_PRICE == "$0.00"

    def test_present_price_is_formatted(self):
        assert display_price(29000) == "$290"


class TestDisplayLimit:
    def test_unlimited_wins_over_value(self):
        limit = SimpleNamespace(value="10", is_unlimited=True)
        assert display_limit(limit) == UNLIMITED_DISPLAY == "∞"

    def test_value_shown_verbatim(self):
        assert display_limit(SimpleNamespace(value="5 GB", is_unlimited=False)) == "5 GB"

    def test_missing_limit_is_zero(self):
        assert display_limit(None) == "0"

    def test_empty_value_is_zero(self):
        assert display_limit(SimpleNamespace(value="", is_unlimited=False)) == "0"


class TestCalculateSavings:
    def test_monthly_cycle_has_no_savings(self):
        assert calculate_savings(1, 2900, 2900) == 0

    def test_yearly_savings_rounded(self):
        # 12 * 2900 = 34800; (34800 - 29000) / 34800 = 16.67%
        assert calculate_savings(12, 2900, 29000) == 17

    def test_unknown_prices_give_zero(self):
        assert calculate_savings(12, None, 29000) == 0
        assert calculate_savings(12, 2900, None) == 0

    def test_free_monthly_plan_gives_zero(self):
        assert calculate_savings(12, 0, 0) == 0

    def test_more_expensive_cycle_is_negative(self):
        assert calculate_savings(12, 1000, 13200) == -10

    def test_half_rounds_up(self):
        assert round_half_up(16.5) == 17
        assert round_half_up(16.49) == 16


class TestSelectBillingCycle:
    def test_requested_cycle_wins(self):
        cycles = [_cycle("m", 1, True), _cycle("y", 12)]
        assert select_billing_cycle(cycles, "y").id == "y"

    def test_unknown_request_falls_back_to_default(self):
        cycles = [_cycle("y", 12), _cycle("m", 1, True)]
        assert select_billing_cycle(cycles, "nope").id == "m"

    def test_no_default_falls_back_to_first(self):
        cycles = [_cycle("q", 3), _cycle("y", 12)]
        assert select_billing_cycle(cycles).id == "q"

    def test_no_cycles(self):
        assert select_billing_cycle([], "m") is None

    def test_base_cycle_is_one_month(self):
        cycles = [_cycle("y", 12), _cycle("m", 1)]
        assert find_base_cycle(cycles).id == "m"
        assert find_base_cycle([_cycle("y", 12)]) is None
