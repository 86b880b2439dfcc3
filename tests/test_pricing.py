"""Tests for claim pricing."""

from decimal import Decimal

import pytest

from bidclaim.claims.pricing import compute_price, is_trial_eligible, price_breakdown


class TestComputePrice:
    @pytest.mark.parametrize("count,expected", [
        (0, "29.95"),
        (50, "29.95"),
        (100, "29.95"),
        (101, "30.05"),
        (250, "44.95"),
        (300, "49.95"),
        (1100, "129.95"),
    ])
    def test_values(self, count, expected):
        assert compute_price(count) == Decimal(expected)

    def test_unknown_count_is_base_price(self):
        assert compute_price(None) == Decimal("29.95")

    def test_two_decimal_places(self):
        assert compute_price(12345).as_tuple().exponent == -2

    def test_monotonic(self):
        prices = [compute_price(n) for n in range(0, 500, 7)]
        assert prices == sorted(prices)


class TestTrialEligibility:
    def test_limit_inclusive(self):
        assert is_trial_eligible(10_000) is True
        assert is_trial_eligible(10_001) is False

    def test_small_and_unknown(self):
        assert is_trial_eligible(0) is True
        assert is_trial_eligible(None) is True


class TestPriceBreakdown:
    def test_breakdown(self):
        b = price_breakdown(250)
        assert b.base_price == 29.95
        assert b.included_items == 100
        assert b.extra_items == 150
        assert b.extra_cost == 15.0

    def test_no_extra(self):
        assert price_breakdown(40).extra_items == 0

    def test_unknown(self):
        assert price_breakdown(None) is None
