"""
Tests for rate-type pricing, quantity discounts and rate-type selection.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from coworks_engines.pricing import (
    RateType,
    apply_quantity_discount,
    calculate_total_price,
    coerce_rate,
    find_best_rate_type,
)
from coworks_kernel.exceptions import InvalidDateRangeError, InvalidRateError

MULTIPLIERS = {"5": "0.95", "10": "0.90"}


# ============================================================================
# Total Price
# ============================================================================


class TestCalculateTotalPrice:

    def test_hourly_uses_exact_duration(self):
        price = calculate_total_price(
            datetime(2024, 5, 1, 10, 0), datetime(2024, 5, 1, 11, 30), Decimal("200")
        )
        assert price == Decimal("300.00")

    def test_daily_with_quantity(self):
        price = calculate_total_price(
            datetime(2024, 5, 1, 9, 0), datetime(2024, 5, 3, 9, 0), Decimal("800"),
            quantity=2, rate_type=RateType.DAILY,
        )
        assert price == Decimal("3200.00")

    def test_weekly(self):
        price = calculate_total_price(
            date(2024, 5, 1), date(2024, 5, 15), Decimal("3500"), rate_type="weekly",
        )
        assert price == Decimal("7000.00")

    def test_monthly_counts_whole_months_and_edge_ratios(self):
        # 2 whole months + 15/30 of April + 15/30 of June
        price = calculate_total_price(
            date(2023, 4, 16), date(2023, 6, 15), Decimal("1000"),
            rate_type=RateType.MONTHLY,
        )
        assert price == Decimal("3000.00")

    def test_rounds_half_up_to_paise(self):
        # 20 minutes at 100/hour = 33.333...
        price = calculate_total_price(
            datetime(2024, 5, 1, 10, 0), datetime(2024, 5, 1, 10, 20), Decimal("100")
        )
        assert price == Decimal("33.33")

    def test_zero_length_span(self):
        moment = datetime(2024, 5, 1, 10, 0)
        assert calculate_total_price(moment, moment, Decimal("500")) == Decimal("0.00")

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidDateRangeError):
            calculate_total_price(date(2024, 5, 2), date(2024, 5, 1), Decimal("100"))

    def test_negative_rate_rejected(self):
        with pytest.raises(InvalidRateError):
            calculate_total_price(date(2024, 5, 1), date(2024, 5, 2), Decimal("-1"))

    @pytest.mark.parametrize("rate", [Decimal("NaN"), float("nan"), float("inf")])
    def test_non_finite_rate_rejected(self, rate):
        with pytest.raises(InvalidRateError, match="finite"):
            calculate_total_price(date(2024, 5, 1), date(2024, 5, 2), rate)

    def test_float_rate_accepted(self):
        price = calculate_total_price(
            date(2024, 5, 1), date(2024, 5, 3), 799.5, rate_type=RateType.DAILY
        )
        assert price == Decimal("1599.00")

    def test_quantity_below_one_rejected(self):
        with pytest.raises(ValueError, match="quantity"):
            calculate_total_price(date(2024, 5, 1), date(2024, 5, 2), Decimal("100"), quantity=0)


# ============================================================================
# Quantity Discounts
# ============================================================================


class TestApplyQuantityDiscount:

    @pytest.mark.parametrize(
        "quantity, expected",
        [(3, Decimal("1000.00")), (5, Decimal("950.00")), (7, Decimal("950.00")), (12, Decimal("900.00"))],
    )
    def test_highest_threshold_reached(self, quantity, expected):
        assert apply_quantity_discount(Decimal("1000"), quantity, MULTIPLIERS) == expected

    def test_single_unit_unchanged(self):
        assert apply_quantity_discount(Decimal("1000"), 1, MULTIPLIERS) == Decimal("1000")

    def test_no_table_unchanged(self):
        assert apply_quantity_discount(Decimal("1000"), 20) == Decimal("1000")

    def test_integer_keys_accepted(self):
        table = {10: Decimal("0.80")}
        assert apply_quantity_discount(Decimal("500"), 10, table) == Decimal("400.00")

    def test_discount_logged(self, captured_logs):
        apply_quantity_discount(Decimal("1000"), 12, MULTIPLIERS)
        record = next(r for r in captured_logs() if r["message"] == "quantity_discount_applied")
        assert record["multiplier"] == "0.90"
        assert record["discounted_price"] == "900.00"


# ============================================================================
# Best Rate Type
# ============================================================================


class TestFindBestRateType:

    def test_lowest_effective_rate_wins(self):
        rates = {
            RateType.HOURLY: Decimal("50"),
            RateType.DAILY: Decimal("1000"),
            RateType.WEEKLY: Decimal("6000"),
            RateType.MONTHLY: Decimal("24000"),
        }
        assert find_best_rate_type(date(2024, 5, 1), date(2024, 5, 20), rates) == RateType.MONTHLY

    def test_hourly_wins_when_cheapest_per_hour(self):
        rates = {"hourly": "10", "daily": "500", "weekly": "4000", "monthly": "20000"}
        result = find_best_rate_type(
            datetime(2024, 5, 1, 10, 0), datetime(2024, 5, 1, 12, 0), rates
        )
        assert result == RateType.HOURLY

    def test_tie_goes_to_earlier_rate_type(self):
        rates = {"hourly": "10", "daily": "240", "weekly": "1680", "monthly": "7200"}
        assert find_best_rate_type(date(2024, 5, 1), date(2024, 5, 8), rates) == RateType.HOURLY

    def test_end_before_start_rejected(self):
        rates = {"hourly": "10", "daily": "240", "weekly": "1680", "monthly": "7200"}
        with pytest.raises(InvalidDateRangeError):
            find_best_rate_type(date(2024, 5, 8), date(2024, 5, 1), rates)

    def test_unparsable_rate_rejected(self):
        rates = {"hourly": "ten", "daily": "240", "weekly": "1680", "monthly": "7200"}
        with pytest.raises(InvalidRateError, match="not a number"):
            find_best_rate_type(date(2024, 5, 1), date(2024, 5, 8), rates)


class TestCoerceRate:

    def test_accepts_common_numeric_inputs(self):
        assert coerce_rate(5000) == Decimal("5000")
        assert coerce_rate("5000.50") == Decimal("5000.50")
        assert coerce_rate(0.5) == Decimal("0.5")

    def test_negative_rejected(self):
        with pytest.raises(InvalidRateError, match="non-negative") as exc_info:
            coerce_rate(Decimal("-0.01"))
        assert exc_info.value.rate == "-0.01"
