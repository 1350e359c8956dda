"""
Tests for the move-in payment calculation.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from coworks_engines.billing import LineItemKind, calculate_initial_payment
from coworks_kernel.domain.seating import SeatingType
from coworks_kernel.exceptions import InvalidRateError


def _lines(result) -> list[tuple[str, Decimal]]:
    return [(item.description, item.amount) for item in result.breakdown]


# ============================================================================
# Monthly Seating
# ============================================================================


class TestMonthlyInitialPayment:
    """Pro-rata, next full month and a refundable deposit."""

    def test_mid_month_hot_desk(self):
        result = calculate_initial_payment(
            date(2023, 3, 21), Decimal("5000"), seating_type=SeatingType.HOT_DESK
        )
        assert _lines(result) == [
            ("Pro-rata for March 2023 (21-31)", Decimal("1774")),
            ("Full month: April 2023", Decimal("5000")),
            ("Security deposit (refundable)", Decimal("5000")),
        ]
        assert result.total_amount == Decimal("11774")
        assert result.extra_details == (
            "Pro-rata for March 2023: ₹5,000 / 31 days × 11 days = ₹1,774",
            "Hot Desk requires a minimum commitment of 2 months",
        )

    def test_start_on_first_skips_pro_rata(self):
        result = calculate_initial_payment(date(2023, 4, 1), Decimal("5000"))
        assert _lines(result) == [
            ("Full month: April 2023", Decimal("5000")),
            ("Security deposit (refundable)", Decimal("5000")),
        ]
        assert result.total_amount == Decimal("10000")
        assert result.extra_details == ()

    def test_december_start_rolls_into_january(self):
        result = calculate_initial_payment(date(2023, 12, 15), Decimal("5000"))
        assert _lines(result)[:2] == [
            ("Pro-rata for December 2023 (15-31)", Decimal("2742")),
            ("Full month: January 2024", Decimal("5000")),
        ]

    def test_line_kinds(self):
        result = calculate_initial_payment(date(2023, 3, 21), Decimal("5000"))
        assert [item.kind for item in result.breakdown] == [
            LineItemKind.PRO_RATA,
            LineItemKind.FULL_MONTH,
            LineItemKind.SECURITY_DEPOSIT,
        ]
        assert result.breakdown[1].period_start == date(2023, 4, 1)

    def test_dedicated_desk_adds_seat_note(self):
        result = calculate_initial_payment(
            date(2023, 4, 1), Decimal("5000"), seating_type="DEDICATED_DESK"
        )
        assert result.extra_details == (
            "Dedicated Desk requires a minimum commitment of 3 months",
            "Dedicated Desk requires a minimum of 10 seats per booking",
        )

    def test_unknown_tag_bills_as_monthly_without_notes(self):
        result = calculate_initial_payment(
            date(2023, 4, 1), Decimal("5000"), seating_type="PENTHOUSE"
        )
        assert result.total_amount == Decimal("10000")
        assert result.extra_details == ()

    def test_datetime_start_uses_calendar_day(self):
        result = calculate_initial_payment(datetime(2023, 3, 21, 17, 45), Decimal("5000"))
        assert result.total_amount == Decimal("11774")


# ============================================================================
# Hourly and Daily Seating
# ============================================================================


class TestPrepaidInitialPayment:
    """Hourly and daily seating pay the rate up front with no deposit."""

    @pytest.mark.parametrize(
        "seating_type, label",
        [
            (SeatingType.MEETING_ROOM, "Meeting Room"),
            (SeatingType.DAILY_PASS, "Day Pass"),
        ],
    )
    def test_single_full_payment_line(self, seating_type, label):
        result = calculate_initial_payment(
            date(2024, 5, 1), Decimal("800"), seating_type=seating_type
        )
        assert _lines(result) == [(f"Full payment: {label}", Decimal("800"))]
        assert result.breakdown[0].kind == LineItemKind.FULL_PAYMENT
        assert result.total_amount == Decimal("800")
        assert result.extra_details == ("Full prepayment is due at booking",)


# ============================================================================
# Validation and Serialization
# ============================================================================


class TestInitialPaymentEdges:

    def test_negative_rate_rejected(self):
        with pytest.raises(InvalidRateError):
            calculate_initial_payment(date(2023, 4, 1), Decimal("-5000"))

    def test_to_dict_shape(self):
        result = calculate_initial_payment(date(2023, 4, 1), Decimal("5000"))
        assert result.to_dict() == {
            "totalAmount": "10000",
            "breakdown": [
                {"description": "Full month: April 2023", "amount": "5000"},
                {"description": "Security deposit (refundable)", "amount": "5000"},
            ],
            "extraDetails": [],
        }

    def test_logged_with_seating_context(self, captured_logs):
        calculate_initial_payment(date(2023, 3, 21), Decimal("5000"), seating_type="hot_desk")
        logs = captured_logs()
        record = next(r for r in logs if r["message"] == "initial_payment_calculated")
        trace = next(r for r in logs if r["message"] == "COWORKS_ENGINE_TRACE")
        assert record["total_amount"] == "11774"
        assert record["line_item_count"] == 3
        assert record["seating_type"] == "HOT_DESK"
        assert record["trace_id"] == trace["input_fingerprint"]
