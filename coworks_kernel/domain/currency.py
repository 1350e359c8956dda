"""Currency -- the fixed billing currency and its display formatting."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about the billing currency."""

    code: str
    decimal_places: int
    name: str
    symbol: str

    @property
    def quantize_string(self) -> str:
        """String for Decimal.quantize() to round to this currency's precision."""
        if self.decimal_places == 0:
            return "1"
        return "0." + "0" * self.decimal_places


# All amounts are billed in rupees; whole rupees are shown to customers.
BILLING_CURRENCY = CurrencyInfo("INR", 2, "Indian Rupee", "₹")

_WHOLE_UNIT = Decimal("1")


def _group_indian(digits: str) -> str:
    """Group an unsigned digit string the en-IN way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_currency(
    amount: Decimal | int | str,
    currency: CurrencyInfo = BILLING_CURRENCY,
) -> str:
    """
    Render an amount as a rupee string with no fractional digits.

    Rounds half-up to whole units and applies Indian digit grouping:
    ``format_currency(Decimal("100000"))`` gives ``"₹1,00,000"``; negative
    amounts get a leading minus (``"-₹500"``).
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    whole = value.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)
    sign = "-" if whole < 0 else ""
    digits = str(abs(int(whole)))
    return f"{sign}{currency.symbol}{_group_indian(digits)}"
