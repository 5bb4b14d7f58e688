from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from app.core.errors import ValidationError

CENT = Decimal("0.01")
# Numeric(10, 2) holds at most 99,999,999.99
MONEY_LIMIT = Decimal("100000000")


def to_money(value) -> Decimal:
    """Parse an exact decimal amount (string, int or Decimal) to two places."""
    if isinstance(value, float):
        # binary floats would leak rounding error into fares
        value = repr(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        in_range = amount.is_finite() and abs(amount) < MONEY_LIMIT
        if in_range:
            amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        in_range = False
    if not in_range:
        raise ValidationError(f"invalid amount: {value!r}")
    return amount


def format_money(value) -> str:
    return str(to_money(value))


def compute_total(flight, seat) -> Decimal:
    """Base fare of the flight plus the flat class increment of the seat."""
    return to_money(to_money(flight.base_price) + to_money(seat.price))
