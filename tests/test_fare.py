from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.core.errors import ValidationError
from app.services.fare_service import compute_total, format_money, to_money


def test_total_is_base_plus_class_increment():
    flight = SimpleNamespace(base_price=Decimal("4500.00"))
    seat = SimpleNamespace(price=Decimal("2000.00"))
    assert compute_total(flight, seat) == Decimal("6500.00")
    assert format_money(compute_total(flight, seat)) == "6500.00"


def test_to_money_parses_strings_and_floats_exactly():
    assert to_money("3200") == Decimal("3200.00")
    assert to_money(0.1) + to_money(0.2) == Decimal("0.30")
    assert to_money("10.005") == Decimal("10.01")


@pytest.mark.parametrize("bad", ["abc", "", "NaN", "Infinity"])
def test_to_money_rejects_garbage(bad):
    with pytest.raises(ValidationError):
        to_money(bad)


@pytest.mark.parametrize("too_big", [Decimal("1E+30"), "1e30", "100000000", "-100000000.00"])
def test_to_money_rejects_amounts_beyond_the_column(too_big):
    with pytest.raises(ValidationError):
        to_money(too_big)


def test_largest_storable_amount_is_accepted():
    assert to_money("99999999.99") == Decimal("99999999.99")


def test_total_that_overflows_the_column_is_rejected():
    flight = SimpleNamespace(base_price=Decimal("99999999.00"))
    seat = SimpleNamespace(price=Decimal("2000.00"))
    with pytest.raises(ValidationError):
        compute_total(flight, seat)
