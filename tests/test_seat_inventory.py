from decimal import Decimal

import pytest

from app.core.errors import NotFound, SeatUnavailable, ValidationError
from app.models.flight import Flight
from app.services import seat_inventory
from app.services.seat_inventory import CabinSection


def test_default_layout_has_162_seats_in_three_classes(make_flight):
    flight = make_flight(layout=seat_inventory.DEFAULT_LAYOUT)
    assert flight.total_seats == 162
    assert flight.available_seats == 162


def test_seat_map_is_in_natural_order(db, make_flight):
    flight = make_flight()
    seats = seat_inventory.list_seats(db, flight.id)
    numbers = [s.seat_number for s in seats]
    assert numbers[:5] == ["1A", "1C", "1D", "1F", "2A"]
    # row 10 sorts after row 9, not after row 1
    assert numbers.index("10A") > numbers.index("9F")
    assert {s.seat_class for s in seats if s.row <= 3} == {"business"}
    assert all(s.price == Decimal("2000.00") for s in seats if s.seat_class == "business")
    assert all(s.price == Decimal("0.00") for s in seats if s.seat_class == "economy")


def test_list_seats_unknown_flight(db):
    with pytest.raises(NotFound):
        seat_inventory.list_seats(db, "nope")


def test_reserve_and_release_keep_counter_in_step(db, make_flight):
    flight = make_flight()
    seat_inventory.reserve_seat(db, flight.id, "5B")
    db.commit()
    assert db.get(Flight, flight.id).available_seats == flight.total_seats - 1

    with pytest.raises(SeatUnavailable):
        seat_inventory.reserve_seat(db, flight.id, "5B")
    db.rollback()

    seat_inventory.release_seat(db, flight.id, "5B")
    db.commit()
    assert db.get(Flight, flight.id).available_seats == flight.total_seats


def test_releasing_a_free_seat_does_not_inflate_counter(db, make_flight):
    flight = make_flight()
    seat_inventory.release_seat(db, flight.id, "7C")
    db.commit()
    assert db.get(Flight, flight.id).available_seats == flight.total_seats


def test_unknown_seat_is_not_found(db, make_flight):
    flight = make_flight()
    with pytest.raises(NotFound):
        seat_inventory.reserve_seat(db, flight.id, "99Z")


def test_seat_map_cannot_be_generated_twice(db, make_flight):
    flight = make_flight()
    with pytest.raises(ValidationError):
        seat_inventory.create_seat_map(db, flight.id)


def test_invalid_layout_rejected(make_flight):
    with pytest.raises(ValidationError):
        make_flight(layout=(CabinSection(2, "economy", ("A", "A"), Decimal("0")),))
    with pytest.raises(ValidationError):
        make_flight(layout=(CabinSection(2, "steerage", tuple("AB"), Decimal("0")),))


def test_recount_repairs_drifted_counter(db, make_flight):
    flight = make_flight()
    seat_inventory.set_availability(db, flight.id, "4A", False)
    seat_inventory.set_availability(db, flight.id, "4B", False)
    assert seat_inventory.recount_available_seats(db, flight.id) == flight.total_seats - 2
    db.commit()
    assert db.get(Flight, flight.id).available_seats == flight.total_seats - 2
