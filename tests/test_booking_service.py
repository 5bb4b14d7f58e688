from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.core.errors import NotFound, SeatUnavailable, ValidationError
from app.models.flight import Flight
from app.models.passenger import Passenger
from app.models.seat import Seat
from app.models.ticket import Ticket
from app.models.transaction import Transaction
from app.services import booking_service
from app.services.booking_service import create_booking


def _count(db, model):
    return db.scalar(select(func.count()).select_from(model))


def test_booking_writes_passenger_ticket_and_payment(db, make_flight, customer, passenger_data):
    flight = make_flight(base_price="4500.00")
    result = create_booking(db, flight.id, customer, passenger_data, "1A", "card")

    assert result.ticket.price == Decimal("6500.00")
    assert result.ticket.seat_class == "business"
    assert result.ticket.status == "confirmed"
    assert result.ticket.checked_in is False
    assert result.ticket.ticket_number.startswith("TK-")
    assert result.booking_reference.startswith("BKG-")
    assert result.ticket.booking_reference == result.transaction.booking_reference
    assert result.transaction.amount == Decimal("6500.00")
    assert result.transaction.status == "completed"
    assert result.transaction.ticket_id == result.ticket.id
    assert result.passenger.email == "priya@example.com"
    assert result.passenger.user_id == customer.id

    db.expire_all()
    seat = db.execute(select(Seat).where(Seat.flight_id == flight.id, Seat.seat_number == "1A")).scalar_one()
    assert seat.is_available is False
    assert db.get(Flight, flight.id).available_seats == flight.total_seats - 1


def test_seat_number_is_normalised(db, make_flight, customer, passenger_data):
    flight = make_flight()
    result = create_booking(db, flight.id, customer, passenger_data, " 12a ", "upi")
    assert result.ticket.seat_number == "12A"
    assert result.ticket.price == Decimal("4500.00")


def test_taken_seat_is_rejected(db, make_flight, customer, other_customer, passenger_data):
    flight = make_flight()
    create_booking(db, flight.id, customer, passenger_data, "12A", "card")
    with pytest.raises(SeatUnavailable):
        create_booking(db, flight.id, other_customer, passenger_data, "12A", "card")
    assert _count(db, Ticket) == 1
    assert _count(db, Passenger) == 1


def test_unknown_flight_or_seat(db, make_flight, customer, passenger_data):
    with pytest.raises(NotFound):
        create_booking(db, "missing", customer, passenger_data, "1A", "card")
    flight = make_flight()
    with pytest.raises(NotFound):
        create_booking(db, flight.id, customer, passenger_data, "40A", "card")


def test_departed_flight_cannot_be_booked(db, make_flight, customer, passenger_data):
    flight = make_flight(departure_in=timedelta(hours=-2))
    with pytest.raises(ValidationError):
        create_booking(db, flight.id, customer, passenger_data, "12A", "card")


def test_missing_passenger_fields(db, make_flight, customer):
    flight = make_flight()
    with pytest.raises(ValidationError):
        create_booking(db, flight.id, customer, {"first_name": "A", "email": "a@example.com"}, "12A", "card")


def test_failure_after_seat_flip_rolls_everything_back(db, make_flight, customer, passenger_data, monkeypatch):
    flight = make_flight()

    def broken_total(flight, seat):
        raise RuntimeError("pricing backend down")

    monkeypatch.setattr(booking_service, "compute_total", broken_total)
    with pytest.raises(RuntimeError):
        create_booking(db, flight.id, customer, passenger_data, "12A", "card")

    db.expire_all()
    seat = db.execute(select(Seat).where(Seat.flight_id == flight.id, Seat.seat_number == "12A")).scalar_one()
    assert seat.is_available is True
    assert db.get(Flight, flight.id).available_seats == flight.total_seats
    assert _count(db, Ticket) == 0
    assert _count(db, Passenger) == 0
    assert _count(db, Transaction) == 0


def test_concurrent_bookings_for_one_seat_have_one_winner(session_factory, make_flight, customer, passenger_data):
    flight = make_flight()

    def attempt(_):
        with session_factory() as session:
            try:
                create_booking(session, flight.id, customer, dict(passenger_data), "14C", "card")
                return "ok"
            except SeatUnavailable:
                return "taken"

    with ThreadPoolExecutor(max_workers=6) as pool:
        outcomes = list(pool.map(attempt, range(6)))

    assert outcomes.count("ok") == 1
    assert outcomes.count("taken") == 5
    with session_factory() as session:
        assert session.get(Flight, flight.id).available_seats == flight.total_seats - 1
        assert _count(session, Ticket) == 1
        assert _count(session, Transaction) == 1


def test_concurrent_bookings_for_different_seats_all_succeed(session_factory, make_flight, customer, passenger_data):
    flight = make_flight()
    seats = ["20A", "20B", "20C", "20D"]

    def attempt(seat_number):
        with session_factory() as session:
            return create_booking(session, flight.id, customer, dict(passenger_data), seat_number, "card").ticket.seat_number

    with ThreadPoolExecutor(max_workers=4) as pool:
        booked = list(pool.map(attempt, seats))

    assert sorted(booked) == seats
    with session_factory() as session:
        assert session.get(Flight, flight.id).available_seats == flight.total_seats - 4
