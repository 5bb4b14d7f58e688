"""Seat inventory: per-seat availability and the flight's available_seats counter.

`set_availability` is the raw toggle and leaves the counter alone. The booking
and ticket write paths go through `reserve_seat` / `release_seat`, which flip
the flag with a conditional UPDATE (only one concurrent caller can win) and
move the counter in the same transaction. None of these functions commit.
"""
import logging
import string
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from app.core.errors import NotFound, SeatUnavailable, ValidationError
from app.models.flight import Flight
from app.models.seat import Seat, SEAT_CLASSES
from app.services.fare_service import to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CabinSection:
    row_count: int
    seat_class: str
    columns: Sequence[str]
    price_delta: Decimal


DEFAULT_LAYOUT = (
    CabinSection(3, "first", tuple("ABCD"), Decimal("150.00")),
    CabinSection(5, "business", tuple("ABCDEF"), Decimal("100.00")),
    CabinSection(20, "economy", tuple("ABCDEF"), Decimal("0.00")),
)


def seat_sort_key(seat_number: str) -> tuple[int, str]:
    row = seat_number.rstrip(string.ascii_uppercase)
    return (int(row) if row.isdigit() else 0, seat_number[len(row):])


def _require_flight(db: Session, flight_id: str) -> Flight:
    flight = db.get(Flight, flight_id)
    if not flight:
        raise NotFound("flight not found")
    return flight


def list_seats(db: Session, flight_id: str) -> list[Seat]:
    _require_flight(db, flight_id)
    seats = db.scalars(select(Seat).where(Seat.flight_id == flight_id)).all()
    return sorted(seats, key=lambda s: seat_sort_key(s.seat_number))


def get_seat(db: Session, flight_id: str, seat_number: str, *, for_update: bool = False) -> Seat:
    stmt = select(Seat).where(Seat.flight_id == flight_id, Seat.seat_number == seat_number)
    if for_update:
        stmt = stmt.with_for_update()
    seat = db.execute(stmt).scalar_one_or_none()
    if not seat:
        raise NotFound(f"seat {seat_number} not found on this flight")
    return seat


def set_availability(db: Session, flight_id: str, seat_number: str, available: bool) -> Seat:
    """Toggle one seat. Keeping Flight.available_seats in step is the caller's job."""
    seat = get_seat(db, flight_id, seat_number)
    seat.is_available = available
    db.flush()
    return seat


def _adjust_available(db: Session, flight_id: str, delta: int) -> None:
    db.execute(
        update(Flight)
        .where(Flight.id == flight_id)
        .values(available_seats=Flight.available_seats + delta)
        .execution_options(synchronize_session=False)
    )
    flight = db.get(Flight, flight_id)
    if flight is not None:
        db.expire(flight, ["available_seats"])


def reserve_seat(db: Session, flight_id: str, seat_number: str) -> Seat:
    """Mark a seat sold and decrement the flight counter, or raise SeatUnavailable."""
    seat = get_seat(db, flight_id, seat_number, for_update=True)
    result = db.execute(
        update(Seat)
        .where(Seat.id == seat.id, Seat.is_available == True)
        .values(is_available=False)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning("seat %s on flight %s is already taken", seat_number, flight_id)
        raise SeatUnavailable(f"seat {seat_number} is not available")
    db.expire(seat, ["is_available"])
    _adjust_available(db, flight_id, -1)
    return seat


def release_seat(db: Session, flight_id: str, seat_number: str) -> Seat:
    """Return a sold seat to inventory and increment the flight counter."""
    seat = get_seat(db, flight_id, seat_number, for_update=True)
    result = db.execute(
        update(Seat)
        .where(Seat.id == seat.id, Seat.is_available == False)
        .values(is_available=True)
        .execution_options(synchronize_session=False)
    )
    db.expire(seat, ["is_available"])
    if result.rowcount != 1:
        # already free: counting it again would push the counter past the seat rows
        logger.warning("seat %s on flight %s was already available", seat_number, flight_id)
        return seat
    _adjust_available(db, flight_id, +1)
    return seat


def _validate_section(section: CabinSection) -> None:
    if section.row_count < 1:
        raise ValidationError("rowCount must be >= 1")
    if section.seat_class not in SEAT_CLASSES:
        raise ValidationError(f"invalid seat class: {section.seat_class}")
    columns = list(section.columns)
    if not columns:
        raise ValidationError("a cabin section needs at least one column")
    for letter in columns:
        if len(letter) != 1 or letter not in string.ascii_uppercase:
            raise ValidationError(f"invalid column letter: {letter!r}")
    if len(set(columns)) != len(columns):
        raise ValidationError("column letters must be unique within a section")
    if to_money(section.price_delta) < 0:
        raise ValidationError("priceDelta must be >= 0")


def create_seat_map(db: Session, flight_id: str, layout: Iterable[CabinSection] = DEFAULT_LAYOUT) -> list[Seat]:
    """Generate every seat of a new flight. Rows are numbered continuously across sections."""
    _require_flight(db, flight_id)
    existing = db.scalar(select(func.count()).select_from(Seat).where(Seat.flight_id == flight_id))
    if existing:
        raise ValidationError("seat map already exists for this flight")

    sections = list(layout)
    if not sections:
        raise ValidationError("seat layout is empty")
    for section in sections:
        _validate_section(section)

    seats = []
    row = 1
    for section in sections:
        price = to_money(section.price_delta)
        for _ in range(section.row_count):
            for letter in section.columns:
                seats.append(Seat(
                    id=str(uuid.uuid4()),
                    flight_id=flight_id,
                    seat_number=f"{row}{letter}",
                    seat_class=section.seat_class,
                    price=price,
                    is_available=True,
                ))
            row += 1
    db.add_all(seats)
    db.flush()
    return seats


def recount_available_seats(db: Session, flight_id: str) -> int:
    """Rebuild Flight.available_seats from the seat rows."""
    flight = _require_flight(db, flight_id)
    db.flush()
    available = db.scalar(
        select(func.count()).select_from(Seat).where(Seat.flight_id == flight_id, Seat.is_available == True)
    ) or 0
    if flight.available_seats != available:
        logger.info("flight %s available_seats %s -> %s", flight.flight_number, flight.available_seats, available)
    flight.available_seats = available
    db.flush()
    return available
