import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.core.clock import as_utc, utcnow
from app.core.errors import NotFound, ResourceInUse, ValidationError
from app.models.flight import Flight, FLIGHT_STATUSES
from app.models.ticket import Ticket
from app.models.user import User
from app.services import seat_inventory
from app.services.audit_service import log_audit
from app.services.fare_service import to_money

logger = logging.getLogger(__name__)

EDITABLE = (
    "airline", "aircraft", "origin", "destination", "departure_time", "arrival_time",
    "duration", "base_price", "gate", "status",
)
CAPACITY = ("total_seats", "available_seats")


def list_upcoming_flights(db: Session, now: datetime | None = None) -> list[Flight]:
    now = now or utcnow()
    flights = db.scalars(select(Flight).order_by(Flight.departure_time.asc())).all()
    return [f for f in flights if as_utc(f.departure_time) > now]


def search_flights(db: Session, origin: str, destination: str, on_date: date | None = None) -> list[Flight]:
    stmt = select(Flight).where(
        func.lower(Flight.origin).contains(origin.strip().lower(), autoescape=True),
        func.lower(Flight.destination).contains(destination.strip().lower(), autoescape=True),
    )
    if on_date:
        start = datetime.combine(on_date, time.min, tzinfo=timezone.utc)
        stmt = stmt.where(Flight.departure_time >= start, Flight.departure_time < start + timedelta(days=1))
    return list(db.scalars(stmt.order_by(Flight.departure_time.asc())))


def get_flight(db: Session, flight_id: str) -> Flight:
    flight = db.get(Flight, flight_id)
    if not flight:
        raise NotFound("flight not found")
    return flight


def _duration_minutes(departure: datetime, arrival: datetime) -> int:
    return int((as_utc(arrival) - as_utc(departure)).total_seconds() // 60)


def _check_schedule(flight: Flight) -> None:
    if as_utc(flight.arrival_time) <= as_utc(flight.departure_time):
        raise ValidationError("arrivalTime must be after departureTime")
    if flight.duration is not None and flight.duration <= 0:
        raise ValidationError("duration must be positive")


def _check_common(fields: dict) -> dict:
    if "base_price" in fields:
        fields["base_price"] = to_money(fields["base_price"])
        if fields["base_price"] < 0:
            raise ValidationError("basePrice must be >= 0")
    for key in ("departure_time", "arrival_time"):
        if fields.get(key) is not None:
            fields[key] = as_utc(fields[key])
    if "status" in fields and fields["status"] not in FLIGHT_STATUSES:
        raise ValidationError(f"invalid flight status: {fields['status']}")
    for key in ("airline", "aircraft", "origin", "destination"):
        if key in fields and not (fields[key] or "").strip():
            raise ValidationError(f"{key} cannot be empty")
    return fields


def create_flight(db: Session, data: dict, actor: User,
                  layout=seat_inventory.DEFAULT_LAYOUT) -> Flight:
    """Create a flight and its seat map together; capacity comes from the seat map."""
    fields = _check_common({k: v for k, v in data.items() if k in EDITABLE})
    flight_number = (data.get("flight_number") or "").strip().upper()
    if not flight_number:
        raise ValidationError("flightNumber is required")
    for key in ("airline", "aircraft", "origin", "destination", "departure_time", "arrival_time", "base_price"):
        if fields.get(key) in (None, ""):
            raise ValidationError(f"{key} is required")

    exists = db.scalar(select(Flight.id).where(Flight.flight_number == flight_number))
    if exists:
        raise ResourceInUse(f"flight number {flight_number} already exists")

    flight = Flight(id=str(uuid.uuid4()), flight_number=flight_number, total_seats=0, available_seats=0, **fields)
    if flight.duration is None:
        flight.duration = _duration_minutes(flight.departure_time, flight.arrival_time)
    flight.status = flight.status or "scheduled"
    _check_schedule(flight)

    try:
        db.add(flight)
        db.flush()
        seats = seat_inventory.create_seat_map(db, flight.id, layout)
        requested = data.get("total_seats")
        if requested is not None and requested != len(seats):
            raise ValidationError(f"totalSeats {requested} does not match the seat layout ({len(seats)} seats)")
        flight.total_seats = len(seats)
        seat_inventory.recount_available_seats(db, flight.id)
        log_audit(db, actor.id, "flight.create", "flight", flight.id, {"flight_number": flight_number, "seats": len(seats)})
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("flight %s created with %s seats", flight.flight_number, flight.total_seats)
    return flight


def update_flight(db: Session, flight_id: str, changes: dict, actor: User) -> Flight:
    blocked = [k for k in CAPACITY if changes.get(k) is not None]
    if blocked:
        raise ValidationError("seat capacity is derived from the seat map and cannot be edited")
    if changes.get("flight_number") not in (None, ""):
        raise ValidationError("flightNumber cannot be changed")
    fields = {k: v for k, v in changes.items() if k in EDITABLE}
    for key, value in fields.items():
        if value is None and key != "gate":
            raise ValidationError(f"{key} cannot be null")
    fields = _check_common(fields)

    flight = get_flight(db, flight_id)
    try:
        for key, value in fields.items():
            setattr(flight, key, value)
        if ("departure_time" in fields or "arrival_time" in fields) and "duration" not in fields:
            flight.duration = _duration_minutes(flight.departure_time, flight.arrival_time)
        _check_schedule(flight)
        log_audit(db, actor.id, "flight.update", "flight", flight.id, {"fields": sorted(fields)})
        db.commit()
    except Exception:
        db.rollback()
        raise
    return flight


def delete_flight(db: Session, flight_id: str, actor: User) -> None:
    flight = get_flight(db, flight_id)
    tickets = db.scalar(select(func.count()).select_from(Ticket).where(Ticket.flight_id == flight.id))
    if tickets:
        raise ResourceInUse("flight has tickets; set its status to cancelled instead")
    number = flight.flight_number
    db.delete(flight)
    log_audit(db, actor.id, "flight.delete", "flight", flight_id, {"flight_number": number})
    db.commit()
    logger.info("flight %s deleted by %s", number, actor.email)
