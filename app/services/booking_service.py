import uuid
import logging
from dataclasses import dataclass
from sqlalchemy.orm import Session
from app.core.clock import as_utc, utcnow
from app.core.errors import NotFound, ValidationError
from app.models.user import User
from app.models.flight import Flight
from app.models.passenger import Passenger
from app.models.ticket import Ticket
from app.models.transaction import Transaction
from app.services import seat_inventory
from app.services.fare_service import compute_total
from app.services.passenger_service import build_passenger
from app.services.reference_service import (
    allocate,
    make_booking_reference,
    make_ticket_number,
    make_transaction_number,
)

logger = logging.getLogger(__name__)


@dataclass
class BookingResult:
    ticket: Ticket
    passenger: Passenger
    transaction: Transaction
    booking_reference: str


def create_booking(db: Session, flight_id: str, booker: User, passenger_data: dict,
                   seat_number: str, payment_method: str) -> BookingResult:
    """Reserve a seat and write passenger, ticket and payment as one transaction.

    Either every row is committed (and the seat is sold) or nothing is: any
    failure rolls the whole unit back, including the seat flip.
    """
    seat_number = (seat_number or "").strip().upper()
    payment_method = (payment_method or "").strip()
    if not seat_number:
        raise ValidationError("seat number is required")
    if not payment_method:
        raise ValidationError("payment method is required")

    try:
        flight = db.get(Flight, flight_id)
        if not flight:
            raise NotFound("flight not found")
        if flight.status == "cancelled":
            raise ValidationError("flight is cancelled")
        if as_utc(flight.departure_time) <= utcnow():
            raise ValidationError("flight has already departed")

        passenger = build_passenger(passenger_data, user_id=booker.id)

        # Row lock + conditional flip: at most one concurrent booking wins the seat
        seat = seat_inventory.reserve_seat(db, flight.id, seat_number)
        price = compute_total(flight, seat)

        booking_ref = allocate(db, Ticket.booking_reference, make_booking_reference)
        ticket = Ticket(
            id=str(uuid.uuid4()),
            ticket_number=allocate(db, Ticket.ticket_number, make_ticket_number),
            booking_reference=booking_ref,
            flight_id=flight.id,
            passenger_id=passenger.id,
            user_id=booker.id,
            seat_number=seat.seat_number,
            seat_class=seat.seat_class,
            price=price,
            status="confirmed",
            checked_in=False,
        )
        # Payment is settled synchronously; there is no gateway round-trip.
        transaction = Transaction(
            id=str(uuid.uuid4()),
            transaction_number=allocate(db, Transaction.transaction_number, make_transaction_number),
            user_id=booker.id,
            ticket_id=ticket.id,
            booking_reference=booking_ref,
            amount=price,
            payment_method=payment_method,
            status="completed",
        )
        db.add(passenger)
        db.flush()
        db.add(ticket)
        db.flush()
        db.add(transaction)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("booking %s: ticket %s seat %s on %s for %s",
                booking_ref, ticket.ticket_number, ticket.seat_number, flight.flight_number, booker.email)
    return BookingResult(ticket=ticket, passenger=passenger, transaction=transaction, booking_reference=booking_ref)
