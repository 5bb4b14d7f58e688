"""Ticket lifecycle: check-in, cancellation and seat changes.

    confirmed --check_in--> checked_in
    confirmed | checked_in --cancel--> cancelled
    confirmed | checked_in --(departure passes)--> completed

`completed` is never stored; `effective_status` derives it when a ticket is
read. Cancelled and completed tickets accept no further changes.

Every mutation commits once. Status moves are conditional UPDATEs on the
current status, so two racing requests cannot both apply the same transition.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload

from app.core.clock import as_utc, utcnow
from app.core.config import settings
from app.core.errors import (
    AlreadyCancelled,
    AlreadyCheckedIn,
    CheckInWindowClosed,
    FlightDeparted,
    Forbidden,
    NotFound,
    SeatUnavailable,
    ValidationError,
)
from app.models.ticket import Ticket, ACTIVE_STATUSES
from app.models.transaction import Transaction
from app.models.user import User
from app.services import seat_inventory
from app.services.audit_service import log_audit
from app.services.fare_service import compute_total, to_money

logger = logging.getLogger(__name__)


@dataclass
class SeatChange:
    ticket: Ticket
    previous_seat: str
    # what the new seat would cost minus what was paid; informational only
    fare_difference: Decimal


def effective_status(ticket: Ticket, now: datetime | None = None) -> str:
    if ticket.status in ACTIVE_STATUSES and has_departed(ticket, now):
        return "completed"
    return ticket.status


def has_departed(ticket: Ticket, now: datetime | None = None) -> bool:
    return as_utc(ticket.flight.departure_time) < (now or utcnow())


def _with_related(stmt):
    return stmt.options(joinedload(Ticket.flight), joinedload(Ticket.passenger))


def get_ticket(db: Session, ticket_id: str, *, for_update: bool = False) -> Ticket:
    stmt = select(Ticket).where(Ticket.id == ticket_id)
    if for_update:
        stmt = stmt.with_for_update()
    ticket = db.execute(stmt).scalar_one_or_none()
    if not ticket:
        raise NotFound("ticket not found")
    return ticket


def get_ticket_for(db: Session, ticket_id: str, user: User) -> Ticket:
    """Ticket with flight and passenger, visible to its booker and to employees."""
    ticket = db.execute(_with_related(select(Ticket).where(Ticket.id == ticket_id))).unique().scalar_one_or_none()
    if not ticket:
        raise NotFound("ticket not found")
    if ticket.user_id != user.id and not user.is_employee:
        raise Forbidden("access denied")
    return ticket


def list_tickets_for_user(db: Session, user_id: str) -> list[Ticket]:
    stmt = _with_related(select(Ticket).where(Ticket.user_id == user_id)).order_by(Ticket.created_at.desc())
    return list(db.execute(stmt).unique().scalars())


def list_all_tickets(db: Session) -> list[Ticket]:
    stmt = _with_related(select(Ticket)).order_by(Ticket.created_at.desc())
    return list(db.execute(stmt).unique().scalars())


def _move_status(db: Session, ticket: Ticket, from_statuses, **values) -> bool:
    result = db.execute(
        update(Ticket)
        .where(Ticket.id == ticket.id, Ticket.status.in_(from_statuses))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _finish(db: Session, ticket: Ticket) -> Ticket:
    db.commit()
    db.refresh(ticket)
    return ticket


def check_in(db: Session, ticket_id: str, user: User, now: datetime | None = None) -> Ticket:
    now = now or utcnow()
    try:
        ticket = get_ticket(db, ticket_id, for_update=True)
        if ticket.user_id != user.id:
            raise Forbidden("only the booking user can check in")
        if ticket.status == "cancelled":
            raise AlreadyCancelled("ticket is cancelled")
        if ticket.checked_in or ticket.status == "checked_in":
            raise AlreadyCheckedIn("already checked in")

        remaining = as_utc(ticket.flight.departure_time) - now
        if remaining < timedelta(0):
            raise FlightDeparted("flight has already departed")
        if remaining > timedelta(hours=settings.CHECK_IN_WINDOW_HOURS):
            raise CheckInWindowClosed(f"check-in opens {settings.CHECK_IN_WINDOW_HOURS} hours before departure")

        if not _move_status(db, ticket, ("confirmed",), status="checked_in", checked_in=True):
            db.rollback()
            db.refresh(ticket)
            if ticket.status == "cancelled":
                raise AlreadyCancelled("ticket is cancelled")
            raise AlreadyCheckedIn("already checked in")
        ticket = _finish(db, ticket)
    except Exception:
        db.rollback()
        raise
    logger.info("ticket %s checked in", ticket.ticket_number)
    return ticket


def cancel(db: Session, ticket_id: str, user: User, now: datetime | None = None) -> Ticket:
    """Cancel, free the seat and refund the payment in one transaction."""
    now = now or utcnow()
    try:
        ticket = get_ticket(db, ticket_id, for_update=True)
        if ticket.user_id != user.id and not user.is_employee:
            raise Forbidden("access denied")
        if ticket.status == "cancelled":
            raise AlreadyCancelled("ticket already cancelled")
        if has_departed(ticket, now):
            raise FlightDeparted("cannot cancel a ticket for a departed flight")

        if not _move_status(db, ticket, ACTIVE_STATUSES, status="cancelled"):
            raise AlreadyCancelled("ticket already cancelled")
        seat_inventory.release_seat(db, ticket.flight_id, ticket.seat_number)
        db.execute(
            update(Transaction)
            .where(Transaction.ticket_id == ticket.id, Transaction.status == "completed")
            .values(status="refunded")
            .execution_options(synchronize_session=False)
        )
        if ticket.user_id != user.id:
            log_audit(db, user.id, "ticket.cancel", "ticket", ticket.id, {"ticket_number": ticket.ticket_number})
        ticket = _finish(db, ticket)
    except Exception:
        db.rollback()
        raise
    logger.info("ticket %s cancelled, seat %s released", ticket.ticket_number, ticket.seat_number)
    return ticket


def change_seat(db: Session, ticket_id: str, user: User, new_seat_number: str,
                now: datetime | None = None) -> SeatChange:
    """Move a ticket to another seat: sell the new one, free the old one.

    The fare is left as paid; `fare_difference` reports what repricing would be.
    """
    new_seat_number = (new_seat_number or "").strip().upper()
    if not new_seat_number:
        raise ValidationError("seat number is required")
    now = now or utcnow()
    try:
        ticket = get_ticket(db, ticket_id, for_update=True)
        if ticket.user_id != user.id:
            raise Forbidden("only the booking user can change seats")
        if ticket.status == "cancelled":
            raise AlreadyCancelled("ticket is cancelled")
        if has_departed(ticket, now):
            raise FlightDeparted("flight has already departed")
        old_seat_number = ticket.seat_number
        if new_seat_number == old_seat_number:
            raise ValidationError(f"ticket already holds seat {old_seat_number}")

        new_seat = seat_inventory.reserve_seat(db, ticket.flight_id, new_seat_number)
        moved = db.execute(
            update(Ticket)
            .where(
                Ticket.id == ticket.id,
                Ticket.status.in_(ACTIVE_STATUSES),
                Ticket.seat_number == old_seat_number,
            )
            .values(seat_number=new_seat.seat_number, seat_class=new_seat.seat_class)
            .execution_options(synchronize_session=False)
        )
        if moved.rowcount != 1:
            raise SeatUnavailable("ticket was changed by another request")
        seat_inventory.release_seat(db, ticket.flight_id, old_seat_number)

        fare_difference = compute_total(ticket.flight, new_seat) - to_money(ticket.price)
        ticket = _finish(db, ticket)
    except Exception:
        db.rollback()
        raise

    if fare_difference:
        logger.warning("ticket %s moved %s -> %s (%s) without repricing, difference %s",
                       ticket.ticket_number, old_seat_number, ticket.seat_number, ticket.seat_class, fare_difference)
    else:
        logger.info("ticket %s moved %s -> %s", ticket.ticket_number, old_seat_number, ticket.seat_number)
    return SeatChange(ticket=ticket, previous_seat=old_seat_number, fare_difference=fare_difference)
