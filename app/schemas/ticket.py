from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.core.clock import as_utc
from app.models.ticket import Ticket
from app.schemas.flight import FlightOut
from app.schemas.passenger import PassengerOut
from app.services.fare_service import format_money
from app.services.ticket_service import effective_status


class TicketOut(BaseModel):
    id: str
    ticketNumber: str
    flightId: str
    passengerId: str
    userId: str
    seatNumber: str
    seatClass: str
    bookingReference: str
    price: str
    status: str
    checkedIn: bool
    createdAt: Optional[datetime] = None
    flight: Optional[FlightOut] = None
    passenger: Optional[PassengerOut] = None

    @classmethod
    def of(cls, t: Ticket, related: bool = True) -> "TicketOut":
        return cls(
            id=t.id,
            ticketNumber=t.ticket_number,
            flightId=t.flight_id,
            passengerId=t.passenger_id,
            userId=t.user_id,
            seatNumber=t.seat_number,
            seatClass=t.seat_class,
            bookingReference=t.booking_reference,
            price=format_money(t.price),
            status=effective_status(t),
            checkedIn=bool(t.checked_in),
            createdAt=as_utc(t.created_at) if t.created_at else None,
            flight=FlightOut.of(t.flight) if related and t.flight else None,
            passenger=PassengerOut.of(t.passenger) if related and t.passenger else None,
        )


class ChangeSeatIn(BaseModel):
    seatNumber: str


class TicketActionOut(BaseModel):
    ticket: TicketOut
    message: str
    previousSeat: Optional[str] = None
    fareDifference: Optional[str] = None  # reported only, never charged or refunded
