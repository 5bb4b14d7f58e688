from pydantic import BaseModel

from app.schemas.passenger import PassengerIn, PassengerOut
from app.schemas.ticket import TicketOut
from app.schemas.transaction import TransactionOut


class BookingCreate(BaseModel):
    flightId: str
    passengerData: PassengerIn
    seatNumber: str
    paymentMethod: str = "card"


class BookingOut(BaseModel):
    ticket: TicketOut
    passenger: PassengerOut
    transaction: TransactionOut
    bookingReference: str
    message: str = "Booking created successfully"
