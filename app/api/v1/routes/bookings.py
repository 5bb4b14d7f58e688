from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.deps import get_current_user
from app.core.errors import BookingError, http_error
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingOut
from app.schemas.passenger import PassengerOut
from app.schemas.ticket import TicketOut
from app.schemas.transaction import TransactionOut
from app.services.booking_service import create_booking
from app.services.ticket_service import get_ticket_for

router = APIRouter(tags=["bookings"])


@router.post("/bookings", response_model=BookingOut)
def create(body: BookingCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        result = create_booking(
            db,
            flight_id=body.flightId,
            booker=user,
            passenger_data=body.passengerData.to_fields(),
            seat_number=body.seatNumber,
            payment_method=body.paymentMethod,
        )
    except BookingError as e:
        raise http_error(e)
    return BookingOut(
        ticket=TicketOut.of(result.ticket, related=False),
        passenger=PassengerOut.of(result.passenger),
        transaction=TransactionOut.of(result.transaction),
        bookingReference=result.booking_reference,
    )


@router.get("/bookings/{ticket_id}", response_model=TicketOut)
def get_booking(ticket_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        return TicketOut.of(get_ticket_for(db, ticket_id, user))
    except BookingError as e:
        raise http_error(e)
