from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.deps import get_current_user
from app.core.errors import BookingError, http_error
from app.models.user import User
from app.schemas.ticket import ChangeSeatIn, TicketActionOut, TicketOut
from app.services import ticket_service
from app.services.eticket_service import render_ticket_pdf_bytes
from app.services.fare_service import format_money

router = APIRouter(tags=["tickets"])


@router.get("/tickets", response_model=list[TicketOut])
def my_tickets(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [TicketOut.of(t) for t in ticket_service.list_tickets_for_user(db, user.id)]


@router.post("/tickets/{ticket_id}/checkin", response_model=TicketActionOut)
def check_in(ticket_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        ticket = ticket_service.check_in(db, ticket_id, user)
    except BookingError as e:
        raise http_error(e)
    return TicketActionOut(ticket=TicketOut.of(ticket), message="Checked in successfully")


@router.post("/tickets/{ticket_id}/cancel", response_model=TicketActionOut)
def cancel(ticket_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        ticket = ticket_service.cancel(db, ticket_id, user)
    except BookingError as e:
        raise http_error(e)
    return TicketActionOut(ticket=TicketOut.of(ticket), message="Ticket cancelled successfully")


@router.post("/tickets/{ticket_id}/change-seat", response_model=TicketActionOut)
def change_seat(ticket_id: str, body: ChangeSeatIn, db: Session = Depends(get_db),
                user: User = Depends(get_current_user)):
    try:
        change = ticket_service.change_seat(db, ticket_id, user, body.seatNumber)
    except BookingError as e:
        raise http_error(e)
    return TicketActionOut(
        ticket=TicketOut.of(change.ticket),
        message="Seat changed successfully",
        previousSeat=change.previous_seat,
        fareDifference=format_money(change.fare_difference),
    )


@router.get("/tickets/{ticket_id}/pdf")
def download_ticket(ticket_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        ticket = ticket_service.get_ticket_for(db, ticket_id, user)
    except BookingError as e:
        raise http_error(e)
    return Response(
        content=render_ticket_pdf_bytes(ticket),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{ticket.ticket_number}.pdf"'},
    )
