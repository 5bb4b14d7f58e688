from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.deps import require_employee
from app.core.errors import BookingError, http_error
from app.models.user import User
from app.schemas.flight import FlightIn, FlightOut, FlightPatch
from app.schemas.passenger import PassengerCreate, PassengerOut, PassengerPatch
from app.schemas.ticket import TicketOut
from app.services import flight_service, passenger_service, seat_inventory
from app.services.ticket_service import list_all_tickets

router = APIRouter(prefix="/employee", tags=["employee"])


@router.post("/flights", response_model=FlightOut)
def create_flight(body: FlightIn, db: Session = Depends(get_db), user: User = Depends(require_employee)):
    layout = tuple(s.to_section() for s in body.seatLayout) if body.seatLayout else seat_inventory.DEFAULT_LAYOUT
    try:
        return FlightOut.of(flight_service.create_flight(db, body.to_fields(), user, layout=layout))
    except BookingError as e:
        raise http_error(e)


@router.api_route("/flights/{flight_id}", methods=["PUT", "PATCH"], response_model=FlightOut)
def update_flight(flight_id: str, body: FlightPatch, db: Session = Depends(get_db),
                  user: User = Depends(require_employee)):
    try:
        return FlightOut.of(flight_service.update_flight(db, flight_id, body.to_fields(), user))
    except BookingError as e:
        raise http_error(e)


@router.delete("/flights/{flight_id}")
def delete_flight(flight_id: str, db: Session = Depends(get_db), user: User = Depends(require_employee)):
    try:
        flight_service.delete_flight(db, flight_id, user)
    except BookingError as e:
        raise http_error(e)
    return {"ok": True}


@router.get("/passengers", response_model=list[PassengerOut])
def list_passengers(search: Optional[str] = None, db: Session = Depends(get_db),
                    user: User = Depends(require_employee)):
    return [PassengerOut.of(p) for p in passenger_service.list_passengers(db, search)]


@router.post("/passengers", response_model=PassengerOut)
def create_passenger(body: PassengerCreate, db: Session = Depends(get_db), user: User = Depends(require_employee)):
    try:
        p = passenger_service.create_passenger(db, body.to_fields(), user, user_id=body.userId)
    except BookingError as e:
        raise http_error(e)
    return PassengerOut.of(p)


@router.put("/passengers/{passenger_id}", response_model=PassengerOut)
def update_passenger(passenger_id: str, body: PassengerPatch, db: Session = Depends(get_db),
                     user: User = Depends(require_employee)):
    try:
        return PassengerOut.of(passenger_service.update_passenger(db, passenger_id, body.to_fields(), user))
    except BookingError as e:
        raise http_error(e)


@router.delete("/passengers/{passenger_id}")
def delete_passenger(passenger_id: str, db: Session = Depends(get_db), user: User = Depends(require_employee)):
    try:
        passenger_service.delete_passenger(db, passenger_id, user)
    except BookingError as e:
        raise http_error(e)
    return {"ok": True}


@router.get("/tickets", response_model=list[TicketOut])
def all_tickets(db: Session = Depends(get_db), user: User = Depends(require_employee)):
    return [TicketOut.of(t) for t in list_all_tickets(db)]
