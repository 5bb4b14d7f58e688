from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.errors import BookingError, http_error
from app.schemas.flight import FlightOut, SeatOut
from app.services import flight_service, seat_inventory

router = APIRouter(tags=["flights"])


@router.get("/flights", response_model=list[FlightOut])
def list_flights(db: Session = Depends(get_db)):
    """Flights that have not departed yet, earliest first."""
    return [FlightOut.of(f) for f in flight_service.list_upcoming_flights(db)]


@router.get("/flights/search", response_model=list[FlightOut])
def search_flights(origin: str = "", destination: str = "", date: Optional[date] = None,
                   db: Session = Depends(get_db)):
    if not origin.strip() or not destination.strip():
        raise HTTPException(status_code=400, detail="origin and destination are required")
    return [FlightOut.of(f) for f in flight_service.search_flights(db, origin, destination, date)]


@router.get("/flights/{flight_id}", response_model=FlightOut)
def get_flight(flight_id: str, db: Session = Depends(get_db)):
    try:
        return FlightOut.of(flight_service.get_flight(db, flight_id))
    except BookingError as e:
        raise http_error(e)


@router.get("/flights/{flight_id}/seats", response_model=list[SeatOut])
def get_seat_map(flight_id: str, db: Session = Depends(get_db)):
    try:
        return [SeatOut.of(s) for s in seat_inventory.list_seats(db, flight_id)]
    except BookingError as e:
        raise http_error(e)
