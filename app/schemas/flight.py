from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.core.clock import as_utc
from app.models.flight import Flight
from app.models.seat import Seat
from app.services.fare_service import format_money
from app.services.seat_inventory import CabinSection

SeatClass = Literal["economy", "premium", "business", "first"]


class CabinSectionIn(BaseModel):
    rowCount: int = Field(gt=0)
    seatClass: SeatClass
    columns: str = "ABCDEF"  # column letters, e.g. "ACDF"
    priceDelta: Decimal = Decimal("0.00")

    def to_section(self) -> CabinSection:
        return CabinSection(
            row_count=self.rowCount,
            seat_class=self.seatClass,
            columns=tuple(self.columns.strip().upper()),
            price_delta=self.priceDelta,
        )


class FlightIn(BaseModel):
    flightNumber: str
    airline: str
    aircraft: str
    origin: str
    destination: str
    departureTime: datetime
    arrivalTime: datetime
    duration: Optional[int] = None  # minutes; derived from the schedule when omitted
    basePrice: Decimal
    totalSeats: Optional[int] = None  # must match the layout when given
    gate: Optional[str] = None
    status: str = "scheduled"
    seatLayout: Optional[List[CabinSectionIn]] = None

    def to_fields(self) -> dict:
        return {
            "flight_number": self.flightNumber,
            "airline": self.airline,
            "aircraft": self.aircraft,
            "origin": self.origin,
            "destination": self.destination,
            "departure_time": self.departureTime,
            "arrival_time": self.arrivalTime,
            "duration": self.duration,
            "base_price": self.basePrice,
            "total_seats": self.totalSeats,
            "gate": self.gate,
            "status": self.status,
        }


class FlightPatch(BaseModel):
    airline: Optional[str] = None
    aircraft: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    departureTime: Optional[datetime] = None
    arrivalTime: Optional[datetime] = None
    duration: Optional[int] = None
    basePrice: Optional[Decimal] = None
    gate: Optional[str] = None
    status: Optional[str] = None
    flightNumber: Optional[str] = None
    totalSeats: Optional[int] = None
    availableSeats: Optional[int] = None

    def to_fields(self) -> dict:
        names = {
            "flightNumber": "flight_number",
            "departureTime": "departure_time",
            "arrivalTime": "arrival_time",
            "basePrice": "base_price",
            "totalSeats": "total_seats",
            "availableSeats": "available_seats",
        }
        return {names.get(k, k): v for k, v in self.model_dump(exclude_unset=True).items()}


class FlightOut(BaseModel):
    id: str
    flightNumber: str
    airline: str
    aircraft: str
    origin: str
    destination: str
    departureTime: datetime
    arrivalTime: datetime
    duration: int
    basePrice: str
    totalSeats: int
    availableSeats: int
    gate: Optional[str] = None
    status: str
    createdAt: Optional[datetime] = None

    @classmethod
    def of(cls, f: Flight) -> "FlightOut":
        return cls(
            id=f.id,
            flightNumber=f.flight_number,
            airline=f.airline,
            aircraft=f.aircraft,
            origin=f.origin,
            destination=f.destination,
            departureTime=as_utc(f.departure_time),
            arrivalTime=as_utc(f.arrival_time),
            duration=f.duration,
            basePrice=format_money(f.base_price),
            totalSeats=f.total_seats,
            availableSeats=f.available_seats,
            gate=f.gate,
            status=f.status,
            createdAt=as_utc(f.created_at) if f.created_at else None,
        )


class SeatOut(BaseModel):
    id: str
    flightId: str
    seatNumber: str
    seatClass: str
    price: str
    isAvailable: bool

    @classmethod
    def of(cls, s: Seat) -> "SeatOut":
        return cls(
            id=s.id,
            flightId=s.flight_id,
            seatNumber=s.seat_number,
            seatClass=s.seat_class,
            price=format_money(s.price),
            isAvailable=bool(s.is_available),
        )
