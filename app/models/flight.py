from decimal import Decimal
from sqlalchemy import String, Integer, DateTime, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, timezone
from app.db.session import Base

FLIGHT_STATUSES = ("scheduled", "boarding", "departed", "arrived", "cancelled", "delayed")

class Flight(Base):
    __tablename__ = "flights"
    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="ck_flights_available_non_negative"),
        CheckConstraint("available_seats <= total_seats", name="ck_flights_available_le_total"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    flight_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    airline: Mapped[str] = mapped_column(String(120))
    aircraft: Mapped[str] = mapped_column(String(120))

    # display strings, e.g. "Chennai (MAA)"
    origin: Mapped[str] = mapped_column(String(120), index=True)
    destination: Mapped[str] = mapped_column(String(120), index=True)

    departure_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    arrival_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    duration: Mapped[int] = mapped_column(Integer)  # minutes

    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    total_seats: Mapped[int] = mapped_column(Integer, default=0)
    available_seats: Mapped[int] = mapped_column(Integer, default=0)  # == count of available seats

    gate: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="scheduled")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    seats = relationship("Seat", back_populates="flight", cascade="all, delete-orphan")
