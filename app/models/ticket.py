from decimal import Decimal
from sqlalchemy import String, Boolean, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, timezone
from app.db.session import Base

# "completed" is never written: it is derived from the departure time when a ticket is read
TICKET_STATUSES = ("confirmed", "checked_in", "cancelled", "completed")
ACTIVE_STATUSES = ("confirmed", "checked_in")

class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    ticket_number: Mapped[str] = mapped_column(String(40), unique=True, index=True)
    booking_reference: Mapped[str] = mapped_column(String(20), unique=True, index=True)

    flight_id: Mapped[str] = mapped_column(String(36), ForeignKey("flights.id"), index=True)
    passenger_id: Mapped[str] = mapped_column(String(36), ForeignKey("passengers.id"), index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)  # booker

    seat_number: Mapped[str] = mapped_column(String(5))
    seat_class: Mapped[str] = mapped_column(String(20), default="economy")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    status: Mapped[str] = mapped_column(String(20), default="confirmed")  # confirmed, checked_in, cancelled
    checked_in: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    flight = relationship("Flight")
    passenger = relationship("Passenger")
