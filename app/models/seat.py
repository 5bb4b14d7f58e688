from decimal import Decimal
from sqlalchemy import String, Boolean, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base

SEAT_CLASSES = ("economy", "premium", "business", "first")

class Seat(Base):
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint("flight_id", "seat_number", name="uq_seats_flight_seat_number"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    flight_id: Mapped[str] = mapped_column(String(36), ForeignKey("flights.id", ondelete="CASCADE"), index=True)
    seat_number: Mapped[str] = mapped_column(String(5))  # row + column letter, e.g. 12A
    seat_class: Mapped[str] = mapped_column(String(20))
    # flat class upgrade fee over the flight's base price
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)

    flight = relationship("Flight", back_populates="seats")

    @property
    def row(self) -> int:
        return int(self.seat_number.rstrip("ABCDEFGHIJKLMNOPQRSTUVWXYZ"))

    @property
    def column(self) -> str:
        return self.seat_number[len(str(self.row)):]
