import uuid
from datetime import timedelta
from decimal import Decimal

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError

from app.db.session import SessionLocal
from app.core.clock import utcnow
from app.core.security import hash_password
from app.models.user import User
from app.models.flight import Flight
from app.models.ticket import Ticket
from app.services.seat_inventory import CabinSection
from app.services.flight_service import create_flight
from app.services.booking_service import create_booking

# 3 business rows (A/C/D/F), then 25 economy rows
SEED_LAYOUT = (
    CabinSection(3, "business", tuple("ACDF"), Decimal("2000.00")),
    CabinSection(25, "economy", tuple("ABCDEF"), Decimal("0.00")),
)

FLIGHTS = [
    # (number, airline, aircraft, origin, destination, days out, hour, minutes, duration, base price, gate)
    ("AI342", "Air India", "Boeing 737-800", "Chennai (MAA)", "Mumbai (BOM)", 1, 6, 30, 135, "5500.00", "A12"),
    ("6E723", "IndiGo", "Airbus A320neo", "Chennai (MAA)", "Delhi (DEL)", 1, 9, 15, 165, "6200.00", "B3"),
    ("SG134", "SpiceJet", "Boeing 737 MAX", "Chennai (MAA)", "Bangalore (BLR)", 2, 14, 20, 75, "3200.00", "C5"),
    ("AI445", "Air India", "Airbus A321", "Mumbai (BOM)", "Chennai (MAA)", 2, 16, 45, 150, "5800.00", "A8"),
    ("6E456", "IndiGo", "Airbus A320", "Delhi (DEL)", "Chennai (MAA)", 3, 21, 30, 170, "6500.00", "D2"),
    ("UK821", "Vistara", "Airbus A320neo", "Bangalore (BLR)", "Chennai (MAA)", 4, 7, 45, 70, "4500.00", "B7"),
    ("AI563", "Air India", "Boeing 787-8", "Chennai (MAA)", "Kolkata (CCU)", 5, 11, 0, 140, "7200.00", "A4"),
]


def ensure_user(db: Session, email: str, password: str, role: str, first: str, last: str, phone: str) -> User:
    u = db.query(User).filter(User.email == email).first()
    if u:
        return u
    u = User(
        id=str(uuid.uuid4()),
        email=email,
        first_name=first,
        last_name=last,
        phone=phone,
        role=role,
        password_hash=hash_password(password),
    )
    db.add(u)
    db.commit()
    return u


def ensure_flights(db: Session, actor: User) -> list[Flight]:
    today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    out = []
    for number, airline, aircraft, origin, dest, days, hour, minute, duration, price, gate in FLIGHTS:
        existing = db.query(Flight).filter(Flight.flight_number == number).first()
        if existing:
            out.append(existing)
            continue
        departure = today + timedelta(days=days, hours=hour, minutes=minute)
        out.append(create_flight(db, {
            "flight_number": number,
            "airline": airline,
            "aircraft": aircraft,
            "origin": origin,
            "destination": dest,
            "departure_time": departure,
            "arrival_time": departure + timedelta(minutes=duration),
            "duration": duration,
            "base_price": Decimal(price),
            "gate": gate,
            "status": "scheduled",
        }, actor, layout=SEED_LAYOUT))
    return out


def run(db=None):
    if db is None:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM users LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            print("[seed] users table not found yet. Skipping seeding (run alembic upgrade head).")
            return

        priya = ensure_user(db, "priya.krishnan@gmail.com", "password123", "customer", "Priya", "Krishnan", "+91 98765 43210")
        ensure_user(db, "arjun.raman@yahoo.com", "password123", "customer", "Arjun", "Raman", "+91 94567 89012")
        staff = ensure_user(db, "lakshmi.employee@airways.com", "admin123", "employee", "Lakshmi", "Sharma", "+91 91234 56789")
        ensure_user(db, "vijay.employee@airways.com", "admin123", "employee", "Vijay", "Kumar", "+91 98765 12345")

        flights = ensure_flights(db, staff)
        print(f"[seed] {len(flights)} flights ready")

        if not db.query(Ticket).first():
            result = create_booking(
                db,
                flight_id=flights[-1].id,
                booker=priya,
                passenger_data={
                    "first_name": "Priya",
                    "last_name": "Krishnan",
                    "email": "priya.krishnan@gmail.com",
                    "phone": "+91 98765 43210",
                    "nationality": "Indian",
                },
                seat_number="12A",
                payment_method="card",
            )
            print(f"[seed] sample booking {result.booking_reference} ({result.ticket.ticket_number})")
    finally:
        db.close()


if __name__ == "__main__":
    run()
