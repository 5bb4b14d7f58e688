from __future__ import annotations

import io

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from app.core.clock import as_utc, utcnow
from app.core.config import settings
from app.models.ticket import Ticket
from app.services.fare_service import format_money
from app.services.ticket_service import effective_status


def render_ticket_pdf_bytes(ticket: Ticket) -> bytes:
    """Return an A4 e-ticket PDF for a ticket with its flight and passenger loaded."""
    flight = ticket.flight
    passenger = ticket.passenger
    departure = as_utc(flight.departure_time)
    arrival = as_utc(flight.arrival_time)

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    _, h = A4

    # Header
    c.setFont("Helvetica-Bold", 18)
    c.drawString(40, h - 60, "MacAirlines E-Ticket")
    c.setFont("Helvetica", 11)
    c.drawString(40, h - 80, f"Ticket No: {ticket.ticket_number}")
    c.drawString(40, h - 96, f"Booking Reference: {ticket.booking_reference}")

    # Passenger block
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, h - 130, "Passenger")
    c.setFont("Helvetica", 11)
    c.drawString(40, h - 148, passenger.full_name if passenger else "(Not provided)")

    # Flight block
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, h - 185, "Flight")
    c.setFont("Helvetica", 11)
    c.drawString(40, h - 203, f"{flight.airline} {flight.flight_number} ({flight.aircraft})")
    c.drawString(40, h - 219, f"From: {flight.origin}")
    c.drawString(40, h - 235, f"To:   {flight.destination}")
    c.drawString(40, h - 251, f"Departs: {departure:%Y-%m-%d %H:%M} UTC")
    c.drawString(40, h - 267, f"Arrives: {arrival:%Y-%m-%d %H:%M} UTC")
    if flight.gate:
        c.drawString(40, h - 283, f"Gate: {flight.gate}")

    # Seat + fare
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, h - 320, "Seat")
    c.setFont("Helvetica", 11)
    c.drawString(40, h - 338, f"{ticket.seat_number} ({ticket.seat_class.title()})")
    c.drawString(40, h - 354, f"Fare: {format_money(ticket.price)}")
    c.drawString(40, h - 370, f"Status: {effective_status(ticket).replace('_', ' ').upper()}")

    # Footer
    c.setFont("Helvetica", 9)
    c.drawString(40, 40, f"Online check-in opens {settings.CHECK_IN_WINDOW_HOURS} hours before departure.")
    c.drawString(40, 26, f"Generated: {utcnow().isoformat()}")

    c.showPage()
    c.save()
    return buf.getvalue()
