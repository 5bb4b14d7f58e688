from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.core.clock import as_utc
from app.models.transaction import Transaction
from app.services.fare_service import format_money


class TransactionOut(BaseModel):
    id: str
    transactionNumber: str
    userId: str
    ticketId: Optional[str] = None
    bookingReference: str
    amount: str
    paymentMethod: str
    status: str
    createdAt: Optional[datetime] = None

    @classmethod
    def of(cls, t: Transaction) -> "TransactionOut":
        return cls(
            id=t.id,
            transactionNumber=t.transaction_number,
            userId=t.user_id,
            ticketId=t.ticket_id,
            bookingReference=t.booking_reference,
            amount=format_money(t.amount),
            paymentMethod=t.payment_method,
            status=t.status,
            createdAt=as_utc(t.created_at) if t.created_at else None,
        )
