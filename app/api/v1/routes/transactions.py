from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.deps import get_current_user
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.transaction import TransactionOut

router = APIRouter(tags=["transactions"])


@router.get("/transactions", response_model=list[TransactionOut])
def my_transactions(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    rows = db.scalars(
        select(Transaction).where(Transaction.user_id == user.id).order_by(Transaction.created_at.desc())
    ).all()
    return [TransactionOut.of(t) for t in rows]
