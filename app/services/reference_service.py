import random
import string
import time

from sqlalchemy import select
from sqlalchemy.orm import Session

_ALPHANUM = string.ascii_uppercase + string.digits


def _stamp() -> str:
    return str(int(time.time() * 1000))


def _suffix(k: int) -> str:
    return "".join(random.choices(_ALPHANUM, k=k))


def make_ticket_number() -> str:
    return "TK-" + _stamp() + _suffix(5)


def make_booking_reference() -> str:
    return "BKG-" + _stamp()[-6:] + _suffix(3)


def make_transaction_number() -> str:
    return "TXN-" + _stamp() + _suffix(6)


def allocate(db: Session, column, factory, attempts: int = 10) -> str:
    """Draw identifiers from `factory` until one is not yet stored in `column`."""
    for _ in range(attempts):
        value = factory()
        taken = db.execute(select(column).where(column == value).limit(1)).first()
        if not taken:
            return value
    raise RuntimeError(f"could not allocate a unique {column.key}")
