import logging
import uuid

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ResourceInUse, ValidationError
from app.models.passenger import Passenger
from app.models.ticket import Ticket
from app.models.user import User
from app.services.audit_service import log_audit

logger = logging.getLogger(__name__)

FIELDS = ("first_name", "last_name", "email", "phone", "date_of_birth", "nationality", "passport_number")
REQUIRED = ("first_name", "last_name", "email")


def _clean(data: dict) -> dict:
    out = {}
    for key in FIELDS:
        if key not in data:
            continue
        value = data[key]
        if isinstance(value, str):
            value = value.strip()
            if key not in REQUIRED and value == "":
                value = None
        out[key] = value
    if "email" in out and out["email"]:
        out["email"] = out["email"].lower()
        if "@" not in out["email"]:
            raise ValidationError("email is not valid")
    return out


def build_passenger(data: dict, user_id: str | None = None) -> Passenger:
    """Validate traveller details and return an unsaved Passenger."""
    fields = _clean(data)
    for key in REQUIRED:
        if not fields.get(key):
            raise ValidationError(f"{key} is required")
    return Passenger(id=str(uuid.uuid4()), user_id=user_id, **fields)


def list_passengers(db: Session, search: str | None = None) -> list[Passenger]:
    stmt = select(Passenger)
    if search:
        term = search.strip().lower()
        stmt = stmt.where(or_(
            func.lower(Passenger.first_name).contains(term, autoescape=True),
            func.lower(Passenger.last_name).contains(term, autoescape=True),
        )).order_by(Passenger.first_name.asc())
    else:
        stmt = stmt.order_by(Passenger.created_at.desc())
    return list(db.scalars(stmt))


def get_passenger(db: Session, passenger_id: str) -> Passenger:
    p = db.get(Passenger, passenger_id)
    if not p:
        raise NotFound("passenger not found")
    return p


def create_passenger(db: Session, data: dict, actor: User, user_id: str | None = None) -> Passenger:
    if user_id and not db.get(User, user_id):
        raise ValidationError("userId does not match an account")
    p = build_passenger(data, user_id=user_id)
    db.add(p)
    log_audit(db, actor.id, "passenger.create", "passenger", p.id, {"name": p.full_name})
    db.commit()
    return p


def update_passenger(db: Session, passenger_id: str, changes: dict, actor: User) -> Passenger:
    p = get_passenger(db, passenger_id)
    fields = _clean(changes)
    for key in REQUIRED:
        if key in fields and not fields[key]:
            raise ValidationError(f"{key} cannot be empty")
    for key, value in fields.items():
        setattr(p, key, value)
    log_audit(db, actor.id, "passenger.update", "passenger", p.id, {"fields": sorted(fields)})
    db.commit()
    return p


def delete_passenger(db: Session, passenger_id: str, actor: User) -> None:
    p = get_passenger(db, passenger_id)
    in_use = db.scalar(select(func.count()).select_from(Ticket).where(Ticket.passenger_id == p.id))
    if in_use:
        raise ResourceInUse("passenger has tickets and cannot be deleted")
    db.delete(p)
    log_audit(db, actor.id, "passenger.delete", "passenger", passenger_id, {"name": p.full_name})
    db.commit()
    logger.info("passenger %s deleted by %s", passenger_id, actor.email)
