from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from app.core.clock import as_utc
from app.models.passenger import Passenger

_NAMES = {
    "firstName": "first_name",
    "lastName": "last_name",
    "dateOfBirth": "date_of_birth",
    "passportNumber": "passport_number",
}


class PassengerIn(BaseModel):
    firstName: str
    lastName: str
    email: str  # plain str to allow .local and other dev domains
    phone: Optional[str] = None
    dateOfBirth: Optional[date] = None
    nationality: Optional[str] = None
    passportNumber: Optional[str] = None

    def to_fields(self) -> dict:
        return {_NAMES.get(k, k): v for k, v in self.model_dump().items()}


class PassengerCreate(PassengerIn):
    userId: Optional[str] = None

    def to_fields(self) -> dict:
        fields = super().to_fields()
        fields.pop("userId", None)
        return fields


class PassengerPatch(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    dateOfBirth: Optional[date] = None
    nationality: Optional[str] = None
    passportNumber: Optional[str] = None

    def to_fields(self) -> dict:
        return {_NAMES.get(k, k): v for k, v in self.model_dump(exclude_unset=True).items()}


class PassengerOut(BaseModel):
    id: str
    userId: Optional[str] = None
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    dateOfBirth: Optional[date] = None
    nationality: Optional[str] = None
    passportNumber: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def of(cls, p: Passenger) -> "PassengerOut":
        return cls(
            id=p.id,
            userId=p.user_id,
            firstName=p.first_name,
            lastName=p.last_name,
            email=p.email,
            phone=p.phone,
            dateOfBirth=p.date_of_birth,
            nationality=p.nationality,
            passportNumber=p.passport_number,
            createdAt=as_utc(p.created_at) if p.created_at else None,
        )
