from typing import Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["customer", "employee"]


class SignupRequest(BaseModel):
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    password: str = Field(min_length=8)
    confirmPassword: str
    role: Role = "customer"


class LoginRequest(BaseModel):
    email: str
    password: str
    role: Role = "customer"


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserOut(BaseModel):
    id: str
    email: str
    firstName: str
    lastName: str
    phone: Optional[str] = None
    role: str
