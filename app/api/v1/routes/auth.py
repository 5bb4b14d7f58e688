import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.auth import LoginRequest, SignupRequest, TokenPair, UserOut
from app.models.user import User
from app.core.security import hash_password, verify_password, create_access_token, create_refresh_token, decode_token
from app.api.deps import get_current_user

router = APIRouter(tags=["auth"])


def _user_out(u: User) -> UserOut:
    return UserOut(id=u.id, email=u.email, firstName=u.first_name, lastName=u.last_name, phone=u.phone, role=u.role)


def _tokens(u: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(u.id, role=u.role),
        refresh_token=create_refresh_token(u.id),
    )


@router.post("/auth/signup")
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    if body.password != body.confirmPassword:
        raise HTTPException(status_code=400, detail="Passwords don't match")
    email = body.email.strip().lower()
    if not email or "@" not in email:
        raise HTTPException(status_code=400, detail="email is not valid")
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="User already exists")
    u = User(
        id=str(uuid.uuid4()),
        email=email,
        first_name=body.firstName.strip(),
        last_name=body.lastName.strip(),
        phone=body.phone or None,
        role=body.role,
        password_hash=hash_password(body.password),
    )
    db.add(u)
    db.commit()
    return {"user": _user_out(u), **_tokens(u).model_dump()}


@router.post("/auth/login", response_model=TokenPair)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or user.role != body.role:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _tokens(user)


@router.post("/auth/refresh", response_model=TokenPair)
def refresh(refresh_token: str, db: Session = Depends(get_db)):
    try:
        payload = decode_token(refresh_token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    if payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    user = db.get(User, payload.get("sub"))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return _tokens(user)


@router.get("/auth/me", response_model=UserOut)
def me(me: User = Depends(get_current_user)):
    """Return current user info including role."""
    return _user_out(me)
