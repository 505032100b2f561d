from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..errors import Conflict, Unauthorized, translate_integrity_error
from ..models.models import User
from ..schemas.auth import SignupRequest, LoginRequest, TokenResponse, MeResponse
from .security import (
    get_password_hash,
    verify_password,
    create_session_token,
    get_current_user,
)


router = APIRouter(prefix="/auth", tags=["auth"])
logger = structlog.get_logger(__name__)


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.jwt_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, response: Response, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == req.email).first():
        raise Conflict("Email already registered")
    user = User(email=req.email, password_hash=get_password_hash(req.password), nombre=req.nombre, is_active=True)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise translate_integrity_error(e, "Email already registered")
    db.refresh(user)
    logger.info("user_signed_up", user_id=str(user.id))
    token = create_session_token(str(user.id))
    _set_session_cookie(response, token)
    return TokenResponse(access_token=token)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == req.email).first()
    if not user or not user.is_active or not verify_password(req.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    token = create_session_token(str(user.id))
    _set_session_cookie(response, token)
    return TokenResponse(access_token=token)


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Logged out"}


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)):
    return user
