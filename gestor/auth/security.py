import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Coroutine, Optional

import jwt
from fastapi import Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..errors import Unauthorized
from ..models.models import User


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
http_bearer = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_session_token(user_id: str, ttl_seconds: Optional[int] = None) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl_seconds or settings.jwt_ttl_seconds)).timestamp()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Session expired")
    except jwt.InvalidTokenError:
        raise Unauthorized()


def _session_token(request: Request, creds: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    # Browser sessions travel in the cookie; API clients may send a bearer token instead
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if creds is not None:
        return creds.credentials
    return None


def _load_user(db: Session, token: Optional[str]) -> User:
    if not token:
        raise Unauthorized()
    payload = decode_token(token)
    try:
        user_uuid = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise Unauthorized()
    user = db.query(User).filter(User.id == user_uuid).first()
    if user is None or not user.is_active:
        raise Unauthorized()
    return user


def get_current_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    db: Session = Depends(get_db),
) -> User:
    return _load_user(db, _session_token(request, creds))


def get_owner_id(user: User = Depends(get_current_user)) -> uuid.UUID:
    """Identity every ownership-scoped query is filtered by."""
    return user.id


def _check_identity(request: Request, creds: Optional[HTTPAuthorizationCredentials]) -> None:
    provider = request.app.dependency_overrides.get(get_db, get_db)
    sessions = provider()
    db = next(sessions)
    try:
        _load_user(db, _session_token(request, creds))
    finally:
        sessions.close()


class IdentityFirstRoute(APIRoute):
    """
    Route whose caller identity is checked before any request error is reported.

    FastAPI parses the body before it solves dependencies, so a malformed
    body would otherwise be reported as 400 to an anonymous caller.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError:
                creds = await http_bearer(request)
                await run_in_threadpool(_check_identity, request, creds)
                raise

        return route_handler
