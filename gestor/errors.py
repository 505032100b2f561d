"""
Error taxonomy and HTTP translation.

Every route raises one of the ``ApiError`` subclasses below (or lets a
store/unknown exception escape); the handlers registered by
``register_exception_handlers`` render all of them with the same JSON
envelope: ``{"error": str, "details"?: object, "code"?: str}``.
"""
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = structlog.get_logger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class ApiError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None, code: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        self.code = code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        if self.code:
            body["code"] = self.code
        return body


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class InvalidInput(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class NotFound(ApiError):
    """Missing rows and rows owned by another identity look the same."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found or not owned by the current user"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(ApiError):
    pass


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_unique_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(getattr(exc, "orig", exc))


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == FOREIGN_KEY_VIOLATION:
        return True
    return "FOREIGN KEY constraint failed" in str(getattr(exc, "orig", exc))


def translate_integrity_error(exc: IntegrityError, conflict_message: str) -> ApiError:
    """Map a store constraint failure onto the taxonomy."""
    if is_unique_violation(exc):
        return Conflict(conflict_message)
    if is_foreign_key_violation(exc):
        return Conflict("The record is still referenced by other records")
    return InternalError(details=str(getattr(exc, "orig", exc)))


def validation_details(errors: List[dict]) -> Dict[str, List[str]]:
    """Flatten pydantic errors into ``{field: [messages]}``."""
    details: Dict[str, List[str]] = {}
    for err in errors:
        msg = err.get("msg", "Invalid value")
        if err.get("type") == "json_invalid":
            # loc carries the byte offset of the parse failure, not a field
            details.setdefault("_body", []).append(f"Malformed JSON body: {err.get('ctx', {}).get('error', msg)}")
            continue
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "_schema"
        # pydantic prefixes messages raised from validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        details.setdefault(field, []).append(msg)
    return details


def _json(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("request_failed", error=exc.message, details=exc.details)
    return _json(exc.status_code, exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any((err.get("loc") or ("",))[0] == "path" for err in errors):
        return _json(status.HTTP_400_BAD_REQUEST, {"error": "Invalid identifier"})
    return _json(
        status.HTTP_400_BAD_REQUEST,
        {"error": "Invalid input", "details": validation_details(errors)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body: Dict[str, Any] = {"error": exc.detail if isinstance(exc.detail, str) else "Request failed"}
    if not isinstance(exc.detail, str) and exc.detail is not None:
        body["details"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database_error", error=str(exc), exc_info=exc)
    return _json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"error": "Database error", "details": str(getattr(exc, "orig", None) or exc)},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", error=str(exc), exc_info=exc)
    return _json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"error": "Internal server error", "details": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
