import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, field_validator

from ..errors import InvalidInput


def _empty_to_none(cls, v):
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def _not_null(cls, v, info):
    if v is None:
        raise ValueError(f"{info.field_name} cannot be empty")
    return v


def _required_text(cls, v, info):
    if isinstance(v, str):
        v = v.strip()
    if v is None or v == "":
        raise ValueError(f"{info.field_name} cannot be empty")
    return v


def _valid_email(cls, v):
    if v is None:
        return None
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}")
    # stored exactly as sent
    return v


def empty_to_none(*fields: str):
    """Trim the given string fields; blank strings become None."""
    return field_validator(*fields, mode="before")(_empty_to_none)


def required_text(*fields: str):
    """Trim the given required string fields; blank input is an error."""
    return field_validator(*fields, mode="before")(_required_text)


def email_address(*fields: str):
    """Check addresses with email-validator without normalising them."""
    return field_validator(*fields)(_valid_email)


def not_null(*fields: str):
    """Reject an explicit null for columns that are required in the store."""
    return field_validator(*fields)(_not_null)


class PartialUpdate(BaseModel):
    """Base for update payloads: every field optional, only sent fields are written."""

    def changes(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        if not data:
            raise InvalidInput("Nothing to update")
        return data


class OwnedResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
    id: Optional[uuid.UUID] = None
