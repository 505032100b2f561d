from typing import Optional
from pydantic import BaseModel, Field

from ..models.models import TipoProveedor
from .common import OwnedResponse, PartialUpdate, email_address, empty_to_none, not_null, required_text


_OPTIONAL_TEXT = ("persona_de_contacto", "nif", "direccion", "ciudad", "email", "telefono")


class ProveedorBase(BaseModel):
    nombre: str = Field(min_length=2, max_length=100)
    tipo: TipoProveedor
    persona_de_contacto: Optional[str] = Field(default=None, max_length=100)
    nif: Optional[str] = Field(default=None, max_length=20)
    direccion: Optional[str] = Field(default=None, max_length=255)
    ciudad: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=100)
    telefono: Optional[str] = Field(default=None, max_length=20)
    es_intracomunitario: bool = False

    _blank = empty_to_none(*_OPTIONAL_TEXT)
    _name = required_text("nombre")
    _email = email_address("email")


class ProveedorCreate(ProveedorBase):
    pass


class ProveedorUpdate(PartialUpdate):
    nombre: Optional[str] = Field(default=None, min_length=2, max_length=100)
    tipo: Optional[TipoProveedor] = None
    persona_de_contacto: Optional[str] = Field(default=None, max_length=100)
    nif: Optional[str] = Field(default=None, max_length=20)
    direccion: Optional[str] = Field(default=None, max_length=255)
    ciudad: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=100)
    telefono: Optional[str] = Field(default=None, max_length=20)
    es_intracomunitario: Optional[bool] = None

    _blank = empty_to_none("nombre", *_OPTIONAL_TEXT)
    _email = email_address("email")
    _required = not_null("nombre", "tipo", "es_intracomunitario")


class ProveedorResponse(ProveedorBase, OwnedResponse):
    pass
