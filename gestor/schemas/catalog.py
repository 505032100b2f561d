import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..models.models import EstadoEquipo
from .common import OwnedResponse, PartialUpdate, empty_to_none, not_null, required_text


# ---------- BRANDS / CATEGORIES ----------
class NamedBase(BaseModel):
    nombre: str = Field(min_length=2, max_length=100)

    _name = required_text("nombre")


class NamedUpdate(PartialUpdate):
    nombre: Optional[str] = Field(default=None, min_length=2, max_length=100)

    _blank = empty_to_none("nombre")
    _required = not_null("nombre")


class MarcaCreate(NamedBase):
    pass


class MarcaUpdate(NamedUpdate):
    pass


class MarcaResponse(NamedBase, OwnedResponse):
    pass


class CategoriaProductoCreate(NamedBase):
    pass


class CategoriaProductoUpdate(NamedUpdate):
    pass


class CategoriaProductoResponse(NamedBase, OwnedResponse):
    pass


# ---------- PRODUCTS ----------
class ProductoBase(BaseModel):
    nombre: str = Field(min_length=3, max_length=200)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    modelo: Optional[str] = Field(default=None, max_length=100)
    precio: float = Field(ge=0)
    precio_alquiler: Optional[float] = Field(default=None, ge=0)
    precio_compra_referencia: Optional[float] = Field(default=None, ge=0)
    categoria_id: uuid.UUID
    marca_id: Optional[uuid.UUID] = None

    _blank = empty_to_none("descripcion", "modelo", "marca_id")
    _name = required_text("nombre")


class ProductoCreate(ProductoBase):
    pass


class ProductoUpdate(PartialUpdate):
    nombre: Optional[str] = Field(default=None, min_length=3, max_length=200)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    modelo: Optional[str] = Field(default=None, max_length=100)
    precio: Optional[float] = Field(default=None, ge=0)
    precio_alquiler: Optional[float] = Field(default=None, ge=0)
    precio_compra_referencia: Optional[float] = Field(default=None, ge=0)
    categoria_id: Optional[uuid.UUID] = None
    marca_id: Optional[uuid.UUID] = None

    _blank = empty_to_none("nombre", "descripcion", "modelo", "marca_id")
    _required = not_null("nombre", "precio", "categoria_id")


class ProductoResponse(ProductoBase, OwnedResponse):
    stock: int = 0
    categoria_nombre: Optional[str] = None
    marca_nombre: Optional[str] = None


# ---------- INVENTORY ITEMS ----------
class EquipoItemBase(BaseModel):
    numero_serie: Optional[str] = Field(default=None, max_length=100)
    notas_internas: Optional[str] = Field(default=None, max_length=1000)
    estado: EstadoEquipo = EstadoEquipo.DISPONIBLE
    fecha_compra: Optional[date] = None
    precio_compra: Optional[float] = Field(default=None, ge=0)
    proveedor_id: Optional[uuid.UUID] = None

    _blank = empty_to_none("numero_serie", "notas_internas", "fecha_compra", "proveedor_id")


class EquipoItemCreate(EquipoItemBase):
    pass


class EquipoItemUpdate(PartialUpdate):
    numero_serie: Optional[str] = Field(default=None, max_length=100)
    notas_internas: Optional[str] = Field(default=None, max_length=1000)
    estado: Optional[EstadoEquipo] = None
    fecha_compra: Optional[date] = None
    precio_compra: Optional[float] = Field(default=None, ge=0)
    proveedor_id: Optional[uuid.UUID] = None

    _blank = empty_to_none("numero_serie", "notas_internas", "fecha_compra", "proveedor_id")
    _required = not_null("estado")


class EquipoItemResponse(EquipoItemBase, OwnedResponse):
    producto_id: uuid.UUID
    producto_nombre: Optional[str] = None
    proveedor_nombre: Optional[str] = None
