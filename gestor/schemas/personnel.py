import uuid
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import OwnedResponse, PartialUpdate, email_address, empty_to_none, not_null, required_text


_PERSONAL_TEXT = ("apellidos", "email", "telefono", "dni_nif", "notas")


# ---------- PERSONNEL ----------
class PersonalBase(BaseModel):
    nombre: str = Field(min_length=1, max_length=100)
    apellidos: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    telefono: Optional[str] = Field(default=None, max_length=20)
    dni_nif: Optional[str] = Field(default=None, max_length=20)
    notas: Optional[str] = Field(default=None, max_length=1000)

    _blank = empty_to_none(*_PERSONAL_TEXT)
    _name = required_text("nombre")
    _email = email_address("email")


class PersonalCreate(PersonalBase):
    pass


class PersonalUpdate(PartialUpdate):
    nombre: Optional[str] = Field(default=None, min_length=1, max_length=100)
    apellidos: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    telefono: Optional[str] = Field(default=None, max_length=20)
    dni_nif: Optional[str] = Field(default=None, max_length=20)
    notas: Optional[str] = Field(default=None, max_length=1000)

    _blank = empty_to_none("nombre", *_PERSONAL_TEXT)
    _email = email_address("email")
    _required = not_null("nombre")


class PersonalResponse(PersonalBase, OwnedResponse):
    pass


# ---------- JOB POSITIONS / SERVICES ----------
class DayRateBase(BaseModel):
    """Shared shape of job positions and services: a name and a day rate."""

    nombre: str = Field(min_length=2, max_length=255)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    precio_dia: float = Field(ge=0, le=99999.99)

    _blank = empty_to_none("descripcion")
    _name = required_text("nombre")


class DayRateUpdate(PartialUpdate):
    nombre: Optional[str] = Field(default=None, min_length=2, max_length=255)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    precio_dia: Optional[float] = Field(default=None, ge=0, le=99999.99)

    _blank = empty_to_none("nombre", "descripcion")
    _required = not_null("nombre", "precio_dia")


class PuestoTrabajoCreate(DayRateBase):
    pass


class PuestoTrabajoUpdate(DayRateUpdate):
    pass


class PuestoTrabajoResponse(DayRateBase, OwnedResponse):
    pass


class ServicioCreate(DayRateBase):
    pass


class ServicioUpdate(DayRateUpdate):
    pass


class ServicioResponse(DayRateBase, OwnedResponse):
    pass


# ---------- ASSIGNMENTS ----------
class AsignacionInput(BaseModel):
    puesto_trabajo_id: uuid.UUID
    fecha_asignacion: Optional[date] = None
    tarifa_por_dia: Optional[float] = Field(default=None, ge=0)

    _blank = empty_to_none("fecha_asignacion")


def _distinct_positions(cls, v):
    ids = [a.puesto_trabajo_id for a in v]
    if len(ids) != len(set(ids)):
        raise ValueError("The same job position appears more than once")
    return v


class AsignarPuestos(BaseModel):
    puestos_trabajo: List[AsignacionInput] = Field(min_length=1)

    _distinct = field_validator("puestos_trabajo")(_distinct_positions)


class ReemplazarPuestos(BaseModel):
    # An empty list removes every assignment
    puestos_trabajo: List[AsignacionInput] = Field(default_factory=list)

    _distinct = field_validator("puestos_trabajo")(_distinct_positions)


class AsignacionUpdate(PartialUpdate):
    puesto_trabajo_id: Optional[uuid.UUID] = None
    fecha_asignacion: Optional[date] = None
    tarifa_por_dia: Optional[float] = Field(default=None, ge=0)

    _blank = empty_to_none("fecha_asignacion")
    _required = not_null("puesto_trabajo_id", "fecha_asignacion")


class AsignacionResponse(BaseModel):
    id: uuid.UUID
    personal_id: uuid.UUID
    puesto_trabajo_id: uuid.UUID
    nombre_puesto: Optional[str] = None
    fecha_asignacion: date
    tarifa_por_dia: Optional[float] = None

    class Config:
        from_attributes = True


class PersonalConPuestosResponse(PersonalResponse):
    puestos_trabajo: List[AsignacionResponse] = Field(default_factory=list, validation_alias="asignaciones")


class AsignacionDeleteResponse(BaseModel):
    message: str
    id: uuid.UUID
    personal_nombre: Optional[str] = None
    puesto_nombre: Optional[str] = None
