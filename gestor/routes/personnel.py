import uuid
from typing import List

from fastapi import Depends, status
from sqlalchemy.orm import Session

from ..auth.security import get_owner_id
from ..db import get_db
from ..schemas.personnel import (
    PersonalCreate,
    PersonalUpdate,
    PersonalResponse,
    PersonalConPuestosResponse,
    PuestoTrabajoCreate,
    PuestoTrabajoUpdate,
    PuestoTrabajoResponse,
    ServicioCreate,
    ServicioUpdate,
    ServicioResponse,
    AsignarPuestos,
    ReemplazarPuestos,
    AsignacionUpdate,
    AsignacionResponse,
    AsignacionDeleteResponse,
)
from ..services import personnel
from .crud import build_crud_router


router = build_crud_router(
    personnel.personal,
    "/personnel",
    PersonalCreate,
    PersonalUpdate,
    PersonalResponse,
    detail_model=PersonalConPuestosResponse,
)

positions_router = build_crud_router(
    personnel.puestos, "/positions", PuestoTrabajoCreate, PuestoTrabajoUpdate, PuestoTrabajoResponse
)

services_router = build_crud_router(
    personnel.servicios, "/services", ServicioCreate, ServicioUpdate, ServicioResponse
)


# ---------- ASSIGNMENTS ----------
# "/puestos" is kept as an alias of "/positions" for older clients
@router.get("/{personal_id}/positions", response_model=List[AsignacionResponse])
@router.get("/{personal_id}/puestos", response_model=List[AsignacionResponse], include_in_schema=False)
def list_assignments(personal_id: uuid.UUID, db: Session = Depends(get_db), owner_id: uuid.UUID = Depends(get_owner_id)):
    return personnel.list_assignments(db, owner_id, personal_id)


@router.post("/{personal_id}/positions", response_model=List[AsignacionResponse], status_code=status.HTTP_201_CREATED)
@router.post(
    "/{personal_id}/puestos",
    response_model=List[AsignacionResponse],
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
def assign_positions(
    personal_id: uuid.UUID,
    payload: AsignarPuestos,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    batch = [a.model_dump() for a in payload.puestos_trabajo]
    return personnel.assign(db, owner_id, personal_id, batch)


@router.put("/{personal_id}/positions", response_model=List[AsignacionResponse])
@router.put("/{personal_id}/puestos", response_model=List[AsignacionResponse], include_in_schema=False)
def replace_positions(
    personal_id: uuid.UUID,
    payload: ReemplazarPuestos,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    batch = [a.model_dump() for a in payload.puestos_trabajo]
    return personnel.replace(db, owner_id, personal_id, batch)


@router.put("/{personal_id}/positions/{asignacion_id}", response_model=AsignacionResponse)
@router.put("/{personal_id}/puestos/{asignacion_id}", response_model=AsignacionResponse, include_in_schema=False)
def update_assignment(
    personal_id: uuid.UUID,
    asignacion_id: uuid.UUID,
    payload: AsignacionUpdate,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    return personnel.update_assignment(db, owner_id, personal_id, asignacion_id, payload.changes())


@router.delete("/{personal_id}/positions/{asignacion_id}", response_model=AsignacionDeleteResponse)
@router.delete("/{personal_id}/puestos/{asignacion_id}", response_model=AsignacionDeleteResponse, include_in_schema=False)
def delete_assignment(
    personal_id: uuid.UUID,
    asignacion_id: uuid.UUID,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    return personnel.delete_assignment(db, owner_id, personal_id, asignacion_id)
