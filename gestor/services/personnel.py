"""
Personnel, job positions, services and the personnel/position assignments.

Assignments carry no owner column of their own: they are reached through a
personnel row owned by the caller, and may only point at job positions that
the caller owns too.
"""
import uuid
from datetime import date
from typing import Any, Dict, List, Tuple

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import Conflict, InvalidInput, NotFound, translate_integrity_error
from ..models.models import Personal, PersonalPuestoTrabajo, PuestoTrabajo, Servicio
from .resource import OwnedResource


logger = structlog.get_logger(__name__)

ALREADY_ASSIGNED = "The personnel already has one or more of these job positions assigned"


personal = OwnedResource(Personal, "personnel")

puestos = OwnedResource(
    PuestoTrabajo,
    "job position",
    unique=("nombre",),
    conflict_message="A job position with that name already exists",
)

servicios = OwnedResource(
    Servicio,
    "service",
    unique=("nombre",),
    conflict_message="A service with that name already exists",
)


def _check_positions(db: Session, owner_id: uuid.UUID, puesto_ids: List[uuid.UUID]) -> None:
    if not puesto_ids:
        return
    found = (
        db.query(PuestoTrabajo.id)
        .filter(PuestoTrabajo.user_id == owner_id, PuestoTrabajo.id.in_(puesto_ids))
        .count()
    )
    if found != len(set(puesto_ids)):
        raise InvalidInput("Job position not valid")


def _assignments_query(db: Session, personal_id: uuid.UUID):
    return db.query(PersonalPuestoTrabajo).filter(PersonalPuestoTrabajo.personal_id == personal_id)


def _build(personal_id: uuid.UUID, batch: List[Dict[str, Any]]) -> List[PersonalPuestoTrabajo]:
    return [
        PersonalPuestoTrabajo(
            personal_id=personal_id,
            puesto_trabajo_id=a["puesto_trabajo_id"],
            fecha_asignacion=a.get("fecha_asignacion") or date.today(),
            tarifa_por_dia=a.get("tarifa_por_dia"),
        )
        for a in batch
    ]


def _ensure_not_assigned(db: Session, personal_id: uuid.UUID, puesto_ids: List[uuid.UUID]) -> None:
    existing = (
        _assignments_query(db, personal_id)
        .filter(PersonalPuestoTrabajo.puesto_trabajo_id.in_(puesto_ids))
        .first()
    )
    if existing is not None:
        raise Conflict(ALREADY_ASSIGNED)


def _insert(db: Session, rows: List[PersonalPuestoTrabajo]) -> List[PersonalPuestoTrabajo]:
    db.add_all(rows)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise translate_integrity_error(e, ALREADY_ASSIGNED)
    for row in rows:
        db.refresh(row)
    return rows


def list_assignments(db: Session, owner_id: uuid.UUID, personal_id: uuid.UUID) -> List[PersonalPuestoTrabajo]:
    personal.get(db, owner_id, personal_id)
    return _assignments_query(db, personal_id).order_by(PersonalPuestoTrabajo.fecha_asignacion.asc()).all()


def assign(db: Session, owner_id: uuid.UUID, personal_id: uuid.UUID, batch: List[Dict[str, Any]]) -> List[PersonalPuestoTrabajo]:
    """Add assignments; a position the personnel already holds is a conflict."""
    personal.get(db, owner_id, personal_id)
    puesto_ids = [a["puesto_trabajo_id"] for a in batch]
    _check_positions(db, owner_id, puesto_ids)
    _ensure_not_assigned(db, personal_id, puesto_ids)
    rows = _insert(db, _build(personal_id, batch))
    logger.info("positions_assigned", owner_id=str(owner_id), personal_id=str(personal_id), count=len(rows))
    return rows


def replace(db: Session, owner_id: uuid.UUID, personal_id: uuid.UUID, batch: List[Dict[str, Any]]) -> List[PersonalPuestoTrabajo]:
    """
    Delete every assignment of the personnel row, then insert ``batch``.

    The delete is committed before the insert; if the insert fails the row
    is left with no assignments at all.
    """
    personal.get(db, owner_id, personal_id)
    _check_positions(db, owner_id, [a["puesto_trabajo_id"] for a in batch])
    removed = _assignments_query(db, personal_id).delete(synchronize_session=False)
    db.commit()
    logger.info("positions_cleared", owner_id=str(owner_id), personal_id=str(personal_id), removed=removed)
    if not batch:
        return []
    rows = _insert(db, _build(personal_id, batch))
    logger.info("positions_assigned", owner_id=str(owner_id), personal_id=str(personal_id), count=len(rows))
    return rows


def _get_assignment(db: Session, owner_id: uuid.UUID, personal_id: uuid.UUID, asignacion_id: uuid.UUID) -> Tuple[Personal, PersonalPuestoTrabajo]:
    owner = personal.get(db, owner_id, personal_id)
    row = _assignments_query(db, personal_id).filter(PersonalPuestoTrabajo.id == asignacion_id).first()
    if row is None:
        raise NotFound("Assignment not found or not owned by the current user")
    return owner, row


def update_assignment(db: Session, owner_id: uuid.UUID, personal_id: uuid.UUID, asignacion_id: uuid.UUID, data: Dict[str, Any]) -> PersonalPuestoTrabajo:
    _, row = _get_assignment(db, owner_id, personal_id, asignacion_id)
    new_puesto = data.get("puesto_trabajo_id")
    if new_puesto is not None and new_puesto != row.puesto_trabajo_id:
        _check_positions(db, owner_id, [new_puesto])
        clash = (
            _assignments_query(db, personal_id)
            .filter(PersonalPuestoTrabajo.puesto_trabajo_id == new_puesto, PersonalPuestoTrabajo.id != row.id)
            .first()
        )
        if clash is not None:
            raise Conflict(ALREADY_ASSIGNED)
    for field, value in data.items():
        setattr(row, field, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise translate_integrity_error(e, ALREADY_ASSIGNED)
    db.refresh(row)
    return row


def delete_assignment(db: Session, owner_id: uuid.UUID, personal_id: uuid.UUID, asignacion_id: uuid.UUID) -> Dict[str, Any]:
    owner, row = _get_assignment(db, owner_id, personal_id, asignacion_id)
    result = {
        "message": "Assignment deleted",
        "id": row.id,
        "personal_nombre": " ".join(p for p in (owner.nombre, owner.apellidos) if p),
        "puesto_nombre": row.nombre_puesto,
    }
    db.delete(row)
    db.commit()
    logger.info("assignment_deleted", owner_id=str(owner_id), personal_id=str(personal_id), id=str(asignacion_id))
    return result
