"""
Ownership-scoped persistence for a single table.

Every query built here is filtered by ``user_id == owner_id``; a row that
belongs to another identity is reported exactly like a missing one.
"""
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from ..errors import Conflict, InvalidInput, NotFound, translate_integrity_error


logger = structlog.get_logger(__name__)

# (payload field, referenced model, message raised when the id is not the caller's)
Reference = Tuple[str, Type, str]
DeleteGuard = Callable[[Session, uuid.UUID, uuid.UUID], None]


class OwnedResource:
    def __init__(
        self,
        model: Type,
        label: str,
        unique: Iterable[str] = (),
        conflict_message: Optional[str] = None,
        references: Iterable[Reference] = (),
        order_by: Optional[Any] = None,
        before_delete: Optional[DeleteGuard] = None,
    ):
        self.model = model
        self.label = label
        self.unique = tuple(unique)
        self.conflict_message = conflict_message or f"A {label} with that name already exists"
        self.references = tuple(references)
        self.order_by = order_by if order_by is not None else model.nombre.asc()
        self.before_delete = before_delete

    def query(self, db: Session, owner_id: uuid.UUID) -> Query:
        return db.query(self.model).filter(self.model.user_id == owner_id)

    def list(self, db: Session, owner_id: uuid.UUID) -> List[Any]:
        return self.query(db, owner_id).order_by(self.order_by).all()

    def get(self, db: Session, owner_id: uuid.UUID, row_id: uuid.UUID):
        row = self.query(db, owner_id).filter(self.model.id == row_id).first()
        if row is None:
            raise NotFound(f"{self.label.capitalize()} not found or not owned by the current user")
        return row

    def ensure_unique(self, db: Session, owner_id: uuid.UUID, data: Dict[str, Any], exclude_id: Optional[uuid.UUID] = None) -> None:
        if not self.unique or not any(f in data for f in self.unique):
            return
        q = self.query(db, owner_id)
        for field in self.unique:
            value = data.get(field)
            if value is None:
                return
            q = q.filter(getattr(self.model, field) == value)
        if exclude_id is not None:
            q = q.filter(self.model.id != exclude_id)
        if q.first() is not None:
            raise Conflict(self.conflict_message)

    def check_references(self, db: Session, owner_id: uuid.UUID, data: Dict[str, Any]) -> None:
        for field, ref_model, message in self.references:
            ref_id = data.get(field)
            if ref_id is None:
                continue
            exists = (
                db.query(ref_model.id)
                .filter(ref_model.id == ref_id, ref_model.user_id == owner_id)
                .first()
            )
            if exists is None:
                raise InvalidInput(message)

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise translate_integrity_error(e, self.conflict_message)

    def create(self, db: Session, owner_id: uuid.UUID, data: Dict[str, Any], **extra):
        values = {**data, **extra}
        self.check_references(db, owner_id, values)
        self.ensure_unique(db, owner_id, values)
        row = self.model(user_id=owner_id, **values)
        db.add(row)
        self._commit(db)
        db.refresh(row)
        logger.info("row_created", table=self.model.__tablename__, owner_id=str(owner_id), id=str(row.id))
        return row

    def update(self, db: Session, owner_id: uuid.UUID, row_id: uuid.UUID, data: Dict[str, Any]):
        row = self.get(db, owner_id, row_id)
        self.check_references(db, owner_id, data)
        if any(f in data for f in self.unique):
            # Compare against the row as it will look after the update
            merged = {f: data.get(f, getattr(row, f)) for f in self.unique}
            self.ensure_unique(db, owner_id, merged, exclude_id=row.id)
        for field, value in data.items():
            setattr(row, field, value)
        self._commit(db)
        db.refresh(row)
        return row

    def delete(self, db: Session, owner_id: uuid.UUID, row_id: uuid.UUID) -> int:
        if self.before_delete is not None:
            self.before_delete(db, owner_id, row_id)
        try:
            count = (
                self.query(db, owner_id)
                .filter(self.model.id == row_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise translate_integrity_error(e, self.conflict_message)
        if count == 0:
            raise NotFound(f"{self.label.capitalize()} not found or not owned by the current user")
        logger.info("row_deleted", table=self.model.__tablename__, owner_id=str(owner_id), id=str(row_id))
        return count
