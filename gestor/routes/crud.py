import uuid
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth.security import IdentityFirstRoute, get_owner_id
from ..db import get_db
from ..schemas.common import MessageResponse, PartialUpdate
from ..services.resource import OwnedResource


def build_crud_router(
    resource: OwnedResource,
    prefix: str,
    create_schema: Type[BaseModel],
    update_schema: Type[PartialUpdate],
    response_model: Type[BaseModel],
    detail_model: Optional[Type[BaseModel]] = None,
    tag: Optional[str] = None,
) -> APIRouter:
    """List/create/get/update/delete routes for one owner-scoped table."""
    router = APIRouter(prefix=prefix, tags=[tag or prefix.strip("/")], route_class=IdentityFirstRoute)
    label = resource.label.capitalize()

    @router.get("", response_model=List[response_model])
    def list_rows(db: Session = Depends(get_db), owner_id: uuid.UUID = Depends(get_owner_id)):
        return resource.list(db, owner_id)

    @router.post("", response_model=response_model, status_code=status.HTTP_201_CREATED)
    def create_row(payload: create_schema, db: Session = Depends(get_db), owner_id: uuid.UUID = Depends(get_owner_id)):
        return resource.create(db, owner_id, payload.model_dump())

    @router.get("/{row_id}", response_model=detail_model or response_model)
    def get_row(row_id: uuid.UUID, db: Session = Depends(get_db), owner_id: uuid.UUID = Depends(get_owner_id)):
        return resource.get(db, owner_id, row_id)

    @router.put("/{row_id}", response_model=response_model)
    def update_row(row_id: uuid.UUID, payload: update_schema, db: Session = Depends(get_db), owner_id: uuid.UUID = Depends(get_owner_id)):
        return resource.update(db, owner_id, row_id, payload.changes())

    @router.delete("/{row_id}", response_model=MessageResponse)
    def delete_row(row_id: uuid.UUID, db: Session = Depends(get_db), owner_id: uuid.UUID = Depends(get_owner_id)):
        resource.delete(db, owner_id, row_id)
        return MessageResponse(message=f"{label} deleted", id=row_id)

    return router
