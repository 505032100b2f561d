import uuid
from typing import List

from fastapi import Depends, status
from sqlalchemy.orm import Session

from ..auth.security import get_owner_id
from ..db import get_db
from ..schemas.catalog import (
    ProductoCreate,
    ProductoUpdate,
    ProductoResponse,
    EquipoItemCreate,
    EquipoItemUpdate,
    EquipoItemResponse,
)
from ..schemas.common import MessageResponse
from ..services import inventory
from ..services.catalog import productos
from .crud import build_crud_router


router = build_crud_router(productos, "/products", ProductoCreate, ProductoUpdate, ProductoResponse)


# ---------- INVENTORY ITEMS ----------
@router.get("/{producto_id}/items", response_model=List[EquipoItemResponse])
def list_items(producto_id: uuid.UUID, db: Session = Depends(get_db), owner_id: uuid.UUID = Depends(get_owner_id)):
    return inventory.list_items(db, owner_id, producto_id)


@router.post("/{producto_id}/items", response_model=EquipoItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    producto_id: uuid.UUID,
    payload: EquipoItemCreate,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    return inventory.create_item(db, owner_id, producto_id, payload.model_dump())


@router.get("/{producto_id}/items/{item_id}", response_model=EquipoItemResponse)
def get_item(
    producto_id: uuid.UUID,
    item_id: uuid.UUID,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    return inventory.get_item(db, owner_id, producto_id, item_id)


@router.put("/{producto_id}/items/{item_id}", response_model=EquipoItemResponse)
def update_item(
    producto_id: uuid.UUID,
    item_id: uuid.UUID,
    payload: EquipoItemUpdate,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    return inventory.update_item(db, owner_id, producto_id, item_id, payload.changes())


@router.delete("/{producto_id}/items/{item_id}", response_model=MessageResponse)
def delete_item(
    producto_id: uuid.UUID,
    item_id: uuid.UUID,
    db: Session = Depends(get_db),
    owner_id: uuid.UUID = Depends(get_owner_id),
):
    inventory.delete_item(db, owner_id, producto_id, item_id)
    return MessageResponse(message="Item deleted", id=item_id)
