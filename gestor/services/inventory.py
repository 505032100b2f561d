"""
Inventory items are children of a product: every operation first resolves
the product under the caller's ownership (404 otherwise) and then works on
the items of that product only.
"""
import uuid
from typing import Any, Dict, List

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models.models import EquipoItem, Producto, Proveedor
from .catalog import productos
from .resource import OwnedResource


logger = structlog.get_logger(__name__)


items = OwnedResource(
    EquipoItem,
    "item",
    unique=("producto_id", "numero_serie"),
    conflict_message="An item with that serial number already exists for this product",
    references=(("proveedor_id", Proveedor, "Provider not valid"),),
    order_by=EquipoItem.created_at.desc(),
)


def sync_stock(db: Session, producto_id: uuid.UUID) -> int:
    """Store the current item count of a product in ``productos.stock``."""
    count = db.query(func.count(EquipoItem.id)).filter(EquipoItem.producto_id == producto_id).scalar() or 0
    db.query(Producto).filter(Producto.id == producto_id).update({"stock": count}, synchronize_session=False)
    db.commit()
    return count


def list_items(db: Session, owner_id: uuid.UUID, producto_id: uuid.UUID) -> List[EquipoItem]:
    productos.get(db, owner_id, producto_id)
    return (
        items.query(db, owner_id)
        .filter(EquipoItem.producto_id == producto_id)
        .order_by(items.order_by)
        .all()
    )


def get_item(db: Session, owner_id: uuid.UUID, producto_id: uuid.UUID, item_id: uuid.UUID) -> EquipoItem:
    productos.get(db, owner_id, producto_id)
    row = (
        items.query(db, owner_id)
        .filter(EquipoItem.producto_id == producto_id, EquipoItem.id == item_id)
        .first()
    )
    if row is None:
        raise NotFound("Item not found or not owned by the current user")
    return row


def create_item(db: Session, owner_id: uuid.UUID, producto_id: uuid.UUID, data: Dict[str, Any]) -> EquipoItem:
    producto = productos.get(db, owner_id, producto_id)
    row = items.create(db, owner_id, data, producto_id=producto.id)
    stock = sync_stock(db, producto.id)
    logger.info("stock_synced", producto_id=str(producto.id), stock=stock)
    return row


def update_item(db: Session, owner_id: uuid.UUID, producto_id: uuid.UUID, item_id: uuid.UUID, data: Dict[str, Any]) -> EquipoItem:
    row = get_item(db, owner_id, producto_id, item_id)
    return items.update(db, owner_id, row.id, data)


def delete_item(db: Session, owner_id: uuid.UUID, producto_id: uuid.UUID, item_id: uuid.UUID) -> None:
    row = get_item(db, owner_id, producto_id, item_id)
    items.delete(db, owner_id, row.id)
    stock = sync_stock(db, producto_id)
    logger.info("stock_synced", producto_id=str(producto_id), stock=stock)
