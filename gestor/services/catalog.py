import uuid

import structlog
from sqlalchemy.orm import Session

from ..errors import Conflict
from ..models.models import CategoriaProducto, Marca, Producto
from .resource import OwnedResource


logger = structlog.get_logger(__name__)

IN_USE_SAMPLE = 5


def _products_using(db: Session, owner_id: uuid.UUID, column, row_id: uuid.UUID):
    q = db.query(Producto.nombre).filter(Producto.user_id == owner_id, column == row_id)
    return q.count(), [nombre for (nombre,) in q.order_by(Producto.nombre.asc()).limit(IN_USE_SAMPLE).all()]


def _in_use_guard(column, label: str, code: str):
    def guard(db: Session, owner_id: uuid.UUID, row_id: uuid.UUID) -> None:
        total, names = _products_using(db, owner_id, column, row_id)
        if total:
            logger.info("delete_blocked", code=code, owner_id=str(owner_id), id=str(row_id), products=total)
            raise Conflict(
                f"The {label} is used by {total} product(s) and cannot be deleted",
                details={"productos": names, "total": total},
                code=code,
            )
    return guard


marcas = OwnedResource(
    Marca,
    "brand",
    unique=("nombre",),
    conflict_message="A brand with that name already exists",
    before_delete=_in_use_guard(Producto.marca_id, "brand", "BRAND_IN_USE"),
)

categorias = OwnedResource(
    CategoriaProducto,
    "category",
    unique=("nombre",),
    conflict_message="A category with that name already exists",
    before_delete=_in_use_guard(Producto.categoria_id, "category", "CATEGORY_IN_USE"),
)

productos = OwnedResource(
    Producto,
    "product",
    unique=("nombre",),
    conflict_message="A product with that name already exists",
    references=(
        ("categoria_id", CategoriaProducto, "Category not valid"),
        ("marca_id", Marca, "Brand not valid"),
    ),
)
