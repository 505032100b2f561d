from ..schemas.catalog import (
    MarcaCreate,
    MarcaUpdate,
    MarcaResponse,
    CategoriaProductoCreate,
    CategoriaProductoUpdate,
    CategoriaProductoResponse,
)
from ..services.catalog import marcas, categorias
from .crud import build_crud_router


brands_router = build_crud_router(marcas, "/brands", MarcaCreate, MarcaUpdate, MarcaResponse)

categories_router = build_crud_router(
    categorias, "/categories", CategoriaProductoCreate, CategoriaProductoUpdate, CategoriaProductoResponse
)
