from ..schemas.providers import ProveedorCreate, ProveedorUpdate, ProveedorResponse
from ..services.contacts import proveedores
from .crud import build_crud_router


router = build_crud_router(proveedores, "/providers", ProveedorCreate, ProveedorUpdate, ProveedorResponse)
