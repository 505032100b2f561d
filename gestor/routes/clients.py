from ..schemas.clients import ClienteCreate, ClienteUpdate, ClienteResponse
from ..services.contacts import clientes
from .crud import build_crud_router


router = build_crud_router(clientes, "/clients", ClienteCreate, ClienteUpdate, ClienteResponse)
