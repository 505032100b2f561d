from ..models.models import Cliente, Proveedor
from .resource import OwnedResource


clientes = OwnedResource(Cliente, "client")

proveedores = OwnedResource(Proveedor, "provider")
