"""
Seed the local database with a demo account and a small rental catalogue.

Usage:
  python scripts/seed_demo_data.py

This script is idempotent: rows are looked up by their per-owner unique
name (email for the user, numero_serie for items) and only created when
missing.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Load environment variables first
from dotenv import load_dotenv

load_dotenv()

from gestor.db import SessionLocal, Base, engine
from gestor.models.models import (
    User,
    Cliente,
    Marca,
    CategoriaProducto,
    Producto,
    EquipoItem,
    Proveedor,
    Personal,
    PuestoTrabajo,
    PersonalPuestoTrabajo,
    Servicio,
    TipoCliente,
    TipoProveedor,
    EstadoEquipo,
)
from gestor.auth.security import get_password_hash
from gestor.services.inventory import sync_stock


DEMO_EMAIL = os.getenv("DEMO_EMAIL", "demo@gestor.es")
DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "demo-password")


def ensure(session, model, lookup: dict, **values):
    row = session.query(model).filter_by(**lookup).first()
    if row:
        return row
    row = model(**lookup, **values)
    session.add(row)
    session.flush()
    return row


def main():
    if os.getenv("DATABASE_URL", "sqlite:///./var/dev.db").startswith("sqlite:///./"):
        os.makedirs("var", exist_ok=True)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        user = session.query(User).filter(User.email == DEMO_EMAIL).first()
        if not user:
            user = User(email=DEMO_EMAIL, password_hash=get_password_hash(DEMO_PASSWORD), nombre="Demo", is_active=True)
            session.add(user)
            session.flush()
        owner = {"user_id": user.id}

        ensure(session, Cliente, {**owner, "nombre": "Eventos Sur S.L."}, tipo=TipoCliente.EMPRESA, ciudad="Sevilla")
        ensure(session, Cliente, {**owner, "nombre": "Laura Gómez"}, tipo=TipoCliente.PARTICULAR)

        audio = ensure(session, CategoriaProducto, {**owner, "nombre": "Audio"})
        luces = ensure(session, CategoriaProducto, {**owner, "nombre": "Iluminación"})
        yamaha = ensure(session, Marca, {**owner, "nombre": "Yamaha"})
        chauvet = ensure(session, Marca, {**owner, "nombre": "Chauvet"})

        proveedor = ensure(
            session, Proveedor, {**owner, "nombre": "Audiopro Distribución"}, tipo=TipoProveedor.BIENES
        )

        mesa = ensure(
            session, Producto, {**owner, "nombre": "Mesa de mezclas MG10"},
            categoria_id=audio.id, marca_id=yamaha.id, precio=450.0, precio_alquiler=35.0,
        )
        foco = ensure(
            session, Producto, {**owner, "nombre": "Foco LED SlimPAR"},
            categoria_id=luces.id, marca_id=chauvet.id, precio=180.0, precio_alquiler=12.0,
        )
        for producto, serials in ((mesa, ("MG-0001", "MG-0002")), (foco, ("SP-0101", "SP-0102", "SP-0103"))):
            for numero_serie in serials:
                ensure(
                    session, EquipoItem, {**owner, "producto_id": producto.id, "numero_serie": numero_serie},
                    estado=EstadoEquipo.DISPONIBLE, proveedor_id=proveedor.id,
                )

        tecnico = ensure(session, PuestoTrabajo, {**owner, "nombre": "Técnico de sonido"}, precio_dia=150.0)
        ensure(session, PuestoTrabajo, {**owner, "nombre": "Montador"}, precio_dia=90.0)
        ensure(session, Servicio, {**owner, "nombre": "Transporte"}, precio_dia=60.0)

        lucia = ensure(session, Personal, {**owner, "nombre": "Lucía", "apellidos": "Martín"})
        ensure(session, PersonalPuestoTrabajo, {"personal_id": lucia.id, "puesto_trabajo_id": tecnico.id}, tarifa_por_dia=160.0)

        session.commit()
        for producto in (mesa, foco):
            sync_stock(session, producto.id)
        print(f"Seeded demo data for {DEMO_EMAIL}")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
