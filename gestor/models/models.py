import enum
import uuid
from datetime import date, datetime, timezone
from typing import Optional, List

from sqlalchemy import (
    String,
    DateTime,
    Date,
    Boolean,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship, Mapped, mapped_column

from ..db import Base


def uuid_pk() -> Mapped[uuid.UUID]:
    return mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def owner_fk() -> Mapped[uuid.UUID]:
    return mapped_column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


def created_at_col() -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


def updated_at_col() -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


def money(nullable: bool = True) -> Mapped:
    return mapped_column(Numeric(12, 2, asdecimal=False), nullable=nullable)


class TipoCliente(str, enum.Enum):
    PARTICULAR = "PARTICULAR"
    EMPRESA = "EMPRESA"
    AUTONOMO = "AUTONOMO"


class TipoProveedor(str, enum.Enum):
    BIENES = "BIENES"
    SERVICIOS = "SERVICIOS"
    MIXTO = "MIXTO"


class EstadoEquipo(str, enum.Enum):
    DISPONIBLE = "DISPONIBLE"
    ALQUILADO = "ALQUILADO"
    MANTENIMIENTO = "MANTENIMIENTO"
    DANADO = "DAÑADO"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = uuid_pk()
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    nombre: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = created_at_col()
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class Cliente(Base):
    __tablename__ = "clientes"

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    tipo: Mapped[TipoCliente] = mapped_column(
        SAEnum(TipoCliente, name="tipo_cliente", values_callable=_enum_values), nullable=False
    )
    persona_de_contacto: Mapped[Optional[str]] = mapped_column(String(255))
    nif: Mapped[Optional[str]] = mapped_column(String(20))
    direccion: Mapped[Optional[str]] = mapped_column(String(255))
    ciudad: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    telefono: Mapped[Optional[str]] = mapped_column(String(20))
    es_intracomunitario: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()


class Marca(Base):
    __tablename__ = "marcas"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_marcas_user_nombre"),)

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()


class CategoriaProducto(Base):
    __tablename__ = "categorias_producto"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_categorias_producto_user_nombre"),)

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()


class Producto(Base):
    __tablename__ = "productos"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_productos_user_nombre"),)

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(200), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text)
    modelo: Mapped[Optional[str]] = mapped_column(String(100))
    # Number of equipo_items rows; maintained by services.inventory.sync_stock
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    precio: Mapped[float] = money(nullable=False)
    precio_alquiler: Mapped[Optional[float]] = money()
    precio_compra_referencia: Mapped[Optional[float]] = money()
    categoria_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("categorias_producto.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    marca_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("marcas.id", ondelete="RESTRICT"), index=True
    )
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()

    categoria = relationship("CategoriaProducto", lazy="joined")
    marca = relationship("Marca", lazy="joined")

    @property
    def categoria_nombre(self) -> Optional[str]:
        return self.categoria.nombre if self.categoria else None

    @property
    def marca_nombre(self) -> Optional[str]:
        return self.marca.nombre if self.marca else None


class Proveedor(Base):
    __tablename__ = "proveedores"

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(100), nullable=False)
    tipo: Mapped[TipoProveedor] = mapped_column(
        SAEnum(TipoProveedor, name="tipo_proveedor", values_callable=_enum_values), nullable=False
    )
    persona_de_contacto: Mapped[Optional[str]] = mapped_column(String(100))
    nif: Mapped[Optional[str]] = mapped_column(String(20))
    direccion: Mapped[Optional[str]] = mapped_column(String(255))
    ciudad: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(100))
    telefono: Mapped[Optional[str]] = mapped_column(String(20))
    es_intracomunitario: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()


class EquipoItem(Base):
    __tablename__ = "equipo_items"
    __table_args__ = (
        UniqueConstraint("user_id", "producto_id", "numero_serie", name="uq_equipo_item_user_producto_nserie"),
    )

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    producto_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("productos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    numero_serie: Mapped[Optional[str]] = mapped_column(String(100))
    notas_internas: Mapped[Optional[str]] = mapped_column(Text)
    estado: Mapped[EstadoEquipo] = mapped_column(
        SAEnum(EstadoEquipo, name="estado_equipo", values_callable=_enum_values),
        default=EstadoEquipo.DISPONIBLE,
        nullable=False,
    )
    fecha_compra: Mapped[Optional[date]] = mapped_column(Date)
    precio_compra: Mapped[Optional[float]] = money()
    proveedor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("proveedores.id", ondelete="SET NULL"), index=True
    )
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()

    producto = relationship("Producto", lazy="joined")
    proveedor = relationship("Proveedor", lazy="joined")

    @property
    def producto_nombre(self) -> Optional[str]:
        return self.producto.nombre if self.producto else None

    @property
    def proveedor_nombre(self) -> Optional[str]:
        return self.proveedor.nombre if self.proveedor else None


class Personal(Base):
    __tablename__ = "personal"

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(100), nullable=False)
    apellidos: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    telefono: Mapped[Optional[str]] = mapped_column(String(20))
    dni_nif: Mapped[Optional[str]] = mapped_column(String(20))
    notas: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()

    asignaciones: Mapped[List["PersonalPuestoTrabajo"]] = relationship(
        "PersonalPuestoTrabajo",
        back_populates="personal",
        passive_deletes=True,
        order_by="PersonalPuestoTrabajo.fecha_asignacion",
    )


class PuestoTrabajo(Base):
    __tablename__ = "puestos_trabajo"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_puestos_trabajo_user_nombre"),)

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text)
    precio_dia: Mapped[float] = money(nullable=False)
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()


class PersonalPuestoTrabajo(Base):
    __tablename__ = "personal_puestos_trabajo"
    __table_args__ = (
        UniqueConstraint("personal_id", "puesto_trabajo_id", name="uq_personal_puesto_trabajo"),
    )

    id: Mapped[uuid.UUID] = uuid_pk()
    personal_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("personal.id", ondelete="CASCADE"), nullable=False, index=True
    )
    puesto_trabajo_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("puestos_trabajo.id", ondelete="CASCADE"), nullable=False, index=True
    )
    fecha_asignacion: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    tarifa_por_dia: Mapped[Optional[float]] = money()
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()

    personal = relationship("Personal", back_populates="asignaciones")
    puesto_trabajo = relationship("PuestoTrabajo", lazy="joined")

    @property
    def nombre_puesto(self) -> Optional[str]:
        return self.puesto_trabajo.nombre if self.puesto_trabajo else None


class Servicio(Base):
    __tablename__ = "servicios"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_servicios_user_nombre"),)

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = owner_fk()
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text)
    precio_dia: Mapped[float] = money(nullable=False)
    created_at: Mapped[datetime] = created_at_col()
    updated_at: Mapped[datetime] = updated_at_col()
