from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    String,
    Integer,
    Boolean,
    ForeignKey,
    Text,
    Enum,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.app.db.base import Base, BigIntPK, UTCDateTime
from stockroom.app.db.models.core_types import (
    Role,
    MovementType,
    AdjustmentDirection,
    RequestStatus,
)
from stockroom.app.time_utils import utcnow

# ---------- MASTER DATA ----------
class Area(Base):
    __tablename__ = "areas"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)


class Warehouse(Base):
    __tablename__ = "warehouses"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255))


class Supplier(Base):
    __tablename__ = "suppliers"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(64))


class Category(Base):
    __tablename__ = "categories"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    is_stockable: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Product(Base):
    __tablename__ = "products"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(32), default="unit", nullable=False)
    minimum_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # NULL = pas de code-barres ; "" n'est jamais stocké (cf. catalog)
    barcode: Mapped[str | None] = mapped_column(String(64), unique=True)

    supplier_id: Mapped[int | None] = mapped_column(ForeignKey("suppliers.id", ondelete="SET NULL"))
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id", ondelete="SET NULL"))
    warehouse_id: Mapped[int | None] = mapped_column(ForeignKey("warehouses.id", ondelete="SET NULL"))

    supplier: Mapped[Supplier | None] = relationship()
    category: Mapped[Category | None] = relationship()
    warehouse: Mapped[Warehouse | None] = relationship()

    __table_args__ = (CheckConstraint("minimum_stock >= 0", name="ck_product_minimum_stock_nonneg"),)


# ---------- AUTH ----------
class User(Base):
    __tablename__ = "users"
    # toujours en minuscules (normalisé à chaque écriture)
    email: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[Role] = mapped_column(Enum(Role, name="role"), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    area_id: Mapped[int | None] = mapped_column(ForeignKey("areas.id", ondelete="SET NULL"))
    category_ids: Mapped[list[int]] = mapped_column(JSON, default=list, nullable=False)
    can_receive_orders: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    area: Mapped[Area | None] = relationship()


# ---------- INVENTORY ----------
class Movement(Base):
    """Ligne du ledger. Append-only : jamais modifiée ni supprimée individuellement."""

    __tablename__ = "movements"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    movement_type: Mapped[MovementType] = mapped_column(Enum(MovementType, name="movement_type"), nullable=False)
    direction: Mapped[AdjustmentDirection | None] = mapped_column(
        Enum(AdjustmentDirection, name="adjustment_direction")
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(255))

    happened_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    user_email: Mapped[str | None] = mapped_column(ForeignKey("users.email", ondelete="SET NULL"))

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_movement_qty_pos"),
        Index("ix_movements_time", "happened_at", "id"),
    )


# ---------- PROCUREMENT ----------
class PurchaseRequest(Base):
    __tablename__ = "purchase_requests"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    status: Mapped[RequestStatus] = mapped_column(
        Enum(RequestStatus, name="request_status"),
        default=RequestStatus.pending,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text)

    requested_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
    received_at: Mapped[datetime | None] = mapped_column(UTCDateTime)

    requester_email: Mapped[str | None] = mapped_column(ForeignKey("users.email", ondelete="SET NULL"))
    approved_by: Mapped[str | None] = mapped_column(ForeignKey("users.email", ondelete="SET NULL"))
    received_by: Mapped[str | None] = mapped_column(ForeignKey("users.email", ondelete="SET NULL"))

    # verrou optimiste : UPDATE ... WHERE version = :lu
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    requester: Mapped[User | None] = relationship(foreign_keys=[requester_email])
    approver: Mapped[User | None] = relationship(foreign_keys=[approved_by])
    receiver: Mapped[User | None] = relationship(foreign_keys=[received_by])
    items: Mapped[list["PurchaseRequestItem"]] = relationship(
        back_populates="request",
        order_by="PurchaseRequestItem.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (Index("ix_purchase_requests_requested_at", "requested_at"),)


class PurchaseRequestItem(Base):
    __tablename__ = "purchase_request_items"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    request_id: Mapped[int] = mapped_column(
        ForeignKey("purchase_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit: Mapped[str] = mapped_column(String(32), nullable=False)

    request: Mapped[PurchaseRequest] = relationship(back_populates="items")
    product: Mapped[Product] = relationship()

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_pr_item_qty_pos"),)
