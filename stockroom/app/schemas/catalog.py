from __future__ import annotations

from pydantic import BaseModel, Field

from stockroom.app.db.models.core_types import Role


class _Input(BaseModel):
    # champs inconnus refusés, jamais fusionnés
    class Config:
        extra = "forbid"


class _Read(BaseModel):
    class Config:
        from_attributes = True


# ---------- Area ----------
class AreaCreate(_Input):
    name: str = Field(min_length=1, max_length=200)


class AreaUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=200)


class AreaRead(_Read):
    id: int
    name: str


# ---------- Warehouse ----------
class WarehouseCreate(_Input):
    name: str = Field(min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=255)


class WarehouseUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=255)


class WarehouseRead(_Read):
    id: int
    name: str
    location: str | None = None


# ---------- Supplier ----------
class SupplierCreate(_Input):
    name: str = Field(min_length=1, max_length=255)
    phone_number: str | None = Field(default=None, max_length=64)


class SupplierUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone_number: str | None = Field(default=None, max_length=64)


class SupplierRead(_Read):
    id: int
    name: str
    phone_number: str | None = None


# ---------- Category ----------
class CategoryCreate(_Input):
    name: str = Field(min_length=1, max_length=200)
    is_stockable: bool = True


class CategoryUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    is_stockable: bool | None = None


class CategoryRead(_Read):
    id: int
    name: str
    is_stockable: bool


# ---------- Product ----------
class ProductCreate(_Input):
    name: str = Field(min_length=1, max_length=255)
    unit: str = Field(default="unit", min_length=1, max_length=32)
    minimum_stock: int = Field(default=0, ge=0)
    barcode: str | None = Field(default=None, max_length=64)
    supplier_id: int | None = None
    category_id: int | None = None
    warehouse_id: int | None = None


class ProductUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    unit: str | None = Field(default=None, min_length=1, max_length=32)
    minimum_stock: int | None = Field(default=None, ge=0)
    barcode: str | None = Field(default=None, max_length=64)
    supplier_id: int | None = None
    category_id: int | None = None
    warehouse_id: int | None = None


class ProductRead(_Read):
    id: int
    name: str
    unit: str
    minimum_stock: int
    barcode: str | None = None
    supplier_id: int | None = None
    category_id: int | None = None
    warehouse_id: int | None = None

    supplier: SupplierRead | None = None
    category: CategoryRead | None = None
    warehouse: WarehouseRead | None = None


# ---------- User ----------
class UserCreate(_Input):
    email: str = Field(min_length=3, max_length=255)
    name: str = Field(min_length=1, max_length=200)
    role: Role = Role.staff
    password: str = Field(min_length=1)
    area_id: int | None = None
    category_ids: list[int] = Field(default_factory=list)
    can_receive_orders: bool = False


class UserUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    role: Role | None = None
    password: str | None = Field(default=None, min_length=1)
    area_id: int | None = None
    category_ids: list[int] | None = None
    can_receive_orders: bool | None = None


class UserRead(_Read):
    """Jamais de hash : le champ n'existe pas dans ce schéma."""

    email: str
    name: str
    role: Role
    area_id: int | None = None
    category_ids: list[int] = Field(default_factory=list)
    can_receive_orders: bool
