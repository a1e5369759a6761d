from __future__ import annotations

from pydantic import BaseModel, Field

from stockroom.app.schemas.catalog import (
    AreaRead,
    CategoryRead,
    ProductRead,
    SupplierRead,
    UserRead,
    WarehouseRead,
)
from stockroom.app.schemas.purchase_request import PurchaseRequestRead
from stockroom.app.schemas.stock_level import MovementRead


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    credential: str = Field(min_length=1)

    class Config:
        extra = "forbid"


class SnapshotRead(BaseModel):
    users: list[UserRead]
    products: list[ProductRead]
    suppliers: list[SupplierRead]
    categories: list[CategoryRead]
    warehouses: list[WarehouseRead]
    areas: list[AreaRead]
    movements: list[MovementRead]
    purchase_requests: list[PurchaseRequestRead]

    class Config:
        from_attributes = True
