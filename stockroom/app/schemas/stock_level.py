from datetime import datetime

from pydantic import BaseModel, Field, StrictInt

from stockroom.app.db.models.core_types import AdjustmentDirection, MovementType
from stockroom.app.schemas.catalog import ProductRead


class MovementCreate(BaseModel):
    # entiers stricts : true, "3" ou 3.0 sont refusés (pas de coercition)
    product_id: StrictInt
    movement_type: MovementType
    quantity: StrictInt = Field(gt=0)
    acting_user_email: str = Field(min_length=1)
    direction: AdjustmentDirection | None = None
    reason: str | None = Field(default=None, max_length=255)

    class Config:
        extra = "forbid"


class MovementRead(BaseModel):
    id: int
    product_id: int
    movement_type: MovementType
    direction: AdjustmentDirection | None = None
    quantity: int
    reason: str | None = None
    happened_at: datetime
    user_email: str | None = None

    class Config:
        from_attributes = True


class MovementRecorded(BaseModel):
    movement: MovementRead
    current_stock: int


class ProductStockRead(BaseModel):
    product_id: int
    current_stock: int  # READ ONLY : dérivé du ledger, jamais stocké


class ProductBelowMinimumRead(BaseModel):
    product: ProductRead
    current_stock: int
