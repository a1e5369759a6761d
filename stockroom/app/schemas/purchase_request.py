from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt

from stockroom.app.db.models.core_types import RequestStatus
from stockroom.app.schemas.catalog import ProductRead, UserRead


class PurchaseRequestItemCreate(BaseModel):
    product_id: StrictInt
    quantity: StrictInt = Field(gt=0)
    unit: str = Field(min_length=1, max_length=32)

    class Config:
        extra = "forbid"


class PurchaseRequestCreate(BaseModel):
    requester_email: str = Field(min_length=1)
    # liste vide refusée par le service (ValidationError explicite)
    items: list[PurchaseRequestItemCreate] = Field(default_factory=list)
    notes: str | None = None

    class Config:
        extra = "forbid"


class PurchaseRequestTransition(BaseModel):
    status: RequestStatus
    caller_email: str = Field(min_length=1)

    class Config:
        extra = "forbid"


class PurchaseRequestItemRead(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit: str
    product: ProductRead | None = None

    class Config:
        from_attributes = True


class PurchaseRequestRead(BaseModel):
    id: int
    status: RequestStatus
    notes: str | None = None
    requested_at: datetime
    approved_at: datetime | None = None
    received_at: datetime | None = None

    requester_email: str | None = None
    approved_by: str | None = None
    received_by: str | None = None

    requester: UserRead | None = None
    approver: UserRead | None = None
    receiver: UserRead | None = None
    items: list[PurchaseRequestItemRead] = Field(default_factory=list)

    class Config:
        from_attributes = True
