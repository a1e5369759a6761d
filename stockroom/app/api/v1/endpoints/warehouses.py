from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.catalog import WarehouseCreate, WarehouseRead, WarehouseUpdate
from stockroom.services import catalog

router = APIRouter(prefix="/warehouses")


@router.get("", response_model=list[WarehouseRead])
def list_warehouses(db: Session = Depends(get_db)):
    return [WarehouseRead.model_validate(x) for x in catalog.list_warehouses(db)]


@router.post("", response_model=WarehouseRead, status_code=201)
def create_warehouse(payload: WarehouseCreate, db: Session = Depends(get_db)):
    return WarehouseRead.model_validate(catalog.create_warehouse(db, payload.model_dump()))


@router.put("/{warehouse_id}", response_model=WarehouseRead)
def update_warehouse(warehouse_id: int, payload: WarehouseUpdate, db: Session = Depends(get_db)):
    return WarehouseRead.model_validate(catalog.update_warehouse(db, warehouse_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{warehouse_id}", status_code=204)
def delete_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    catalog.delete_warehouse(db, warehouse_id)
    return Response(status_code=204)
