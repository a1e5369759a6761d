from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.catalog import SupplierCreate, SupplierRead, SupplierUpdate
from stockroom.services import catalog

router = APIRouter(prefix="/suppliers")


@router.get("", response_model=list[SupplierRead])
def list_suppliers(db: Session = Depends(get_db)):
    return [SupplierRead.model_validate(x) for x in catalog.list_suppliers(db)]


@router.post("", response_model=SupplierRead, status_code=201)
def create_supplier(payload: SupplierCreate, db: Session = Depends(get_db)):
    return SupplierRead.model_validate(catalog.create_supplier(db, payload.model_dump()))


@router.put("/{supplier_id}", response_model=SupplierRead)
def update_supplier(supplier_id: int, payload: SupplierUpdate, db: Session = Depends(get_db)):
    return SupplierRead.model_validate(catalog.update_supplier(db, supplier_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{supplier_id}", status_code=204)
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    catalog.delete_supplier(db, supplier_id)
    return Response(status_code=204)
