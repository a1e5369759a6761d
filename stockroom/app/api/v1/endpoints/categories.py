from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.catalog import CategoryCreate, CategoryRead, CategoryUpdate
from stockroom.services import catalog

router = APIRouter(prefix="/categories")


@router.get("", response_model=list[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return [CategoryRead.model_validate(x) for x in catalog.list_categories(db)]


@router.post("", response_model=CategoryRead, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return CategoryRead.model_validate(catalog.create_category(db, payload.model_dump()))


@router.put("/{category_id}", response_model=CategoryRead)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return CategoryRead.model_validate(catalog.update_category(db, category_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    """Les produits de la catégorie deviennent non classés ; les périmètres staff sont nettoyés."""
    catalog.delete_category(db, category_id)
    return Response(status_code=204)
