from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.catalog import ProductCreate, ProductRead, ProductUpdate
from stockroom.app.schemas.stock_level import ProductBelowMinimumRead, ProductStockRead
from stockroom.services import catalog, ledger

router = APIRouter(prefix="/products")


@router.get("", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)):
    return [ProductRead.model_validate(p) for p in catalog.list_products(db)]


@router.get("/below-minimum", response_model=list[ProductBelowMinimumRead])
def list_below_minimum(db: Session = Depends(get_db)):
    """Produits dont le stock dérivé est sous le seuil minimum."""
    return [
        ProductBelowMinimumRead(product=ProductRead.model_validate(p), current_stock=stock)
        for p, stock in ledger.products_below_minimum(db)
    ]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ProductRead.model_validate(catalog.get_product(db, product_id))


@router.get("/{product_id}/stock", response_model=ProductStockRead)
def get_product_stock(product_id: int, db: Session = Depends(get_db)):
    return ProductStockRead(product_id=product_id, current_stock=ledger.current_stock(db, product_id))


@router.post("", response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    p = catalog.create_product(db, payload.model_dump())
    return ProductRead.model_validate(p)


@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    p = catalog.update_product(db, product_id, payload.model_dump(exclude_unset=True))
    return ProductRead.model_validate(p)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    catalog.delete_product(db, product_id)
    return Response(status_code=204)
