from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.catalog import AreaCreate, AreaRead, AreaUpdate
from stockroom.services import catalog

router = APIRouter(prefix="/areas")


@router.get("", response_model=list[AreaRead])
def list_areas(db: Session = Depends(get_db)):
    return [AreaRead.model_validate(x) for x in catalog.list_areas(db)]


@router.post("", response_model=AreaRead, status_code=201)
def create_area(payload: AreaCreate, db: Session = Depends(get_db)):
    return AreaRead.model_validate(catalog.create_area(db, payload.model_dump()))


@router.put("/{area_id}", response_model=AreaRead)
def update_area(area_id: int, payload: AreaUpdate, db: Session = Depends(get_db)):
    return AreaRead.model_validate(catalog.update_area(db, area_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{area_id}", status_code=204)
def delete_area(area_id: int, db: Session = Depends(get_db)):
    """Les utilisateurs rattachés perdent leur zone (area_id = NULL)."""
    catalog.delete_area(db, area_id)
    return Response(status_code=204)
