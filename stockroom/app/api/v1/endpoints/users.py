from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.catalog import UserCreate, UserRead, UserUpdate
from stockroom.services import catalog

router = APIRouter(prefix="/users")


@router.get("", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db)):
    return [UserRead.model_validate(u) for u in catalog.list_users(db)]


@router.post("", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return UserRead.model_validate(catalog.create_user(db, payload.model_dump()))


@router.put("/{email}", response_model=UserRead)
def update_user(email: str, payload: UserUpdate, db: Session = Depends(get_db)):
    # email dans l'URL normalisé par le service ; non modifiable
    return UserRead.model_validate(catalog.update_user(db, email, payload.model_dump(exclude_unset=True)))


@router.delete("/{email}", status_code=204)
def delete_user(email: str, db: Session = Depends(get_db)):
    catalog.delete_user(db, email)
    return Response(status_code=204)
