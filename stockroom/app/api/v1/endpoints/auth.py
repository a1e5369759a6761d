from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.catalog import UserRead
from stockroom.app.schemas.snapshot import LoginRequest
from stockroom.services import access

router = APIRouter()


@router.post("/login", response_model=UserRead)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = access.authenticate(db, payload.email, payload.credential)
    return UserRead.model_validate(user)
