from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.stock_level import MovementCreate, MovementRead, MovementRecorded
from stockroom.services import ledger

router = APIRouter(prefix="/movements")


@router.get("", response_model=list[MovementRead])
def list_recent_movements(
    limit: int = Query(default=200, gt=0, le=1000),
    db: Session = Depends(get_db),
):
    return [MovementRead.model_validate(m) for m in ledger.recent_movements(db, limit)]


@router.post("", response_model=MovementRecorded, status_code=201)
def record_movement(payload: MovementCreate, db: Session = Depends(get_db)):
    mv, stock = ledger.record_movement(
        db,
        product_id=payload.product_id,
        movement_type=payload.movement_type,
        quantity=payload.quantity,
        acting_user_email=payload.acting_user_email,
        direction=payload.direction,
        reason=payload.reason,
    )
    return MovementRecorded(movement=MovementRead.model_validate(mv), current_stock=stock)
