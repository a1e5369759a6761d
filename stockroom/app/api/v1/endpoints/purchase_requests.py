from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db
from stockroom.app.schemas.purchase_request import (
    PurchaseRequestCreate,
    PurchaseRequestRead,
    PurchaseRequestTransition,
)
from stockroom.services import procurement
from stockroom.services.procurement import RequestLine

router = APIRouter(prefix="/purchase-requests")


@router.get("", response_model=list[PurchaseRequestRead])
def list_requests(db: Session = Depends(get_db)):
    return [PurchaseRequestRead.model_validate(pr) for pr in procurement.list_requests(db)]


@router.get("/{request_id}", response_model=PurchaseRequestRead)
def get_request(request_id: int, db: Session = Depends(get_db)):
    return PurchaseRequestRead.model_validate(procurement.get_request(db, request_id))


@router.post("", response_model=PurchaseRequestRead, status_code=201)
def create_request(payload: PurchaseRequestCreate, db: Session = Depends(get_db)):
    pr = procurement.create_request(
        db,
        requester_email=payload.requester_email,
        items=[RequestLine(product_id=i.product_id, quantity=i.quantity, unit=i.unit) for i in payload.items],
        notes=payload.notes,
    )
    return PurchaseRequestRead.model_validate(pr)


@router.put("/{request_id}", response_model=PurchaseRequestRead)
def transition_request(request_id: int, payload: PurchaseRequestTransition, db: Session = Depends(get_db)):
    pr = procurement.transition(
        db,
        request_id=request_id,
        target_status=payload.status,
        caller_email=payload.caller_email,
    )
    return PurchaseRequestRead.model_validate(pr)


@router.delete("/{request_id}", status_code=204)
def delete_request(request_id: int, db: Session = Depends(get_db)):
    procurement.delete_request(db, request_id)
    return Response(status_code=204)
