"""
Procurement service.

Cycle de vie des demandes d'achat :

    PENDING -> APPROVED | REJECTED
    APPROVED -> SENT -> RECEIVED
    APPROVED | SENT | RECEIVED | REJECTED -> ARCHIVED

Chaque transition est gardée par un prédicat de l'access gate.
Ce module ne touche JAMAIS au ledger : une demande RECEIVED ne crée
aucun mouvement de stock (la réconciliation reste côté appelant).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.orm.exc import StaleDataError

from stockroom.app.db.models.models_v1 import (
    Product,
    PurchaseRequest,
    PurchaseRequestItem,
    User,
)
from stockroom.app.db.models.core_types import RequestStatus
from stockroom.app.time_utils import utcnow
from stockroom.services import access
from stockroom.services.errors import (
    Conflict,
    InvalidTransition,
    NotFound,
    Unauthorized,
    ValidationError,
)

logger = logging.getLogger(__name__)


# (from, to) -> prédicat d'autorisation sur l'appelant
TRANSITIONS: dict[tuple[RequestStatus, RequestStatus], Callable[[User], bool]] = {
    (RequestStatus.pending, RequestStatus.approved): access.can_approve,
    (RequestStatus.pending, RequestStatus.rejected): access.can_approve,
    (RequestStatus.approved, RequestStatus.sent): access.can_approve,
    (RequestStatus.sent, RequestStatus.received): access.can_receive,
    (RequestStatus.approved, RequestStatus.archived): access.can_archive,
    (RequestStatus.sent, RequestStatus.archived): access.can_archive,
    (RequestStatus.received, RequestStatus.archived): access.can_archive,
    (RequestStatus.rejected, RequestStatus.archived): access.can_archive,
}


def can_transition(from_status: RequestStatus, to_status: RequestStatus) -> bool:
    return (RequestStatus(from_status), RequestStatus(to_status)) in TRANSITIONS


def allowed_targets(from_status: RequestStatus) -> set[RequestStatus]:
    return {to for (frm, to) in TRANSITIONS if frm == RequestStatus(from_status)}


@dataclass(frozen=True)
class RequestLine:
    product_id: int
    quantity: int
    unit: str


def _with_associations(stmt):
    return stmt.options(
        selectinload(PurchaseRequest.items)
        .joinedload(PurchaseRequestItem.product)
        .options(
            joinedload(Product.category),
            joinedload(Product.supplier),
            joinedload(Product.warehouse),
        ),
        joinedload(PurchaseRequest.requester),
        joinedload(PurchaseRequest.approver),
        joinedload(PurchaseRequest.receiver),
    )


def get_request(db: Session, request_id: int) -> PurchaseRequest:
    pr = (
        db.execute(
            _with_associations(select(PurchaseRequest).where(PurchaseRequest.id == request_id))
            .execution_options(populate_existing=True)
        )
        .unique()
        .scalar_one_or_none()
    )
    if not pr:
        raise NotFound(f"Purchase request {request_id} not found")
    return pr


def list_requests(db: Session) -> list[PurchaseRequest]:
    stmt = _with_associations(select(PurchaseRequest)).order_by(
        PurchaseRequest.requested_at.desc(),
        PurchaseRequest.id.desc(),
    )
    return list(db.execute(stmt).unique().scalars())


def _validate_line(db: Session, position: int, line) -> PurchaseRequestItem:
    quantity = line.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"Item {position}: quantity must be a positive integer")
    unit = (line.unit or "").strip()
    if not unit:
        raise ValidationError(f"Item {position}: unit is required")
    if not db.get(Product, line.product_id):
        raise NotFound(f"Item {position}: product {line.product_id} not found")
    return PurchaseRequestItem(product_id=line.product_id, quantity=quantity, unit=unit)


def create_request(
    db: Session,
    *,
    requester_email: str,
    items: Sequence[RequestLine],
    notes: str | None = None,
) -> PurchaseRequest:
    """
    Crée l'en-tête et toutes ses lignes dans UNE transaction.
    Une seule ligne invalide => rollback complet, aucune ligne persistée.
    """
    if not items:
        raise ValidationError("A purchase request must contain at least one item")

    requester = access.resolve_actor(db, requester_email)

    try:
        pr = PurchaseRequest(
            status=RequestStatus.pending,
            notes=notes,
            requested_at=utcnow(),
            requester_email=requester.email,
        )
        db.add(pr)
        db.flush()  # get pr.id

        for position, line in enumerate(items, start=1):
            pr.items.append(_validate_line(db, position, line))

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("purchase request %s created by %s (%d items)", pr.id, requester.email, len(items))
    return get_request(db, pr.id)


def transition(
    db: Session,
    *,
    request_id: int,
    target_status: RequestStatus,
    caller_email: str,
) -> PurchaseRequest:
    """
    Lecture / validation / écriture atomique du statut.

    - table de transitions vérifiée AVANT le rôle (InvalidTransition quel que soit l'appelant)
    - écriture gardée par la colonne version : deux transitions concurrentes
      depuis le même état ne peuvent pas réussir toutes les deux
    """
    target_status = RequestStatus(target_status)

    pr = (
        db.execute(
            select(PurchaseRequest).where(PurchaseRequest.id == request_id).with_for_update()
        )
        .scalar_one_or_none()
    )
    if not pr:
        raise NotFound(f"Purchase request {request_id} not found")

    current = pr.status
    gate = TRANSITIONS.get((current, target_status))
    if gate is None:
        logger.warning("refused transition %s -> %s on request %s", current.value, target_status.value, pr.id)
        raise InvalidTransition(
            f"Cannot move purchase request {pr.id} from {current.value} to {target_status.value}"
        )

    caller = access.resolve_actor(db, caller_email)
    if not gate(caller):
        logger.warning("user %s not allowed to move request %s to %s", caller.email, pr.id, target_status.value)
        raise Unauthorized(
            f"User {caller.email} is not allowed to move a {current.value} request to {target_status.value}"
        )

    now = utcnow()
    pr.status = target_status
    if target_status == RequestStatus.approved:
        pr.approved_by = caller.email
        pr.approved_at = now
    elif target_status == RequestStatus.received:
        pr.received_by = caller.email
        pr.received_at = now

    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise Conflict(f"Purchase request {request_id} was modified concurrently, reload and retry")

    logger.info("purchase request %s: %s -> %s by %s", request_id, current.value, target_status.value, caller.email)
    return get_request(db, request_id)


def delete_request(db: Session, request_id: int) -> None:
    pr = db.get(PurchaseRequest, request_id)
    if not pr:
        raise NotFound(f"Purchase request {request_id} not found")

    # lignes : cascade ORM + ON DELETE CASCADE
    try:
        db.delete(pr)
        db.commit()
    except StaleDataError:
        db.rollback()
        raise Conflict(f"Purchase request {request_id} was modified concurrently, reload and retry")
    except Exception:
        db.rollback()
        raise

    logger.info("purchase request %s deleted", request_id)
