from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import case, select, func
from sqlalchemy.orm import Session

from stockroom.app.db.models.models_v1 import Movement, Product
from stockroom.app.db.models.core_types import AdjustmentDirection, MovementType
from stockroom.app.time_utils import utcnow
from stockroom.services import access
from stockroom.services.errors import NotFound, Unauthorized, ValidationError

logger = logging.getLogger(__name__)


# Contribution signée d'une ligne du ledger
SIGNED_QUANTITY = case(
    (Movement.movement_type == MovementType.inflow, Movement.quantity),
    (Movement.movement_type == MovementType.outflow, -Movement.quantity),
    (Movement.direction == AdjustmentDirection.decrease, -Movement.quantity),
    else_=Movement.quantity,
)


def _stock_of(db: Session, product_id: int) -> int:
    total = db.execute(
        select(func.coalesce(func.sum(SIGNED_QUANTITY), 0)).where(Movement.product_id == product_id)
    ).scalar_one()
    return int(total)


def _validate_quantity(quantity) -> int:
    # bool est un int en Python : on le refuse explicitement
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be a positive integer")
    return quantity


def _validate_direction(movement_type: MovementType, direction: AdjustmentDirection | None):
    if movement_type == MovementType.adjustment:
        if direction is None:
            raise ValidationError("An ADJUSTMENT requires a direction (INCREASE or DECREASE)")
        return AdjustmentDirection(direction)
    if direction is not None:
        raise ValidationError(f"Direction is only allowed on ADJUSTMENT movements, not {movement_type.value}")
    return None


def record_movement(
    db: Session,
    *,
    product_id: int,
    movement_type: MovementType,
    quantity: int,
    acting_user_email: str,
    direction: AdjustmentDirection | None = None,
    reason: str | None = None,
) -> tuple[Movement, int]:
    """
    Ajoute un mouvement au ledger et retourne (mouvement, stock dérivé).

    Règles :
    - quantité entière > 0, le signe vient du type (et de la direction pour ADJUSTMENT)
    - un OUTFLOW ne peut pas rendre le stock négatif ; seul un
      ADJUSTMENT/DECREASE le peut (correction d'inventaire)

    L'insert est flushé AVANT l'agrégat : le verrou d'écriture est pris,
    la somme est calculée sur un ledger cohérent dans la même transaction.
    """
    movement_type = MovementType(movement_type)
    quantity = _validate_quantity(quantity)
    direction = _validate_direction(movement_type, direction)

    product = (
        db.execute(select(Product).where(Product.id == product_id).with_for_update())
        .scalar_one_or_none()
    )
    if not product:
        raise NotFound(f"Product {product_id} not found")

    user = access.resolve_actor(db, acting_user_email)
    if not access.can_handle_product(user, product):
        raise Unauthorized(f"User {user.email} is not allowed to move stock of product {product.id}")

    try:
        mv = Movement(
            product_id=product.id,
            movement_type=movement_type,
            direction=direction,
            quantity=quantity,
            reason=reason,
            happened_at=utcnow(),
            user_email=user.email,
        )
        db.add(mv)
        db.flush()

        stock = _stock_of(db, product.id)
        if movement_type == MovementType.outflow and stock < 0:
            raise ValidationError(f"Insufficient stock (available={stock + quantity})")

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "movement %s recorded: product=%s type=%s qty=%s stock=%s",
        mv.id, product_id, movement_type.value, quantity, stock,
    )
    return mv, stock


def current_stock(db: Session, product_id: int) -> int:
    if not db.get(Product, product_id):
        raise NotFound(f"Product {product_id} not found")
    return _stock_of(db, product_id)


def stock_levels(db: Session, product_ids: Iterable[int] | None = None) -> dict[int, int]:
    """
    Stock dérivé de plusieurs produits en une requête GROUP BY.
    Un produit sans mouvement vaut 0.
    """
    if product_ids is None:
        ids = list(db.execute(select(Product.id)).scalars())
    else:
        ids = sorted({int(pid) for pid in product_ids if pid is not None})
    if not ids:
        return {}

    rows = db.execute(
        select(Movement.product_id, func.coalesce(func.sum(SIGNED_QUANTITY), 0))
        .where(Movement.product_id.in_(ids))
        .group_by(Movement.product_id)
    ).all()

    totals = {int(pid): int(qty) for pid, qty in rows}
    return {pid: totals.get(pid, 0) for pid in ids}


def recent_movements(db: Session, limit: int) -> list[Movement]:
    """Plus récents d'abord ; à horodatage égal, ordre d'insertion inverse."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError("Limit must be a positive integer")
    return list(
        db.execute(
            select(Movement)
            .order_by(Movement.happened_at.desc(), Movement.id.desc())
            .limit(limit)
        ).scalars()
    )


def products_below_minimum(db: Session) -> list[tuple[Product, int]]:
    products = db.execute(select(Product).order_by(Product.name, Product.id)).scalars().all()
    levels = stock_levels(db, [p.id for p in products])
    return [(p, levels[p.id]) for p in products if levels[p.id] < p.minimum_stock]
