from datetime import timedelta

import pytest
from sqlalchemy import func, select

from stockroom.app.db.models.models_v1 import Movement, Product
from stockroom.app.db.models.core_types import AdjustmentDirection, MovementType
from stockroom.services import ledger
from stockroom.services.errors import NotFound, Unauthorized, ValidationError


def _movement_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(Movement))


def test_inflow_then_outflow_gives_derived_stock(db_session, product, people):
    """
    GIVEN un produit sans mouvement
    WHEN Inflow 10 puis Outflow 3
    THEN stock dérivé == 7
    """
    _, stock = ledger.record_movement(
        db_session,
        product_id=product.id,
        movement_type=MovementType.inflow,
        quantity=10,
        acting_user_email="bob@x.com",
    )
    assert stock == 10

    mv, stock = ledger.record_movement(
        db_session,
        product_id=product.id,
        movement_type=MovementType.outflow,
        quantity=3,
        acting_user_email="bob@x.com",
    )
    assert stock == 7
    assert ledger.current_stock(db_session, product.id) == 7
    assert mv.id is not None
    assert mv.user_email == "bob@x.com"
    assert mv.happened_at is not None


def test_stock_is_isolated_per_product(db_session, product, people):
    other = Product(name="Soap", unit="unit", minimum_stock=0)
    db_session.add(other)
    db_session.commit()

    ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=4, acting_user_email="bob@x.com"
    )
    ledger.record_movement(
        db_session, product_id=other.id, movement_type=MovementType.inflow, quantity=50, acting_user_email="bob@x.com"
    )

    assert ledger.current_stock(db_session, product.id) == 4
    assert ledger.current_stock(db_session, other.id) == 50
    assert ledger.stock_levels(db_session) == {product.id: 4, other.id: 50}


def test_product_without_movements_has_zero_stock(db_session, product):
    assert ledger.current_stock(db_session, product.id) == 0
    assert ledger.stock_levels(db_session, [product.id]) == {product.id: 0}


@pytest.mark.parametrize("quantity", [0, -1, -10, 2.5, True])
def test_non_positive_or_non_integer_quantity_is_rejected(db_session, product, people, quantity):
    ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=5, acting_user_email="bob@x.com"
    )

    with pytest.raises(ValidationError):
        ledger.record_movement(
            db_session,
            product_id=product.id,
            movement_type=MovementType.outflow,
            quantity=quantity,
            acting_user_email="bob@x.com",
        )

    assert ledger.current_stock(db_session, product.id) == 5
    assert _movement_count(db_session) == 1


def test_unknown_product_is_not_found(db_session, people):
    with pytest.raises(NotFound):
        ledger.record_movement(
            db_session, product_id=999, movement_type=MovementType.inflow, quantity=1, acting_user_email="bob@x.com"
        )
    with pytest.raises(NotFound):
        ledger.current_stock(db_session, 999)


def test_outflow_cannot_drive_stock_negative(db_session, product, people):
    ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=2, acting_user_email="bob@x.com"
    )

    with pytest.raises(ValidationError):
        ledger.record_movement(
            db_session, product_id=product.id, movement_type=MovementType.outflow, quantity=3, acting_user_email="bob@x.com"
        )

    # rollback : le mouvement refusé n'existe pas
    assert _movement_count(db_session) == 1
    assert ledger.current_stock(db_session, product.id) == 2


def test_adjustment_uses_direction_and_may_go_negative(db_session, product, people):
    ledger.record_movement(
        db_session,
        product_id=product.id,
        movement_type=MovementType.adjustment,
        direction=AdjustmentDirection.increase,
        quantity=3,
        acting_user_email="bob@x.com",
    )
    _, stock = ledger.record_movement(
        db_session,
        product_id=product.id,
        movement_type=MovementType.adjustment,
        direction=AdjustmentDirection.decrease,
        quantity=5,
        acting_user_email="bob@x.com",
        reason="physical count",
    )
    assert stock == -2


def test_direction_rules(db_session, product, people):
    with pytest.raises(ValidationError):
        ledger.record_movement(
            db_session, product_id=product.id, movement_type=MovementType.adjustment, quantity=1, acting_user_email="bob@x.com"
        )
    with pytest.raises(ValidationError):
        ledger.record_movement(
            db_session,
            product_id=product.id,
            movement_type=MovementType.inflow,
            direction=AdjustmentDirection.increase,
            quantity=1,
            acting_user_email="bob@x.com",
        )
    assert _movement_count(db_session) == 0


def test_staff_limited_to_authorized_categories(db_session, product, people):
    # alice est autorisée sur la catégorie du produit
    _, stock = ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=1, acting_user_email="alice@x.com"
    )
    assert stock == 1

    # carol (staff) n'a aucune catégorie
    with pytest.raises(Unauthorized):
        ledger.record_movement(
            db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=1, acting_user_email="carol@x.com"
        )

    with pytest.raises(Unauthorized):
        ledger.record_movement(
            db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=1, acting_user_email="ghost@x.com"
        )


def test_recent_movements_newest_first_with_insertion_tiebreak(db_session, product, people, monkeypatch):
    from datetime import datetime, timezone

    fixed = datetime(2026, 1, 1, tzinfo=timezone.utc)
    monkeypatch.setattr(ledger, "utcnow", lambda: fixed)

    ids = []
    for qty in (1, 2, 3):
        mv, _ = ledger.record_movement(
            db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=qty, acting_user_email="bob@x.com"
        )
        ids.append(mv.id)

    recent = ledger.recent_movements(db_session, 2)
    assert [m.id for m in recent] == [ids[2], ids[1]]

    with pytest.raises(ValidationError):
        ledger.recent_movements(db_session, 0)


def test_products_below_minimum(db_session, product, people):
    # minimum_stock = 5
    ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=4, acting_user_email="bob@x.com"
    )
    assert [(p.id, s) for p, s in ledger.products_below_minimum(db_session)] == [(product.id, 4)]

    ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=1, acting_user_email="bob@x.com"
    )
    assert ledger.products_below_minimum(db_session) == []


def test_happened_at_reads_back_as_utc(db_session, product, people):
    mv, _ = ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=1, acting_user_email="bob@x.com"
    )
    db_session.expire_all()

    reloaded = ledger.recent_movements(db_session, 1)[0]
    assert reloaded.id == mv.id
    assert reloaded.happened_at.utcoffset() == timedelta(0)
