import pytest
from sqlalchemy import func, select

from stockroom.app.db.models.models_v1 import (
    Movement,
    Product,
    PurchaseRequest,
    PurchaseRequestItem,
    User,
)
from stockroom.app.db.models.core_types import MovementType, Role
from stockroom.services import catalog, ledger, procurement
from stockroom.services.errors import Conflict, NotFound, ValidationError
from stockroom.services.procurement import RequestLine


def _count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


# ---------- products ----------
def test_empty_barcode_is_stored_as_null(db_session):
    a = catalog.create_product(db_session, {"name": "Gloves", "unit": "box", "barcode": ""})
    b = catalog.create_product(db_session, {"name": "Masks", "unit": "box", "barcode": "   "})

    assert a.barcode is None
    assert b.barcode is None
    assert _count(db_session, Product) == 2


def test_duplicate_barcode_is_a_conflict(db_session):
    catalog.create_product(db_session, {"name": "Gloves", "unit": "box", "barcode": "123"})
    with pytest.raises(Conflict):
        catalog.create_product(db_session, {"name": "Other gloves", "unit": "box", "barcode": " 123 "})

    other = catalog.create_product(db_session, {"name": "Masks", "unit": "box"})
    with pytest.raises(Conflict):
        catalog.update_product(db_session, other.id, {"barcode": "123"})


def test_create_product_checks_references_and_minimum(db_session):
    with pytest.raises(NotFound):
        catalog.create_product(db_session, {"name": "Gloves", "unit": "box", "category_id": 42})
    with pytest.raises(ValidationError):
        catalog.create_product(db_session, {"name": "Gloves", "unit": "box", "minimum_stock": -1})
    with pytest.raises(ValidationError):
        catalog.create_product(db_session, {"name": "  ", "unit": "box"})
    assert _count(db_session, Product) == 0


def test_update_product_is_a_partial_merge(db_session, product, category):
    updated = catalog.update_product(db_session, product.id, {"minimum_stock": 12})

    assert updated.minimum_stock == 12
    assert updated.name == "Bleach 1L"
    assert updated.category.name == "Cleaning"


def test_update_rejects_unknown_or_null_required_fields(db_session, product):
    with pytest.raises(ValidationError):
        catalog.update_product(db_session, product.id, {"colour": "blue"})
    with pytest.raises(ValidationError):
        catalog.update_product(db_session, product.id, {"id": 99})
    with pytest.raises(ValidationError):
        catalog.update_product(db_session, product.id, {"name": None})


def test_delete_product_removes_movements_and_request_lines(db_session, product, people):
    other = catalog.create_product(db_session, {"name": "Soap", "unit": "unit"})
    ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=3, acting_user_email="bob@x.com"
    )
    pr = procurement.create_request(
        db_session,
        requester_email="alice@x.com",
        items=[
            RequestLine(product_id=product.id, quantity=1, unit="bottle"),
            RequestLine(product_id=other.id, quantity=2, unit="unit"),
        ],
    )

    catalog.delete_product(db_session, product.id)

    assert _count(db_session, Movement) == 0
    assert _count(db_session, PurchaseRequestItem) == 1
    # la demande survit avec ses autres lignes
    assert [i.product_id for i in procurement.get_request(db_session, pr.id).items] == [other.id]
    with pytest.raises(NotFound):
        catalog.get_product(db_session, product.id)


# ---------- named entities ----------
def test_named_entities_are_unique(db_session):
    catalog.create_supplier(db_session, {"name": "Acme", "phone_number": "+33 1 23"})
    with pytest.raises(Conflict):
        catalog.create_supplier(db_session, {"name": " Acme "})

    wh = catalog.create_warehouse(db_session, {"name": "Main", "location": "Dock A"})
    catalog.create_warehouse(db_session, {"name": "Annex"})
    with pytest.raises(Conflict):
        catalog.update_warehouse(db_session, wh.id, {"name": "Annex"})

    assert [w.name for w in catalog.list_warehouses(db_session)] == ["Annex", "Main"]


def test_delete_category_detaches_products_and_user_scopes(db_session, product, category, people):
    catalog.delete_category(db_session, category.id)

    db_session.expire_all()
    assert db_session.get(Product, product.id).category_id is None
    assert db_session.get(User, "alice@x.com").category_ids == []
    assert catalog.list_categories(db_session) == []


def test_delete_supplier_and_warehouse_detach_products(db_session):
    sup = catalog.create_supplier(db_session, {"name": "Acme"})
    wh = catalog.create_warehouse(db_session, {"name": "Main"})
    p = catalog.create_product(
        db_session, {"name": "Gloves", "unit": "box", "supplier_id": sup.id, "warehouse_id": wh.id}
    )

    catalog.delete_supplier(db_session, sup.id)
    catalog.delete_warehouse(db_session, wh.id)

    db_session.expire_all()
    p = catalog.get_product(db_session, p.id)
    assert p.supplier_id is None and p.warehouse_id is None


def test_delete_area_detaches_users(db_session):
    area = catalog.create_area(db_session, {"name": "North"})
    catalog.create_user(
        db_session, {"email": "erin@x.com", "name": "Erin", "password": "pw", "area_id": area.id}
    )

    catalog.delete_area(db_session, area.id)

    db_session.expire_all()
    assert catalog.get_user(db_session, "erin@x.com").area_id is None


def test_delete_unknown_entity_is_not_found(db_session):
    with pytest.raises(NotFound):
        catalog.delete_category(db_session, 404)
    with pytest.raises(NotFound):
        catalog.delete_user(db_session, "ghost@x.com")


# ---------- users ----------
def test_create_user_normalizes_email_and_hashes_password(db_session):
    user = catalog.create_user(
        db_session, {"email": " Erin@X.COM ", "name": "Erin", "password": "pw", "role": "manager"}
    )

    assert user.email == "erin@x.com"
    assert user.role == Role.manager
    assert user.password_hash != "pw"
    assert user.can_receive_orders is False

    with pytest.raises(Conflict):
        catalog.create_user(db_session, {"email": "erin@x.com", "name": "Erin bis", "password": "pw"})
    with pytest.raises(ValidationError):
        catalog.create_user(db_session, {"email": "frank@x.com", "name": "Frank"})


def test_update_user_cannot_change_email(db_session, people):
    with pytest.raises(ValidationError):
        catalog.update_user(db_session, "alice@x.com", {"email": "new@x.com"})

    user = catalog.update_user(db_session, "ALICE@x.com", {"can_receive_orders": True})
    assert user.can_receive_orders is True


def test_delete_user_detaches_history(db_session, product, people):
    ledger.record_movement(
        db_session, product_id=product.id, movement_type=MovementType.inflow, quantity=3, acting_user_email="alice@x.com"
    )
    pr = procurement.create_request(
        db_session,
        requester_email="alice@x.com",
        items=[RequestLine(product_id=product.id, quantity=1, unit="bottle")],
    )

    catalog.delete_user(db_session, "alice@x.com")

    db_session.expire_all()
    assert db_session.scalars(select(Movement.user_email)).all() == [None]
    assert db_session.get(PurchaseRequest, pr.id).requester_email is None
    assert ledger.current_stock(db_session, product.id) == 3
