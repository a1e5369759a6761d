"""
Catalog service : CRUD des données de référence.

Les mises à jour sont des merges partiels sur une liste blanche explicite
par entité ; tout champ hors liste est refusé (ValidationError).

Politique de suppression (explicite, pas de cascade ORM implicite) :
- category / supplier / warehouse -> référence produit mise à NULL
- area                            -> area des utilisateurs mise à NULL
- product                         -> mouvements + lignes de demandes supprimés
- user                            -> auteur des mouvements / acteurs des demandes mis à NULL
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from stockroom.app.db.models.models_v1 import (
    Area,
    Category,
    Movement,
    Product,
    PurchaseRequest,
    PurchaseRequestItem,
    Supplier,
    User,
    Warehouse,
)
from stockroom.app.db.models.core_types import Role
from stockroom.services.access import hash_credential, normalize_email
from stockroom.services.errors import Conflict, NotFound, ValidationError

logger = logging.getLogger(__name__)


AREA_FIELDS = {"name"}
WAREHOUSE_FIELDS = {"name", "location"}
SUPPLIER_FIELDS = {"name", "phone_number"}
CATEGORY_FIELDS = {"name", "is_stockable"}
PRODUCT_FIELDS = {"name", "unit", "minimum_stock", "barcode", "supplier_id", "category_id", "warehouse_id"}
# email = identité, jamais modifiable ; password est haché avant écriture
USER_FIELDS = {"name", "role", "password", "area_id", "category_ids", "can_receive_orders"}

# champs qui ne peuvent pas être remis à NULL par un update
_REQUIRED = {"name", "unit", "minimum_stock", "is_stockable", "role", "password", "category_ids", "can_receive_orders"}


# ---------- Helpers ----------
def _get_or_404(db: Session, model, ident, label: str):
    obj = db.get(model, ident)
    if not obj:
        raise NotFound(f"{label} {ident} not found")
    return obj


def _check_fields(changes: Mapping[str, Any], allowed: set[str]) -> dict[str, Any]:
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError(f"Unknown or read-only fields: {', '.join(sorted(unknown))}")
    for key in _REQUIRED & set(changes):
        if changes[key] is None:
            raise ValidationError(f"Field '{key}' cannot be null")
    return dict(changes)


def _clean_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


def _ensure_unique(db: Session, column, value, label: str, exclude=None) -> None:
    if value is None:
        return
    stmt = select(column.class_).where(column == value)
    existing = db.execute(stmt).scalars().first()
    if existing is not None and existing is not exclude:
        raise Conflict(f"{label} '{value}' already exists")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict(f"Uniqueness or reference violation: {e.orig}") from e
    except Exception:
        db.rollback()
        raise


def normalize_barcode(value: str | None) -> str | None:
    # "" == pas de code-barres (sinon collision sur la contrainte unique)
    if value is None:
        return None
    value = value.strip()
    return value or None


# ---------- Named entities (area / warehouse / supplier / category) ----------
def _create_named(db: Session, model, data: Mapping[str, Any], allowed: set[str], label: str):
    data = _check_fields(data, allowed)
    data["name"] = _clean_name(data.get("name"))
    _ensure_unique(db, model.name, data["name"], label)

    obj = model(**data)
    db.add(obj)
    _commit(db)
    db.refresh(obj)
    return obj


def _update_named(db: Session, model, ident: int, changes: Mapping[str, Any], allowed: set[str], label: str):
    obj = _get_or_404(db, model, ident, label)
    changes = _check_fields(changes, allowed)
    if "name" in changes:
        changes["name"] = _clean_name(changes["name"])
        _ensure_unique(db, model.name, changes["name"], label, exclude=obj)

    for key, value in changes.items():
        setattr(obj, key, value)
    _commit(db)
    db.refresh(obj)
    return obj


def list_areas(db: Session) -> list[Area]:
    return list(db.execute(select(Area).order_by(Area.name)).scalars())


def create_area(db: Session, data: Mapping[str, Any]) -> Area:
    return _create_named(db, Area, data, AREA_FIELDS, "Area")


def update_area(db: Session, area_id: int, changes: Mapping[str, Any]) -> Area:
    return _update_named(db, Area, area_id, changes, AREA_FIELDS, "Area")


def delete_area(db: Session, area_id: int) -> None:
    area = _get_or_404(db, Area, area_id, "Area")
    db.execute(update(User).where(User.area_id == area_id).values(area_id=None))
    db.delete(area)
    _commit(db)
    logger.info("area %s deleted (users detached)", area_id)


def list_warehouses(db: Session) -> list[Warehouse]:
    return list(db.execute(select(Warehouse).order_by(Warehouse.name)).scalars())


def create_warehouse(db: Session, data: Mapping[str, Any]) -> Warehouse:
    return _create_named(db, Warehouse, data, WAREHOUSE_FIELDS, "Warehouse")


def update_warehouse(db: Session, warehouse_id: int, changes: Mapping[str, Any]) -> Warehouse:
    return _update_named(db, Warehouse, warehouse_id, changes, WAREHOUSE_FIELDS, "Warehouse")


def delete_warehouse(db: Session, warehouse_id: int) -> None:
    wh = _get_or_404(db, Warehouse, warehouse_id, "Warehouse")
    db.execute(update(Product).where(Product.warehouse_id == warehouse_id).values(warehouse_id=None))
    db.delete(wh)
    _commit(db)
    logger.info("warehouse %s deleted (products detached)", warehouse_id)


def list_suppliers(db: Session) -> list[Supplier]:
    return list(db.execute(select(Supplier).order_by(Supplier.name)).scalars())


def create_supplier(db: Session, data: Mapping[str, Any]) -> Supplier:
    return _create_named(db, Supplier, data, SUPPLIER_FIELDS, "Supplier")


def update_supplier(db: Session, supplier_id: int, changes: Mapping[str, Any]) -> Supplier:
    return _update_named(db, Supplier, supplier_id, changes, SUPPLIER_FIELDS, "Supplier")


def delete_supplier(db: Session, supplier_id: int) -> None:
    sup = _get_or_404(db, Supplier, supplier_id, "Supplier")
    db.execute(update(Product).where(Product.supplier_id == supplier_id).values(supplier_id=None))
    db.delete(sup)
    _commit(db)
    logger.info("supplier %s deleted (products detached)", supplier_id)


def list_categories(db: Session) -> list[Category]:
    return list(db.execute(select(Category).order_by(Category.name)).scalars())


def create_category(db: Session, data: Mapping[str, Any]) -> Category:
    return _create_named(db, Category, data, CATEGORY_FIELDS, "Category")


def update_category(db: Session, category_id: int, changes: Mapping[str, Any]) -> Category:
    return _update_named(db, Category, category_id, changes, CATEGORY_FIELDS, "Category")


def delete_category(db: Session, category_id: int) -> None:
    cat = _get_or_404(db, Category, category_id, "Category")
    db.execute(update(Product).where(Product.category_id == category_id).values(category_id=None))

    # retire aussi la catégorie des périmètres staff
    for user in db.execute(select(User)).scalars():
        if category_id in (user.category_ids or []):
            user.category_ids = [cid for cid in user.category_ids if cid != category_id]

    db.delete(cat)
    _commit(db)
    logger.info("category %s deleted (products detached)", category_id)


# ---------- Products ----------
def _product_query():
    return select(Product).options(
        joinedload(Product.supplier),
        joinedload(Product.category),
        joinedload(Product.warehouse),
    )


def _check_product_refs(db: Session, data: Mapping[str, Any]) -> None:
    for key, model, label in (
        ("supplier_id", Supplier, "Supplier"),
        ("category_id", Category, "Category"),
        ("warehouse_id", Warehouse, "Warehouse"),
    ):
        if data.get(key) is not None:
            _get_or_404(db, model, data[key], label)


def _check_minimum_stock(data: Mapping[str, Any]) -> None:
    if "minimum_stock" in data and data["minimum_stock"] < 0:
        raise ValidationError("Minimum stock cannot be negative")


def list_products(db: Session) -> list[Product]:
    return list(db.execute(_product_query().order_by(Product.name, Product.id)).scalars())


def get_product(db: Session, product_id: int) -> Product:
    product = db.execute(_product_query().where(Product.id == product_id)).scalar_one_or_none()
    if not product:
        raise NotFound(f"Product {product_id} not found")
    return product


def create_product(db: Session, data: Mapping[str, Any]) -> Product:
    data = _check_fields(data, PRODUCT_FIELDS)
    data["name"] = _clean_name(data.get("name"))
    data["barcode"] = normalize_barcode(data.get("barcode"))
    _check_minimum_stock(data)
    _check_product_refs(db, data)
    _ensure_unique(db, Product.barcode, data["barcode"], "Barcode")

    product = Product(**data)
    db.add(product)
    _commit(db)
    logger.info("product %s created", product.id)
    return get_product(db, product.id)


def update_product(db: Session, product_id: int, changes: Mapping[str, Any]) -> Product:
    product = _get_or_404(db, Product, product_id, "Product")
    changes = _check_fields(changes, PRODUCT_FIELDS)
    if "name" in changes:
        changes["name"] = _clean_name(changes["name"])
    if "barcode" in changes:
        changes["barcode"] = normalize_barcode(changes["barcode"])
        _ensure_unique(db, Product.barcode, changes["barcode"], "Barcode", exclude=product)
    _check_minimum_stock(changes)
    _check_product_refs(db, changes)

    for key, value in changes.items():
        setattr(product, key, value)
    _commit(db)
    db.expire(product)
    return get_product(db, product_id)


def delete_product(db: Session, product_id: int) -> None:
    product = _get_or_404(db, Product, product_id, "Product")
    db.execute(delete(Movement).where(Movement.product_id == product_id))
    db.execute(delete(PurchaseRequestItem).where(PurchaseRequestItem.product_id == product_id))
    db.delete(product)
    _commit(db)
    logger.info("product %s deleted with its movements and request lines", product_id)


# ---------- Users ----------
def _check_user_refs(db: Session, data: Mapping[str, Any]) -> None:
    if data.get("area_id") is not None:
        _get_or_404(db, Area, data["area_id"], "Area")
    for cid in data.get("category_ids") or []:
        _get_or_404(db, Category, cid, "Category")


def _hash_password(data: dict[str, Any]) -> None:
    if "password" in data:
        password = data.pop("password")
        if not password:
            raise ValidationError("Password is required")
        data["password_hash"] = hash_credential(password)


def list_users(db: Session) -> list[User]:
    return list(db.execute(select(User).order_by(User.email)).scalars())


def get_user(db: Session, email: str) -> User:
    return _get_or_404(db, User, normalize_email(email), "User")


def create_user(db: Session, data: Mapping[str, Any]) -> User:
    data = dict(data)
    email = normalize_email(data.pop("email", ""))
    if not email:
        raise ValidationError("Email is required")
    if not data.get("password"):
        raise ValidationError("Password is required")

    data = _check_fields(data, USER_FIELDS)
    data["name"] = _clean_name(data.get("name"))
    data["role"] = Role(data.get("role", Role.staff))
    data["category_ids"] = sorted(set(data.get("category_ids") or []))
    _check_user_refs(db, data)
    _hash_password(data)
    if db.get(User, email):
        raise Conflict(f"User '{email}' already exists")

    user = User(email=email, **data)
    db.add(user)
    _commit(db)
    db.refresh(user)
    logger.info("user %s created (role=%s)", email, user.role.value)
    return user


def update_user(db: Session, email: str, changes: Mapping[str, Any]) -> User:
    user = get_user(db, email)
    changes = _check_fields(changes, USER_FIELDS)
    if "name" in changes:
        changes["name"] = _clean_name(changes["name"])
    if "role" in changes:
        changes["role"] = Role(changes["role"])
    if "category_ids" in changes:
        changes["category_ids"] = sorted(set(changes["category_ids"]))
    _check_user_refs(db, changes)
    _hash_password(changes)

    for key, value in changes.items():
        setattr(user, key, value)
    _commit(db)
    db.refresh(user)
    return user


def delete_user(db: Session, email: str) -> None:
    user = get_user(db, email)
    email = user.email
    db.execute(update(Movement).where(Movement.user_email == email).values(user_email=None))
    db.execute(
        update(PurchaseRequest).where(PurchaseRequest.requester_email == email).values(requester_email=None)
    )
    db.execute(update(PurchaseRequest).where(PurchaseRequest.approved_by == email).values(approved_by=None))
    db.execute(update(PurchaseRequest).where(PurchaseRequest.received_by == email).values(received_by=None))
    db.delete(user)
    _commit(db)
    logger.info("user %s deleted (movements and requests detached)", email)
