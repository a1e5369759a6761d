"""
Access gate.

Prédicats d'autorisation utilisés par le ledger et le workflow d'achat,
plus l'authentification par comparaison de hash.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from sqlalchemy.orm import Session

from stockroom.app.db.models.models_v1 import Product, User
from stockroom.app.db.models.core_types import Role
from stockroom.services.errors import Unauthorized, ValidationError

logger = logging.getLogger(__name__)

APPROVER_ROLES = {Role.administrator, Role.manager}
ARCHIVER_ROLES = {Role.administrator}


def can_approve(user: User) -> bool:
    return user.role in APPROVER_ROLES


def can_receive(user: User) -> bool:
    # le rôle seul ne suffit pas, même administrateur
    return bool(user.can_receive_orders)


def can_archive(user: User) -> bool:
    return user.role in ARCHIVER_ROLES


def can_handle_product(user: User, product: Product) -> bool:
    """Staff : uniquement les produits de ses catégories autorisées."""
    if user.role in APPROVER_ROLES:
        return True
    if product.category_id is None:
        return False
    return product.category_id in set(user.category_ids or [])


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def hash_credential(credential: str) -> str:
    # Format historique : SHA-256 hex non salé. Ne pas changer sans migration des hashes.
    return hashlib.sha256(credential.encode("utf-8")).hexdigest()


def resolve_actor(db: Session, email: str) -> User:
    """Utilisateur appelant ; inconnu => Unauthorized (aucun rôle)."""
    user = db.get(User, normalize_email(email))
    if not user:
        raise Unauthorized("Unknown user")
    return user


def authenticate(db: Session, email: str, credential: str) -> User:
    email = normalize_email(email)
    if not email or not credential:
        raise ValidationError("Email and credential are required")

    user = db.get(User, email)
    if not user or not hmac.compare_digest(user.password_hash, hash_credential(credential)):
        logger.warning("login refused for %s", email)
        raise Unauthorized("Invalid email or credential")
    return user
