from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from stockroom.services import catalog, ledger, procurement


def build_snapshot(db: Session, *, recent_movements_limit: int = 200) -> dict[str, Any]:
    """Etat initial du client : catalogue complet, derniers mouvements, toutes les demandes."""
    return {
        "users": catalog.list_users(db),
        "products": catalog.list_products(db),
        "suppliers": catalog.list_suppliers(db),
        "categories": catalog.list_categories(db),
        "warehouses": catalog.list_warehouses(db),
        "areas": catalog.list_areas(db),
        "movements": ledger.recent_movements(db, recent_movements_limit),
        "purchase_requests": procurement.list_requests(db),
    }
