from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stockroom.app.api.deps import get_db, get_settings
from stockroom.app.core.config import Settings
from stockroom.app.schemas.snapshot import SnapshotRead
from stockroom.services.snapshot import build_snapshot

router = APIRouter()


@router.get("/initialize", response_model=SnapshotRead)
def initialize(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """
    Snapshot complet pour le client (READ ONLY)
    - hash des utilisateurs jamais exposé
    - demandes triées de la plus récente à la plus ancienne
    """
    snapshot = build_snapshot(db, recent_movements_limit=settings.recent_movements_limit)
    return SnapshotRead.model_validate(snapshot)
