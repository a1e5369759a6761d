from __future__ import annotations

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from stockroom.app.core.config import Settings


def get_db(request: Request) -> Generator[Session, None, None]:
    # session factory créée au démarrage (lifespan), pas de global de module
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
