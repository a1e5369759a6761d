from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from stockroom.app.core.config import Settings
from stockroom.app.db.models.models_v1 import User
from stockroom.app.db.models.core_types import Role
from stockroom.services.access import hash_credential

logger = logging.getLogger(__name__)


def run_seed(db: Session, settings: Settings) -> User | None:
    """
    Premier administrateur, uniquement si la table users est vide.

    Le mot de passe vient de STOCKROOM_ADMIN_PASSWORD ; sans lui on ne
    crée rien (pas de mot de passe par défaut en dur).
    """
    if db.scalar(select(func.count()).select_from(User)):
        return None

    if not settings.admin_password:
        logger.warning("no users and STOCKROOM_ADMIN_PASSWORD unset: skipping admin seed")
        return None

    user = User(
        email=settings.admin_email.strip().lower(),
        name=settings.admin_name,
        role=Role.administrator,
        password_hash=hash_credential(settings.admin_password),
        category_ids=[],
        can_receive_orders=True,
    )
    db.add(user)
    db.commit()
    logger.info("seeded administrator %s", user.email)
    return user


if __name__ == "__main__":
    from stockroom.app.core.logging import configure_logging
    from stockroom.app.db.base import Base
    from stockroom.app.db.session import make_engine, make_session_factory

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    engine = make_engine(settings)
    Base.metadata.create_all(bind=engine)
    with make_session_factory(engine)() as db:
        run_seed(db, settings)
    engine.dispose()
