import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from stockroom.app.core.config import Settings
from stockroom.app.db.base import Base
from stockroom.app.db.models.models_v1 import Category, Product, User
from stockroom.app.db.models.core_types import Role
from stockroom.app.db.session import make_engine, make_session_factory
from stockroom.app.main import create_app
from stockroom.services.access import hash_credential


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Base SQLite jetable par test (fichier dans tmp_path, WAL actif)."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'stockroom-test.sqlite'}",
        log_level="WARNING",
        admin_password=None,
    )


@pytest.fixture
def engine(settings):
    engine = make_engine(settings)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db_session(session_factory) -> Session:
    """
    Session isolée par test.

    Chaque test a sa propre base : les commit() / rollback() des services
    sont réels, on peut donc vérifier qu'un échec ne laisse AUCUNE ligne.
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


# ---------- master data ----------
def add_user(db: Session, email: str, role: Role, *, can_receive: bool = False, category_ids=None) -> User:
    user = User(
        email=email,
        name=email.split("@")[0].title(),
        role=role,
        password_hash=hash_credential("secret"),
        category_ids=list(category_ids or []),
        can_receive_orders=can_receive,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def category(db_session) -> Category:
    cat = Category(name="Cleaning", is_stockable=True)
    db_session.add(cat)
    db_session.commit()
    return cat


@pytest.fixture
def product(db_session, category) -> Product:
    p = Product(name="Bleach 1L", unit="bottle", minimum_stock=5, category_id=category.id)
    db_session.add(p)
    db_session.commit()
    return p


@pytest.fixture
def people(db_session, category) -> dict[str, User]:
    """
    alice : staff (demandeuse), catégorie Cleaning
    bob   : manager
    carol : staff habilitée à réceptionner
    dave  : administrateur SANS flag de réception
    """
    return {
        "alice": add_user(db_session, "alice@x.com", Role.staff, category_ids=[category.id]),
        "bob": add_user(db_session, "bob@x.com", Role.manager),
        "carol": add_user(db_session, "carol@x.com", Role.staff, can_receive=True),
        "dave": add_user(db_session, "dave@x.com", Role.administrator),
    }
