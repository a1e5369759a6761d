from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from stockroom.app.api.errors import register_exception_handlers
from stockroom.app.api.v1.router import router as v1_router
from stockroom.app.core.config import Settings
from stockroom.app.core.logging import configure_logging
from stockroom.app.db.base import Base
from stockroom.app.db.models import models_v1  # noqa: F401  (tables enregistrées sur Base.metadata)
from stockroom.app.db.seed import run_seed
from stockroom.app.db.session import make_engine, make_session_factory

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Store unique du process : ouvert au démarrage, fermé à l'arrêt
        engine = make_engine(settings)
        if settings.create_schema:
            Base.metadata.create_all(bind=engine)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)

        with app.state.session_factory() as db:
            run_seed(db, settings)

        logger.info("stockroom started (db=%s)", engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            engine.dispose()
            logger.info("stockroom stopped")

    app = FastAPI(title="STOCKROOM", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    # Frontend statique en dernier : les routes API restent prioritaires
    if settings.frontend_dir:
        app.mount("/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")

    return app


app = create_app()
