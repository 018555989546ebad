"""Application factory for the notification HTTP interface."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_notify.application.use_cases.lifecycle import Clock
from campus_notify.config import Settings, get_settings
from campus_notify.domain.entities import Directory
from campus_notify.infrastructure.database import engine, initialize_database
from campus_notify.infrastructure.locks import RecordLocks
from campus_notify.infrastructure.store import InMemoryNotificationStore
from campus_notify.interfaces.api.routes import register_routes
from campus_notify.interfaces.api.schemas import DirectorySnapshot
from campus_notify.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def load_directory(path: str | Path) -> Directory:
    """Read a roster snapshot exported by the user service."""

    raw = Path(path).read_text(encoding="utf-8")
    return DirectorySnapshot.model_validate_json(raw).to_domain()


def create_app(
    *,
    directory: Directory | None = None,
    store=None,
    clock: Clock | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)

    use_sql = store is None and settings.store_backend == "sql"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Inicializa la base de datos al arrancar y libera los recursos al cerrar."""

        if use_sql:
            initialize_database()
        yield
        if use_sql:
            engine.dispose()

    app = FastAPI(lifespan=lifespan)

    # Autoriza peticiones desde el cliente web configurado.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if directory is None:
        if settings.directory_file:
            directory = load_directory(settings.directory_file)
        else:
            logger.warning("No directory snapshot configured; audiences will resolve to nobody")
            directory = Directory()

    if store is None and not use_sql:
        store = InMemoryNotificationStore()

    app.state.directory = directory
    app.state.store = store
    app.state.locks = RecordLocks()
    app.state.clock = clock or now_in_app_timezone

    register_routes(app)
    return app
