from fastapi import FastAPI

from .audience import router as audience_router
from .broadcasts import router as broadcasts_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(audience_router)
    app.include_router(broadcasts_router)
    app.include_router(notifications_router)
