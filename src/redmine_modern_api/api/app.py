"""
redmine_modern_api.api.app

FastAPI app factory for the Redmine Modern API service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from redmine_modern_api import __version__
from redmine_modern_api.api.errors import install_exception_handlers
from redmine_modern_api.api.routers.api_docs import router as api_docs_router
from redmine_modern_api.api.routers.auth import router as auth_router
from redmine_modern_api.api.routers.dashboard import router as dashboard_router
from redmine_modern_api.api.routers.health import router as health_router
from redmine_modern_api.api.routers.projects import router as projects_router
from redmine_modern_api.db.init_db import init_db
from redmine_modern_api.db.session import create_engine, create_sessionmaker
from redmine_modern_api.observability.logging import configure_logging, get_logger
from redmine_modern_api.observability.middleware import RequestContextMiddleware
from redmine_modern_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Routers obtain sessions via dependencies (see `redmine_modern_api.api.deps`).
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: in production the host application owns the schema.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Redmine Modern API",
        version=__version__,
        lifespan=lifespan,
        # Swagger UI is served by the api_docs router at /api-docs.
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    install_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(projects_router)
    app.include_router(api_docs_router)

    return app
