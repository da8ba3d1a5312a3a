# src/aura_share/main.py
"""Main entry point for the Aura Share application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from aura_share import __version__
from aura_share.api.v1.router import api_router
from aura_share.core.errors import AuraError, Conflict
from aura_share.core.settings import Settings
from aura_share.core.settings import settings as default_settings
from aura_share.db.session import build_engine, build_session_factory, create_tables
from aura_share.services.admin import AdminAuthService, AuditLogService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def bootstrap_admin(session_factory: sessionmaker[Session], settings: Settings) -> None:
    """Create the configured super admin unless an admin already exists."""
    with session_factory() as db:
        service = AdminAuthService(db, settings, AuditLogService(db))
        try:
            service.bootstrap_super_admin(
                settings.bootstrap_admin_username,
                settings.bootstrap_admin_password,
                settings.bootstrap_admin_email,
            )
        except Conflict:
            logger.info("Admin accounts exist, skipping bootstrap")
            return
    logger.info("Bootstrapped super admin %s", settings.bootstrap_admin_username)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    if settings.auto_create_tables:
        create_tables(engine)
    if settings.bootstrap_admin_username and settings.bootstrap_admin_password:
        bootstrap_admin(app.state.session_factory, settings)
    logger.info("%s %s started", settings.app_name, settings.app_version)
    try:
        yield
    finally:
        engine.dispose()


async def handle_domain_error(_request: Request, exc: AuraError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for ``settings``.

    The engine and session factory are created in the lifespan handler so
    importing this module never opens a database connection.
    """
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Aura Share API",
        description="Privacy-scoped link sharing with lists, friends and moderation",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add GZip middleware for compression
    app.add_middleware(GZipMiddleware)

    app.add_exception_handler(AuraError, handle_domain_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "docs": "/docs",
            "redoc": "/redoc",
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("aura_share.main:app", host="0.0.0.0", port=8000, reload=default_settings.debug)
