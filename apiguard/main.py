from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI

from apiguard.api.errors import ErrorResponder
from apiguard.api.middleware import RequestLoggingMiddleware
from apiguard.api.routes import admin, me
from apiguard.config import settings
from apiguard.database.postgres import close_postgres, init_postgres
from apiguard.logging import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage startup and shutdown of the database connection pool."""
    logger.info("starting_up", app=settings.app_name, version=settings.app_version)

    # ── Startup ──────────────────────────────────────────
    await init_postgres()
    logger.info("postgres_connected")

    logger.info("startup_complete")
    yield

    # ── Shutdown ─────────────────────────────────────────
    logger.info("shutting_down")
    await close_postgres()
    logger.info("shutdown_complete")


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="API-key authentication with structured HAL+JSON error responses.",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── Exception Handlers ───────────────────────────────
    # Final handler for every error, including authentication failures.
    # Installed first so its catching middleware sits inside request logging.
    ErrorResponder(debug=settings.debug).install(app)

    # ── Middleware ────────────────────────────────────────
    app.add_middleware(RequestLoggingMiddleware)

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
        }

    # ── Routers ──────────────────────────────────────────
    app.include_router(me.router,    prefix="/me",    tags=["Security"])
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])

    return app


app = create_app()
