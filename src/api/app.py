"""
FastAPI Application Factory.

Usage:
    # Development
    uvicorn api.app:create_app --factory --reload

    # Production
    uvicorn api.app:create_app --factory --host 0.0.0.0 --port 8080 --workers 4
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Configures logging on startup. The Supabase client is created lazily on
    the first request that needs it.
    """
    settings = get_settings()

    configure_logging(
        json_logs=settings.is_production,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    if not settings.supabase_jwt_secret:
        logger.warning("SUPABASE_JWT_SECRET is not set; every authenticated request will be rejected")

    logger.info(
        "Starting Binder API",
        environment=settings.environment,
        port=settings.port,
        deck_page_size=settings.deck_page_size,
    )

    yield

    logger.info("Shutting down Binder API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Binder API",
        description="""
        Swipe-based startup discovery for investors.

        ## Main Endpoints

        - `GET /decisions/deck` - Exclusion-aware deck of up to 30 startups
        - `POST /decisions` - Record a left/right swipe
        - `POST /decisions/stats` - Swipe counts for a batch of startups
        - `/saved/*` - The investor's saved startups

        ## Health Checks

        - `/health`, `/health/detailed`, `/ready`, `/live`
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestTracingMiddleware)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router, tags=["Health"])

    from api.routes.decisions import router as decisions_router
    app.include_router(decisions_router)

    from api.routes.saved import router as saved_router
    app.include_router(saved_router)

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        workers=1 if settings.is_development else settings.workers,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
