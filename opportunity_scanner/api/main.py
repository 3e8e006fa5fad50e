"""
FastAPI application for the Opportunity Scanner service.

The result store is created and its schema initialized inside the lifespan
handler, before the application starts accepting requests.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from opportunity_scanner.api.endpoints import opportunities
from opportunity_scanner.config.settings import settings
from opportunity_scanner.core.pipeline import build_pipeline
from opportunity_scanner.core.result_store import ResultStore
from opportunity_scanner.utils.db_session import get_async_engine
from opportunity_scanner.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Builds the result store and pipeline on startup and releases the HTTP
    client and database engine on shutdown.
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    store = ResultStore(get_async_engine())
    await store.initialize()
    pipeline = build_pipeline(store)
    app.state.pipeline = pipeline
    logger.info(f"Pipeline ready ({pipeline.variant} analysis variant)")

    yield

    logger.info("Shutting down application")
    await pipeline.close()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""Finds business opportunities in subreddit discussions.

        - `GET /search` suggests subreddits, analyzes each one with Gemini and stores the scores
        - `GET /history` lists every stored score, newest first""",
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS if not settings.DEBUG else ["*"],
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    app.include_router(opportunities.router, tags=["opportunities"])

    @app.get("/health", tags=["health"], summary="Health Check")
    async def health_check():
        """Service name, version and current time."""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "analysis_variant": settings.ANALYSIS_VARIANT,
        }

    # Mounted last so the API routes above take precedence over "/"
    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info(f"Serving static files from {static_dir}")

    return app


# Create the application instance
app = create_app()
