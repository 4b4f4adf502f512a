# src/unique_numbers/main.py
"""Main entry point for the unique number service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unique_numbers.api import install_error_handlers, numbers_router, system_router
from unique_numbers.core.settings import settings
from unique_numbers.db.session import create_tables
from unique_numbers.db.time import utcnow

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the schema before serving; a failure here aborts startup."""
    try:
        create_tables()
    except Exception:
        logger.exception("Database initialization failed, refusing to start")
        raise
    logger.info("Database initialized")
    yield


# Initialize FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title=settings.app_name,
    description="Issues unique random nine-digit numbers",
    version=settings.app_version,
)

# Add CORS middleware; answers preflight OPTIONS requests itself
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

install_error_handlers(app)

# Include API routers
app.include_router(numbers_router, prefix="/api")
app.include_router(system_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe reporting the current server time."""
    return {"status": "ok", "timestamp": utcnow().isoformat()}


@app.get("/")
async def root() -> dict[str, object]:
    """Root endpoint describing the available API."""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "endpoints": {
            "POST /api/generate-number": "Generate a new unique number",
            "GET /api/check-number/:number": "Check if a number exists",
            "GET /api/stats": "Get generation statistics",
            "DELETE /api/delete-number/:number": "Delete a single number",
            "DELETE /api/delete-old-numbers?days=N": "Delete numbers older than N days",
            "DELETE /api/delete-all-numbers": "Delete every number (requires confirmationToken)",
            "GET /api/system/health": "Database health check",
            "GET /health": "Health check",
        },
        "docs": "/docs",
    }


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(
        "unique_numbers.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
