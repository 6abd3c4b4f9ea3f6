"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from contentforge import __version__
from contentforge.adapters.registry import build_providers
from contentforge.api.auth import SupabaseIdentityProvider
from contentforge.api.errors import register_exception_handlers
from contentforge.api.routes import dashboard, generate, health, library, projects
from contentforge.config import settings
from contentforge.db.session import check_connection
from contentforge.logging import get_logger, setup_logging

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Builds the shared HTTP client and the provider registry once per process.
    """
    logger.info("application_starting", version=__version__)

    # Startup: verify database connection
    try:
        check_connection()
        logger.info("database_connected")
    except SQLAlchemyError as e:
        logger.error("database_connection_failed", error=str(e))
        # Don't raise - let health checks report the issue

    http_client = httpx.AsyncClient(timeout=settings.provider_timeout_seconds)
    app.state.providers = build_providers(settings, http_client)
    app.state.identity = SupabaseIdentityProvider(
        settings.supabase_url, settings.supabase_anon_key, http_client
    )

    yield

    # Shutdown
    logger.info("application_shutting_down")
    await http_client.aclose()


# Create FastAPI app
app = FastAPI(
    title="ContentForge",
    description="Generative content studio: text, image, voice, video and avatar generation",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(health.router)
app.include_router(generate.router, prefix="/api/v1")
app.include_router(projects.router, prefix="/api/v1")
app.include_router(library.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint redirect to docs."""
    return {
        "name": "ContentForge",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "contentforge.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
