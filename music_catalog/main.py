"""Music catalog service main application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .api.albums import router as albums_router
from .api.artists import router as artists_router
from .api.health import router as health_router
from .core.db import dispose_engine, get_engine, init_models
from .core.errors import register_exception_handlers
from .core.logging import configure_logging, get_logger
from .core.settings import app_settings
from .metrics import get_metrics

# Configure logging
configure_logging(log_level=app_settings.log_level, log_format=app_settings.log_format)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager with graceful shutdown."""
    # Startup
    logger.info("music_catalog_starting", version=app_settings.app_version)

    if app_settings.database_url.startswith("sqlite"):
        # Local development database, no migrations involved
        await init_models(get_engine())

    logger.info("music_catalog_started", version=app_settings.app_version)

    yield

    # Shutdown
    logger.info("music_catalog_shutting_down")
    await dispose_engine()
    logger.info("music_catalog_shutdown")


# Create FastAPI app
app = FastAPI(
    title="Music Catalog Service",
    version=app_settings.app_version,
    description="Artist and album catalog with search, history and role-based policies",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(health_router)
app.include_router(artists_router, prefix=app_settings.api_prefix)
app.include_router(albums_router, prefix=app_settings.api_prefix)

# Prometheus metrics endpoint
@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type="text/plain")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
