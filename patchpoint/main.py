"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from patchpoint import __version__
from patchpoint.config import get_settings
from patchpoint.database import Database
from patchpoint.factories.service_factories import get_map_archive_service

# Import routers
from patchpoint.routers import (
    auth,
    comments,
    geocode,
    health,
    reports,
    uploads,
)

# Import middleware
from patchpoint.middleware import logging_middleware, register_exception_handlers
from patchpoint.utils.logger import configure_logging, get_logger

settings = get_settings()

# Configure logging early
configure_logging(log_level=settings.log_level, debug=settings.debug)
log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    log.info("starting application", debug=settings.debug, log_level=settings.log_level)

    missing = settings.missing_required()
    if missing:
        log.critical("missing required configuration", settings=missing)
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

    get_map_archive_service().ensure_dirs()

    database = Database(settings.database_url, echo=settings.sql_echo)
    await database.create_tables()
    app.state.database = database
    log.info("database initialized")

    yield

    log.info("shutting down application")
    await database.dispose()
    log.info("database connections closed")


app = FastAPI(
    title="PatchPoint API",
    description="PatchPoint - pothole reports from citizens and road sensors",
    version=__version__,
    lifespan=lifespan,
)

# Register exception handlers first
register_exception_handlers(app)

# CORS middleware
_cors_origins = settings.get_cors_origins_list()
log.info("cors origins", origins=_cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins or ["*"],
    allow_credentials=bool(_cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware
app.middleware("http")(logging_middleware)

# Register routers
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(auth.router, prefix="/api")
app.include_router(reports.router, prefix="/api")
app.include_router(comments.router, prefix="/api")
app.include_router(uploads.router, prefix="/api")
app.include_router(geocode.router, prefix="/api")

# Extracted map archives are served as static files
app.mount(
    "/uploads",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "ok": True,
        "name": "PatchPoint API",
        "version": __version__,
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth",
            "reports": "/api/reports",
            "comments": "/api/comments",
            "uploads": "/api/upload/image",
            "maps": "/api/zip/upload",
            "geocode": "/api/geocode/reverse",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "patchpoint.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
