"""
Main Application Module

This module builds the signage backend: a FastAPI app that proxies Google
Sheets and Google Drive content into a small JSON/HTTP API for displays.

Features:
- Route management
- CORS configuration
- Service wiring (cache, readers, prober)
- Error handling
- Health check

Routes:
- /api/business-news, /api/corp-news, /api/event-details
- /api/employees, /api/employee-images/{file_id}
- /api/event-media, /api/event-media/{file_id}
- /api/health

Dependencies:
- FastAPI for routing
- CORS middleware
- Logging

Author: Signage Development Team
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .features.employees.routes_employees import router as employees_router
from .features.media.drive_media import DriveMedia
from .features.media.duration_probe import DurationProber
from .features.media.routes_media import router as media_router
from .features.sheets.routes_sheets import router as sheets_router
from .features.sheets.sheet_reader import SheetReader
from .shared.cache import ResponseCache
from .shared.config import Settings, get_settings
from .shared.errors import UpstreamError
from .shared.google_clients import GoogleClientProvider

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None, provider=None, sheet_reader=None,
               drive_media=None, prober=None) -> FastAPI:
    """
    Build the backend app.

    Args:
        settings: Settings to use (environment by default)
        provider: GoogleClientProvider (built from settings by default)
        sheet_reader: Tabular source (SheetReader by default)
        drive_media: File-storage source (DriveMedia by default)
        prober: Duration prober (DurationProber by default)

    Notes:
        - Google credentials are loaded on first use, not here
        - Tests pass in-memory sources
    """
    settings = settings or get_settings()
    if provider is None and (sheet_reader is None or drive_media is None):
        provider = GoogleClientProvider(settings.credentials_file)
    sheet_reader = sheet_reader or SheetReader(provider)
    drive_media = drive_media or DriveMedia(provider)
    prober = prober or DurationProber(
        drive_media,
        temp_dir=settings.probe_temp_dir,
        max_concurrent=settings.max_concurrent_probes,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Signage backend starting, public URL {settings.backend_url}")
        logger.info(f"Cache TTL: {settings.cache_ttl_seconds}s")
        yield
        logger.info("Signage backend stopped")

    app = FastAPI(title="Signage Backend", lifespan=lifespan)

    app.state.settings = settings
    app.state.cache = ResponseCache(ttl_seconds=settings.cache_ttl_seconds)
    app.state.sheet_reader = sheet_reader
    app.state.drive_media = drive_media
    app.state.prober = prober

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "ETag"],
    )

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        logger.error(f"Upstream error on {request.url.path}: {str(exc)}")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    logger.info("Mounting API routers...")
    app.include_router(sheets_router)
    app.include_router(employees_router)
    app.include_router(media_router)

    @app.get("/api/health")
    async def health():
        return {"ok": True}

    return app


logging.basicConfig(level=logging.INFO)

app = create_app()
