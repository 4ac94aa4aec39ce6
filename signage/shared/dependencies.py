"""
Request Dependencies

FastAPI dependencies giving routes access to the services created at
startup, plus the shared helpers routes use to call blocking clients and
answer errors.

Author: Signage Development Team
"""

import asyncio
import logging
from functools import partial

from fastapi import Request
from fastapi.responses import JSONResponse

from .cache import ResponseCache
from .config import Settings

logger = logging.getLogger(__name__)


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> ResponseCache:
    return request.app.state.cache


def get_sheet_reader(request: Request):
    return request.app.state.sheet_reader


def get_drive_media(request: Request):
    return request.app.state.drive_media


def get_prober(request: Request):
    return request.app.state.prober


async def run_blocking(func, *args, **kwargs):
    """Run a blocking client call in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


def error_response(label: str, error: Exception) -> JSONResponse:
    """Log a failed request and answer HTTP 500 with {"error": message}."""
    logger.error(f"{label} error: {str(error)}")
    return JSONResponse(status_code=500, content={"error": str(error)})
