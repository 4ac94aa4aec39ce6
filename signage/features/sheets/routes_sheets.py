"""
Sheet Content Routes

Read-only endpoints serving the text sections of the display straight
from Google Sheets: business news, corporate news and event details.

Each endpoint:
1. Checks the response cache
2. On a miss reads the configured range
3. Stores the rows and returns them as JSON

Response shape: list of rows, header row first ([] for an empty sheet).
Errors: HTTP 500 with {"error": message}; nothing is cached.

Author: Signage Development Team
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from signage.shared.cache import ResponseCache
from signage.shared.config import Settings
from signage.shared.dependencies import (
    error_response,
    get_cache,
    get_settings_dep,
    get_sheet_reader,
    run_blocking,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["sheets"])


async def cached_sheet(cache: ResponseCache, key: str, reader, source) -> List[List[str]]:
    """Rows of a sheet source, served from cache within the TTL."""

    async def load():
        return await run_blocking(reader.read, source.sheet_id, source.cell_range)

    return await cache.get_or_load(key, load)


@router.get("/business-news")
async def get_business_news(
    cache: ResponseCache = Depends(get_cache),
    settings: Settings = Depends(get_settings_dep),
    reader=Depends(get_sheet_reader),
):
    """Business update rows."""
    try:
        return await cached_sheet(cache, "business-news", reader, settings.business_news)
    except Exception as e:
        return error_response("business-news", e)


@router.get("/corp-news")
async def get_corp_news(
    cache: ResponseCache = Depends(get_cache),
    settings: Settings = Depends(get_settings_dep),
    reader=Depends(get_sheet_reader),
):
    """Office / corporate update rows."""
    try:
        return await cached_sheet(cache, "corp-news", reader, settings.corp_news)
    except Exception as e:
        return error_response("corp-news", e)


@router.get("/event-details")
async def get_event_details(
    cache: ResponseCache = Depends(get_cache),
    settings: Settings = Depends(get_settings_dep),
    reader=Depends(get_sheet_reader),
):
    """Event detail rows shown alongside event media."""
    try:
        return await cached_sheet(cache, "event-details", reader, settings.event_details)
    except Exception as e:
        return error_response("event-details", e)
