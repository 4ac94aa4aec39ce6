"""
Event Media Routes

Endpoints for the media & events section:
- GET /api/event-media            listing with proxy URLs and durations
- GET /api/event-media/{file_id}  raw bytes of one file

Listing flow:
1. Cache check
2. List the events folder on Drive
3. Probe video durations (images get the default)
4. Cache and return

Errors: HTTP 500 with {"error": message}; nothing is cached.

Author: Signage Development Team
"""

import logging

from fastapi import APIRouter, Depends

from signage.shared.cache import ResponseCache
from signage.shared.config import Settings
from signage.shared.dependencies import (
    error_response,
    get_cache,
    get_drive_media,
    get_prober,
    get_settings_dep,
    run_blocking,
)
from .file_proxy import stream_drive_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["media"])


@router.get("/event-media")
async def list_event_media(
    cache: ResponseCache = Depends(get_cache),
    settings: Settings = Depends(get_settings_dep),
    media=Depends(get_drive_media),
    prober=Depends(get_prober),
):
    """Event media descriptors: id, name, type, url, durationSeconds."""

    async def load():
        files = await run_blocking(media.list_media, settings.event_media_folder_id)
        enriched = await prober.enrich(files, settings.backend_url)
        return [item.to_response() for item in enriched]

    try:
        return await cache.get_or_load("event-media", load)
    except Exception as e:
        return error_response("event-media", e)


@router.get("/event-media/{file_id}")
async def stream_event_media(file_id: str, media=Depends(get_drive_media)):
    """Stream one event media file."""
    try:
        return await stream_drive_file(media, file_id)
    except Exception as e:
        return error_response("event-media stream", e)
