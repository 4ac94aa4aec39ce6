"""
Employee Highlight Routes

- GET /api/employees                   sheet rows with proxied photo URLs
- GET /api/employee-images/{file_id}   photo bytes, long-lived cache headers

The employee sheet holds name, detail and a Drive share link per row.
Links that point at a photo in the employee image folder are rewritten to
{BACKEND_URL}/api/employee-images/{id}; anything else is left as is.

Errors: HTTP 500 with {"error": message}; nothing is cached.

Author: Signage Development Team
"""

import logging

from fastapi import APIRouter, Depends

from signage.features.media.file_proxy import stream_drive_file
from signage.shared.cache import ResponseCache
from signage.shared.config import Settings
from signage.shared.dependencies import (
    error_response,
    get_cache,
    get_drive_media,
    get_settings_dep,
    get_sheet_reader,
    run_blocking,
)
from .employee_merge import build_image_map, merge_employee_rows

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["employees"])


@router.get("/employees")
async def get_employees(
    cache: ResponseCache = Depends(get_cache),
    settings: Settings = Depends(get_settings_dep),
    reader=Depends(get_sheet_reader),
    media=Depends(get_drive_media),
):
    """Employee rows, header first, image cells pointing at the proxy."""

    async def load():
        source = settings.employees
        rows = await run_blocking(reader.read, source.sheet_id, source.cell_range)
        files = await run_blocking(media.list_media, settings.employee_image_folder_id)
        image_map = build_image_map(files, settings.backend_url)
        logger.info(f"Merging {max(len(rows) - 1, 0)} employees with {len(image_map)} images")
        return merge_employee_rows(rows, image_map)

    try:
        return await cache.get_or_load("employees", load)
    except Exception as e:
        return error_response("employees", e)


@router.get("/employee-images/{file_id}")
async def stream_employee_image(file_id: str, media=Depends(get_drive_media)):
    """Stream one employee photo with immutable caching."""
    try:
        return await stream_drive_file(media, file_id, immutable=True)
    except Exception as e:
        return error_response("employee image stream", e)
