"""
Drive File Proxy

Streams a Drive file's bytes to the client with headers taken from the
file's metadata, so displays never need Google credentials.

Flow:
1. Fetch metadata (name, mimeType, modifiedTime)
2. Open the byte stream
3. Pipe it through a StreamingResponse

Author: Signage Development Team
"""

import logging
from urllib.parse import quote

from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from signage.shared.dependencies import run_blocking

logger = logging.getLogger(__name__)

IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"


def content_disposition(name: str) -> str:
    """inline disposition; non-ASCII names also get an RFC 5987 form."""
    ascii_name = name.encode("ascii", "replace").decode("ascii").replace('"', "'")
    header = f'inline; filename="{ascii_name}"'
    if ascii_name != name:
        header += f"; filename*=UTF-8''{quote(name)}"
    return header


async def stream_drive_file(media, file_id: str, immutable: bool = False) -> StreamingResponse:
    """
    Build a streaming response for a Drive file.

    Args:
        media: DriveMedia source
        file_id: Drive file id
        immutable: Add long-lived cache headers and an ETag

    Raises:
        UpstreamError: When metadata or content cannot be fetched
    """
    meta = await run_blocking(media.get_metadata, file_id)
    stream = await run_blocking(media.open_stream, file_id)

    headers = {"Content-Disposition": content_disposition(meta.name)}
    if immutable:
        headers["Cache-Control"] = IMMUTABLE_CACHE_CONTROL
        headers["ETag"] = meta.etag

    logger.info(f"Streaming {meta.name} ({meta.mime_type}) for {file_id}")
    # close runs after the body is sent or the client goes away
    return StreamingResponse(
        stream,
        media_type=meta.mime_type,
        headers=headers,
        background=BackgroundTask(stream.close),
    )
