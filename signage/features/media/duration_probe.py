"""
Duration Probe Service

This module works out how long each video should stay on screen by
downloading it to a temporary file and reading its container duration
with ffprobe.

Architecture:
-----------
1. Download:
   - Drive byte stream
   - Temporary file on local disk

2. Probe:
   - ffprobe via ffmpeg-python
   - format.duration + playback padding

3. Recovery:
   - Any failure logs and returns PROBE_FALLBACK_SECONDS
   - Temporary file removed on every path

Technical Details:
---------------
- Images: DEFAULT_SLIDE_SECONDS
- Videos: probed duration + PLAYBACK_PADDING_SECONDS
- Concurrency: bounded by a semaphore

Dependencies:
-----------
- ffmpeg-python: ffprobe wrapper
- tempfile: Temporary storage
- asyncio: executor offloading

Author: Signage Development Team
"""

import asyncio
import logging
import os
import tempfile
from typing import List, Optional

import ffmpeg

from signage.shared.config import DEFAULT_SLIDE_SECONDS, proxy_url
from signage.shared.errors import ProbeError, UpstreamError
from .models import PROBE_FALLBACK_SECONDS, MediaDescriptor

logger = logging.getLogger(__name__)

PLAYBACK_PADDING_SECONDS = 2
EVENT_MEDIA_PATH = "/api/event-media"


class DurationProber:
    """
    Extracts video durations from Drive files.

    Attributes:
        media: DriveMedia used to download file bytes
        temp_dir: Where transient downloads are written
        fallback_seconds: Returned when probing fails
        max_concurrent: Simultaneous probes allowed
    """

    def __init__(self, media, temp_dir: Optional[str] = None,
                 fallback_seconds: float = PROBE_FALLBACK_SECONDS,
                 max_concurrent: int = 2):
        self.media = media
        self.temp_dir = temp_dir
        self.fallback_seconds = fallback_seconds
        self.max_concurrent = max(1, max_concurrent)
        self._semaphore = None

    def _get_semaphore(self) -> asyncio.Semaphore:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
        return self._semaphore

    def probe_sync(self, file_id: str, name: str = "") -> float:
        """
        Download and probe one file, raising ProbeError on failure.

        The temporary file is deleted whether or not probing succeeds.
        """
        suffix = os.path.splitext(name)[1] or ".tmp"
        temp_file = tempfile.NamedTemporaryFile(delete=False, suffix=suffix, dir=self.temp_dir)
        try:
            try:
                self.media.download_to(file_id, temp_file)
            except UpstreamError as e:
                raise ProbeError(file_id, f"download failed: {str(e)}")
            finally:
                temp_file.close()

            try:
                metadata = ffmpeg.probe(temp_file.name)
            except ffmpeg.Error as e:
                stderr = e.stderr.decode(errors="replace") if e.stderr else "None"
                raise ProbeError(file_id, f"ffprobe failed: {stderr.strip()}")
            except OSError as e:
                # ffprobe binary missing
                raise ProbeError(file_id, f"ffprobe unavailable: {str(e)}")

            try:
                duration = float(metadata["format"]["duration"])
            except (KeyError, TypeError, ValueError):
                raise ProbeError(file_id, "no container duration")

            return duration + PLAYBACK_PADDING_SECONDS
        finally:
            try:
                os.unlink(temp_file.name)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error(f"Error cleaning up temp file {temp_file.name}: {str(e)}")

    async def probe(self, file_id: str, name: str = "") -> float:
        """
        Duration in seconds for a video, or the fallback on any failure.

        Never raises.
        """
        async with self._get_semaphore():
            loop = asyncio.get_running_loop()
            try:
                duration = await loop.run_in_executor(None, lambda: self.probe_sync(file_id, name))
            except ProbeError as e:
                logger.error(f"Error getting video duration for {name or file_id}: {e.reason}")
                return self.fallback_seconds
            except Exception as e:
                logger.exception(f"Unexpected error probing {name or file_id}: {str(e)}")
                return self.fallback_seconds

        logger.info(f"Probed {name or file_id}: {duration:.2f}s")
        return duration

    async def enrich(self, descriptors: List[MediaDescriptor], base_url: str) -> List[MediaDescriptor]:
        """
        Attach proxy URLs and display durations to listed media.

        Videos are probed (bounded concurrency); images get
        DEFAULT_SLIDE_SECONDS. Returns new descriptors in the same order.
        """

        async def _enrich_one(descriptor: MediaDescriptor) -> MediaDescriptor:
            duration = DEFAULT_SLIDE_SECONDS
            if descriptor.is_video:
                duration = await self.probe(descriptor.id, descriptor.name)
            return descriptor.model_copy(update={
                "url": proxy_url(base_url, EVENT_MEDIA_PATH, descriptor.id),
                "duration_seconds": duration,
            })

        return list(await asyncio.gather(*(_enrich_one(d) for d in descriptors)))
