"""
Media Data Models

Pydantic models describing media files listed from a Drive folder.

Models Overview:
--------------
- MediaDescriptor: one listed file, optionally enriched with a duration
- FileMetadata: the fields needed to proxy a file's bytes

Author: Signage Development Team
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PROBE_FALLBACK_SECONDS = 60


class MediaDescriptor(BaseModel):
    """
    Normalized metadata record for a listed media file.

    Attributes:
        id (str): Drive file id
        name (str): File name
        type (str): "image" or "video"
        url (Optional[str]): Direct content URL, or the local proxy URL
            once enriched
        duration_seconds (Optional[float]): Display duration, set on
            enrichment; serialized as durationSeconds
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    type: Literal["image", "video"]
    url: Optional[str] = None
    duration_seconds: Optional[float] = Field(default=None, alias="durationSeconds")

    @property
    def is_video(self) -> bool:
        return self.type == "video"

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True)


class FileMetadata(BaseModel):
    id: str
    name: str
    mime_type: str = "application/octet-stream"
    modified_time: Optional[datetime] = None

    @property
    def etag(self) -> str:
        """file id + modification time in epoch milliseconds."""
        if self.modified_time is None:
            return self.id
        return f"{self.id}-{int(self.modified_time.timestamp() * 1000)}"
