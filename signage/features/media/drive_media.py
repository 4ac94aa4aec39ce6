"""
Google Drive Media Source

This module lists media files in a Drive folder and gives access to a
single file's metadata and bytes.

Features:
- Folder listing (name order, trashed files excluded)
- Image / video classification
- Metadata lookup
- Streaming byte access
- Streaming download to a local file

Data Model:
- MediaDescriptor: id, name, type, url
- FileMetadata: id, name, mimeType, modifiedTime

Dependencies:
- google-api-python-client for listing and metadata
- google-auth AuthorizedSession for byte streams
- logging for tracking

Author: Signage Development Team
"""

import logging
from typing import BinaryIO, Iterator, List

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from requests.exceptions import RequestException

from signage.shared.errors import UpstreamError
from .models import FileMetadata, MediaDescriptor

logger = logging.getLogger(__name__)

DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
LIST_PAGE_SIZE = 100
CHUNK_SIZE = 256 * 1024

_UPSTREAM_ERRORS = (HttpError, GoogleAuthError, RequestException)


def classify_mime_type(mime_type: str) -> str:
    """Return "video" for video/* types, "image" for anything else."""
    return "video" if (mime_type or "").startswith("video") else "image"


class FileStream:
    """
    Iterable over a Drive file's bytes.

    Wraps a streaming requests response; close() releases the connection.
    """

    def __init__(self, response, chunk_size: int = CHUNK_SIZE):
        self.response = response
        self.chunk_size = chunk_size

    def __iter__(self) -> Iterator[bytes]:
        try:
            for chunk in self.response.iter_content(chunk_size=self.chunk_size):
                if chunk:
                    yield chunk
        finally:
            self.close()

    def close(self):
        self.response.close()


class DriveMedia:
    """
    Drive-backed media source.

    Attributes:
        provider: GoogleClientProvider supplying Drive clients
    """

    def __init__(self, provider):
        self.provider = provider

    def list_media(self, folder_id: str) -> List[MediaDescriptor]:
        """
        List the files in a folder.

        Args:
            folder_id (str): Drive folder id

        Returns:
            List[MediaDescriptor]: Files ordered by name

        Raises:
            UpstreamError: When the folder cannot be listed
        """
        if not folder_id:
            raise UpstreamError("No Drive folder id configured", service="drive")

        descriptors = []
        page_token = None
        try:
            files = self.provider.drive().files()
            while True:
                result = files.list(
                    q=f"'{folder_id}' in parents and trashed=false",
                    fields="nextPageToken, files(id, name, mimeType, webContentLink, webViewLink)",
                    orderBy="name",
                    pageSize=LIST_PAGE_SIZE,
                    pageToken=page_token,
                ).execute()

                for item in result.get("files", []):
                    descriptors.append(MediaDescriptor(
                        id=item["id"],
                        name=item.get("name", ""),
                        type=classify_mime_type(item.get("mimeType", "")),
                        url=item.get("webContentLink") or item.get("webViewLink"),
                    ))

                page_token = result.get("nextPageToken")
                if not page_token:
                    break
        except _UPSTREAM_ERRORS as e:
            logger.error(f"Failed to list folder {folder_id}: {str(e)}")
            raise UpstreamError(f"Failed to list folder {folder_id}: {str(e)}", service="drive")

        logger.info(f"Listed {len(descriptors)} files in folder {folder_id}")
        return descriptors

    def get_metadata(self, file_id: str) -> FileMetadata:
        """Fetch name, content type and modification time of a file."""
        try:
            meta = self.provider.drive().files().get(
                fileId=file_id,
                fields="id, name, mimeType, modifiedTime",
            ).execute()
        except _UPSTREAM_ERRORS as e:
            raise UpstreamError(f"Failed to fetch metadata for {file_id}: {str(e)}", service="drive")

        return FileMetadata(
            id=meta.get("id", file_id),
            name=meta.get("name", file_id),
            mime_type=meta.get("mimeType") or "application/octet-stream",
            modified_time=meta.get("modifiedTime"),
        )

    def open_stream(self, file_id: str) -> FileStream:
        """
        Open a byte stream over a file's content.

        The caller owns the stream and must exhaust or close it.
        """
        try:
            response = self.provider.session().get(
                f"{DRIVE_FILES_URL}/{file_id}",
                params={"alt": "media"},
                stream=True,
            )
        except _UPSTREAM_ERRORS as e:
            raise UpstreamError(f"Failed to open content of {file_id}: {str(e)}", service="drive")

        try:
            response.raise_for_status()
        except RequestException as e:
            response.close()
            raise UpstreamError(f"Failed to open content of {file_id}: {str(e)}", service="drive")
        return FileStream(response)

    def download_to(self, file_id: str, fileobj: BinaryIO) -> int:
        """
        Stream a file's bytes into an open binary file object.

        Returns:
            int: Number of bytes written
        """
        written = 0
        stream = self.open_stream(file_id)
        try:
            for chunk in stream:
                fileobj.write(chunk)
                written += len(chunk)
        except RequestException as e:
            raise UpstreamError(f"Download of {file_id} interrupted: {str(e)}", service="drive")
        finally:
            stream.close()
        fileobj.flush()
        return written
