"""
Pytest Configuration File

This module provides fixtures and in-memory Google sources for all tests.
"""

import os
import sys
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from signage.app import create_app
from signage.features.media.models import FileMetadata, MediaDescriptor
from signage.shared.config import SheetSource, Settings
from signage.shared.errors import UpstreamError

BASE_URL = "http://signage.test"


class FakeSheetReader:
    """Serves rows keyed by (sheet_id, range); counts reads."""

    def __init__(self, sheets=None):
        self.sheets = dict(sheets or {})
        self.calls = []

    def read(self, sheet_id, cell_range):
        self.calls.append((sheet_id, cell_range))
        value = self.sheets.get((sheet_id, cell_range))
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise UpstreamError(f"Spreadsheet {sheet_id} not found", service="sheets")
        return [list(row) for row in value]


class FakeStream:
    def __init__(self, data, chunk_size=4):
        self.data = data
        self.chunk_size = chunk_size
        self.closed = False

    def __iter__(self):
        for start in range(0, len(self.data), self.chunk_size):
            yield self.data[start:start + self.chunk_size]

    def close(self):
        self.closed = True


class FakeDriveMedia:
    """Folders of descriptors plus per-file metadata and bytes."""

    def __init__(self, folders=None, files=None):
        self.folders = dict(folders or {})
        self.files = dict(files or {})
        self.list_calls = []
        self.streams = []

    def list_media(self, folder_id):
        self.list_calls.append(folder_id)
        if folder_id not in self.folders:
            raise UpstreamError(f"Failed to list folder {folder_id}", service="drive")
        return list(self.folders[folder_id])

    def _file(self, file_id):
        if file_id not in self.files:
            raise UpstreamError(f"File not found: {file_id}", service="drive")
        return self.files[file_id]

    def get_metadata(self, file_id):
        return self._file(file_id)[0]

    def open_stream(self, file_id):
        stream = FakeStream(self._file(file_id)[1])
        self.streams.append(stream)
        return stream

    def download_to(self, file_id, fileobj):
        data = self._file(file_id)[1]
        fileobj.write(data)
        fileobj.flush()
        return len(data)


def descriptor(file_id, name, kind="image"):
    return MediaDescriptor(id=file_id, name=name, type=kind, url=f"https://drive.google.com/uc?id={file_id}")


def metadata(file_id, name, mime_type, modified="2024-03-01T12:00:00.000Z"):
    return FileMetadata(id=file_id, name=name, mime_type=mime_type, modified_time=modified)


@pytest.fixture
def settings(tmp_path):
    """Settings with every source pinned for tests"""
    return Settings(
        credentials_file=str(tmp_path / "missing.json"),
        business_news=SheetSource("biz-sheet", "News!A1:E"),
        corp_news=SheetSource("corp-sheet", "News!A1:E"),
        event_details=SheetSource("event-sheet", "Events!A1:C"),
        employees=SheetSource("emp-sheet", "Staff!A1:C"),
        employee_image_folder_id="emp-folder",
        event_media_folder_id="event-folder",
        cache_ttl_seconds=60,
        backend_url=BASE_URL + "/",
        probe_temp_dir=str(tmp_path),
        max_concurrent_probes=2,
    )


@pytest.fixture
def sheet_reader():
    return FakeSheetReader()


@pytest.fixture
def drive_media():
    return FakeDriveMedia()


@pytest.fixture
def backend_app(settings, sheet_reader, drive_media):
    return create_app(settings, sheet_reader=sheet_reader, drive_media=drive_media)


@pytest.fixture
def test_client(backend_app):
    """Fixture for FastAPI test client"""
    with TestClient(backend_app) as client:
        yield client


@pytest.fixture
def modified_at():
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
