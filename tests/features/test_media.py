"""
Test Event Media

This module tests the media section including:
- Drive folder listing and classification
- Duration probing and its fallback
- Temporary file cleanup
- The event media listing and stream endpoints
"""

import os
import threading
import time

import ffmpeg
import pytest
from requests.exceptions import HTTPError

from signage.features.media import duration_probe
from signage.features.media.drive_media import DriveMedia, FileStream, classify_mime_type
from signage.features.media.duration_probe import DurationProber
from signage.features.media.models import PROBE_FALLBACK_SECONDS
from signage.shared.config import DEFAULT_SLIDE_SECONDS
from signage.shared.errors import UpstreamError
from tests.conftest import BASE_URL, FakeDriveMedia, descriptor, metadata


class FakeRequest:
    def __init__(self, result):
        self.result = result

    def execute(self):
        return self.result


class FakeFilesResource:
    """Drive files() resource returning canned pages."""

    def __init__(self, pages):
        self.pages = pages
        self.list_kwargs = []

    def list(self, **kwargs):
        self.list_kwargs.append(kwargs)
        return FakeRequest(self.pages[kwargs.get("pageToken")])


class FakeDriveService:
    def __init__(self, files_resource):
        self.files_resource = files_resource

    def files(self):
        return self.files_resource


class FakeProvider:
    def __init__(self, service, http=None):
        self.service = service
        self.http = http

    def drive(self):
        return self.service

    def session(self):
        return self.http


class FakeResponse:
    """Streaming requests response with a status check."""

    def __init__(self, status_code=200, content=b""):
        self.status_code = status_code
        self.content = content
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        return self.response



@pytest.fixture
def video_drive():
    return FakeDriveMedia(files={
        "VID1": (metadata("VID1", "launch.mp4", "video/mp4"), b"not really an mp4"),
    })


def test_classify_mime_type():
    assert classify_mime_type("video/mp4") == "video"
    assert classify_mime_type("image/png") == "image"
    assert classify_mime_type("application/pdf") == "image"
    assert classify_mime_type("") == "image"


def test_list_media_follows_pages_and_classifies():
    files = FakeFilesResource({
        None: {
            "files": [
                {"id": "1", "name": "a.jpg", "mimeType": "image/jpeg", "webContentLink": "https://dl/1"},
                {"id": "2", "name": "b.mp4", "mimeType": "video/mp4", "webViewLink": "https://view/2"},
            ],
            "nextPageToken": "page-2",
        },
        "page-2": {
            "files": [{"id": "3", "name": "c.png", "mimeType": "image/png"}],
        },
    })
    media = DriveMedia(FakeProvider(FakeDriveService(files)))

    listed = media.list_media("folder-1")

    assert [(m.id, m.type, m.url) for m in listed] == [
        ("1", "image", "https://dl/1"),
        ("2", "video", "https://view/2"),
        ("3", "image", None),
    ]
    first_call = files.list_kwargs[0]
    assert first_call["q"] == "'folder-1' in parents and trashed=false"
    assert first_call["orderBy"] == "name"
    assert len(files.list_kwargs) == 2


def test_list_media_requires_folder():
    media = DriveMedia(FakeProvider(None))
    with pytest.raises(UpstreamError):
        media.list_media("")


def test_open_stream_closes_rejected_response():
    response = FakeResponse(status_code=404)
    media = DriveMedia(FakeProvider(None, FakeSession(response)))

    with pytest.raises(UpstreamError) as excinfo:
        media.open_stream("gone")

    assert excinfo.value.service == "drive"
    assert "404" in str(excinfo.value)
    assert response.closed


def test_open_stream_reads_file_content():
    response = FakeResponse(content=b"abcdefgh")
    session = FakeSession(response)
    media = DriveMedia(FakeProvider(None, session))

    stream = media.open_stream("VID1")

    assert b"".join(stream) == b"abcdefgh"
    assert response.closed
    url, kwargs = session.requests[0]
    assert url.endswith("/files/VID1")
    assert kwargs["params"] == {"alt": "media"}
    assert kwargs["stream"] is True


def test_file_stream_close_without_reading():
    response = FakeResponse(content=b"never read")
    FileStream(response).close()
    assert response.closed



@pytest.mark.asyncio
async def test_probe_returns_duration_plus_padding(video_drive, tmp_path, monkeypatch):
    seen = {}

    def fake_probe(path):
        seen["path"] = path
        with open(path, "rb") as f:
            seen["data"] = f.read()
        return {"format": {"duration": "12.5"}}

    monkeypatch.setattr(duration_probe.ffmpeg, "probe", fake_probe)
    prober = DurationProber(video_drive, temp_dir=str(tmp_path))

    seconds = await prober.probe("VID1", "launch.mp4")

    assert seconds == 12.5 + duration_probe.PLAYBACK_PADDING_SECONDS
    assert seen["data"] == b"not really an mp4"
    assert seen["path"].endswith(".mp4")
    assert os.listdir(tmp_path) == []


@pytest.mark.asyncio
async def test_probe_failure_falls_back_and_cleans_up(video_drive, tmp_path, monkeypatch):
    def broken_probe(path):
        raise ffmpeg.Error("ffprobe", b"", b"moov atom not found")

    monkeypatch.setattr(duration_probe.ffmpeg, "probe", broken_probe)
    prober = DurationProber(video_drive, temp_dir=str(tmp_path))

    seconds = await prober.probe("VID1", "launch.mp4")

    assert seconds == PROBE_FALLBACK_SECONDS
    assert os.listdir(tmp_path) == []


@pytest.mark.asyncio
async def test_probe_download_failure_falls_back(tmp_path, monkeypatch):
    def unexpected_probe(path):
        raise AssertionError("probe should not run")

    monkeypatch.setattr(duration_probe.ffmpeg, "probe", unexpected_probe)
    prober = DurationProber(FakeDriveMedia(), temp_dir=str(tmp_path))

    assert await prober.probe("GONE", "gone.mp4") == PROBE_FALLBACK_SECONDS
    assert os.listdir(tmp_path) == []


@pytest.mark.asyncio
async def test_probe_missing_duration_falls_back(video_drive, tmp_path, monkeypatch):
    monkeypatch.setattr(duration_probe.ffmpeg, "probe", lambda path: {"format": {}})
    prober = DurationProber(video_drive, temp_dir=str(tmp_path))

    assert await prober.probe("VID1", "launch.mp4") == PROBE_FALLBACK_SECONDS


@pytest.mark.asyncio
async def test_enrich_sets_proxy_urls_and_durations(video_drive, tmp_path, monkeypatch):
    monkeypatch.setattr(duration_probe.ffmpeg, "probe", lambda path: {"format": {"duration": "30"}})
    prober = DurationProber(video_drive, temp_dir=str(tmp_path))
    listed = [descriptor("IMG1", "a.jpg"), descriptor("VID1", "launch.mp4", "video")]

    enriched = await prober.enrich(listed, BASE_URL)

    assert [item.to_response() for item in enriched] == [
        {"id": "IMG1", "name": "a.jpg", "type": "image",
         "url": f"{BASE_URL}/api/event-media/IMG1", "durationSeconds": DEFAULT_SLIDE_SECONDS},
        {"id": "VID1", "name": "launch.mp4", "type": "video",
         "url": f"{BASE_URL}/api/event-media/VID1", "durationSeconds": 32.0},
    ]
    # Originals untouched
    assert listed[1].duration_seconds is None


@pytest.mark.asyncio
async def test_enrich_limits_simultaneous_probes(tmp_path, monkeypatch):
    videos = [descriptor(f"VID{i}", f"clip{i}.mp4", "video") for i in range(6)]
    drive = FakeDriveMedia(files={
        item.id: (metadata(item.id, item.name, "video/mp4"), b"frames") for item in videos
    })
    lock = threading.Lock()
    running = {"now": 0, "max": 0, "calls": 0}

    def slow_probe(path):
        with lock:
            running["now"] += 1
            running["calls"] += 1
            running["max"] = max(running["max"], running["now"])
        time.sleep(0.02)
        with lock:
            running["now"] -= 1
        return {"format": {"duration": "5"}}

    monkeypatch.setattr(duration_probe.ffmpeg, "probe", slow_probe)
    prober = DurationProber(drive, temp_dir=str(tmp_path), max_concurrent=2)

    enriched = await prober.enrich(videos, BASE_URL)

    assert running["calls"] == 6
    assert 1 <= running["max"] <= 2
    assert [item.duration_seconds for item in enriched] == [7.0] * 6
    assert os.listdir(tmp_path) == []


def test_event_media_endpoint(test_client, drive_media, monkeypatch):

    monkeypatch.setattr(duration_probe.ffmpeg, "probe", lambda path: {"format": {"duration": "8"}})
    drive_media.folders["event-folder"] = [
        descriptor("IMG1", "a.jpg"),
        descriptor("VID1", "b.mp4", "video"),
    ]
    drive_media.files["VID1"] = (metadata("VID1", "b.mp4", "video/mp4"), b"video-bytes")

    response = test_client.get("/api/event-media")

    assert response.status_code == 200
    body = response.json()
    assert [item["id"] for item in body] == ["IMG1", "VID1"]
    assert body[0]["durationSeconds"] == DEFAULT_SLIDE_SECONDS
    assert body[1]["durationSeconds"] == 10.0
    assert body[1]["url"] == f"{BASE_URL}/api/event-media/VID1"

    # Served from cache the second time
    test_client.get("/api/event-media")
    assert drive_media.list_calls == ["event-folder"]


def test_event_media_endpoint_failure(test_client):
    response = test_client.get("/api/event-media")
    assert response.status_code == 500
    assert "error" in response.json()


def test_event_media_stream(test_client, drive_media):
    drive_media.files["VID1"] = (metadata("VID1", "launch.mp4", "video/mp4"), b"0123456789")

    response = test_client.get("/api/event-media/VID1")

    assert response.status_code == 200
    assert response.content == b"0123456789"
    assert response.headers["content-type"] == "video/mp4"
    assert response.headers["content-disposition"] == 'inline; filename="launch.mp4"'
    assert "etag" not in response.headers
    assert drive_media.streams[0].closed


def test_event_media_stream_unknown_file(test_client):
    response = test_client.get("/api/event-media/nope")
    assert response.status_code == 500
    assert response.json() == {"error": "drive: File not found: nope"}
