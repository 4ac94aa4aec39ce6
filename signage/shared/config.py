"""
Configuration Module

This module manages application configuration settings and environment
variables for the signage backend and the display.

Features:
- Environment loading
- Google credentials path
- Sheet and folder identifiers
- Cache and probe tuning
- Display polling and timing

Data Model:
- Sheet sources (id + range)
- Drive folders
- Server config
- Display config

Dependencies:
- os for env
- dotenv for loading

Author: Signage Development Team
"""

import os
import logging
import tempfile
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 60
DEFAULT_PORT = 3001
DEFAULT_DISPLAY_PORT = 3000
DEFAULT_POLL_SECONDS = 60
DEFAULT_SLIDE_SECONDS = 10
DEFAULT_MAX_CONCURRENT_PROBES = 2


def _int_env(name: str, default: int) -> int:
    """Read an integer variable, falling back to default on bad input."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default


class SheetSource:
    """A spreadsheet id plus the A1 range to read from it."""

    def __init__(self, sheet_id: str, cell_range: str):
        self.sheet_id = sheet_id
        self.cell_range = cell_range

    def __repr__(self):
        return f"SheetSource(sheet_id={self.sheet_id!r}, cell_range={self.cell_range!r})"


class Settings:
    """
    Application settings.

    Attributes:
        credentials_file: Service account key file
        business_news: Business news sheet source
        corp_news: Corporate news sheet source
        event_details: Event details sheet source
        employees: Employee sheet source
        employee_image_folder_id: Drive folder holding employee photos
        event_media_folder_id: Drive folder holding event media
        cache_ttl_seconds: Response cache TTL
        port: Backend listening port
        backend_url: Public base URL used to build proxy links
        cors_origins: Allowed CORS origins
        max_concurrent_probes: Cap on simultaneous video probes
        probe_temp_dir: Directory for transient probe downloads
        display_api_base: Backend URL the display polls
        display_port: Display listening port
        display_poll_seconds: Client-side refetch interval per section
        display_slide_seconds: Default slide duration
        display_brand: Label shown in the display header

    Notes:
        - Every value can be passed explicitly (tests do)
        - Missing values come from the environment
    """

    def __init__(self, **overrides):
        port = _int_env("PORT", DEFAULT_PORT)
        values = {
            "credentials_file": os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "client_secret.json"),
            "business_news": SheetSource(
                os.getenv("SHEET_ID_BUSINESS", ""),
                os.getenv("SHEET_RANGE_BUSINESS", "Sheet1"),
            ),
            "corp_news": SheetSource(
                os.getenv("SHEET_ID_CORP", ""),
                os.getenv("SHEET_RANGE_CORP", "Sheet1"),
            ),
            "event_details": SheetSource(
                os.getenv("SHEET_ID_EVENT", ""),
                os.getenv("SHEET_RANGE_EVENT", "Sheet1"),
            ),
            "employees": SheetSource(
                os.getenv("EMPLOYEE_SHEET_ID", ""),
                os.getenv("SHEET_RANGE_EMPLOYEE", "Sheet1"),
            ),
            "employee_image_folder_id": os.getenv("EMPLOYEE_IMAGE_FOLDER_ID", ""),
            "event_media_folder_id": os.getenv("DRIVE_FOLDER_ID_EVENTS", ""),
            "cache_ttl_seconds": _int_env("CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
            "port": port,
            "backend_url": os.getenv("BACKEND_URL") or f"http://localhost:{port}",
            "cors_origins": [
                origin.strip()
                for origin in os.getenv("CORS_ORIGINS", "*").split(",")
                if origin.strip()
            ],
            "max_concurrent_probes": _int_env("MAX_CONCURRENT_PROBES", DEFAULT_MAX_CONCURRENT_PROBES),
            "probe_temp_dir": os.getenv("PROBE_TEMP_DIR") or tempfile.gettempdir(),
            "display_api_base": os.getenv("DISPLAY_API_BASE", f"http://localhost:{DEFAULT_PORT}"),
            "display_port": _int_env("DISPLAY_PORT", DEFAULT_DISPLAY_PORT),
            "display_poll_seconds": _int_env("DISPLAY_POLL_SECONDS", DEFAULT_POLL_SECONDS),
            "display_slide_seconds": _int_env("DISPLAY_SLIDE_SECONDS", DEFAULT_SLIDE_SECONDS),
            "display_brand": os.getenv("DISPLAY_BRAND", "Signage"),
        }
        unknown = set(overrides) - set(values)
        if unknown:
            raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
        values.update(overrides)
        for name, value in values.items():
            setattr(self, name, value)
        self.backend_url = self.backend_url.rstrip("/")
        self.display_api_base = self.display_api_base.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings built from the environment."""
    return Settings()


def proxy_url(base_url: str, path: str, file_id: Optional[str] = None) -> str:
    """Join the public base URL, an API path and an optional file id."""
    url = f"{base_url.rstrip('/')}/{path.strip('/')}"
    if file_id:
        url = f"{url}/{file_id}"
    return url
