"""
Google Client Provider

This module loads the service-account identity and builds the clients used
to reach Google Sheets (tabular content) and Google Drive (media files).

Features:
- Read-only scopes
- Lazy credential loading
- gspread client for Sheets
- Drive v3 discovery client
- Authorized HTTP session for byte streaming

Security:
- Service account auth
- Read-only scopes only
- Credentials never leave the backend

Dependencies:
- google-auth: credentials and authorized session
- gspread: Google Sheets API
- google-api-python-client: Drive API

Author: Signage Development Team
"""

import logging
import threading
import gspread
from google.oauth2 import service_account
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from googleapiclient.discovery import build

from .errors import UpstreamError

logger = logging.getLogger(__name__)

READONLY_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]


class GoogleClientProvider:
    """
    Builds and caches Google clients for one service account.

    Attributes:
        credentials_file: Path to the service account key
        scopes: OAuth scopes requested for the token

    Notes:
        - Nothing is loaded until a client is first requested
        - google-auth refreshes the token on use
    """

    def __init__(self, credentials_file: str, scopes=None):
        self.credentials_file = credentials_file
        self.scopes = list(scopes or READONLY_SCOPES)
        self._credentials = None
        self._sheets = None
        self._local = threading.local()
        self._session = None
        self._lock = threading.Lock()

    def credentials(self):
        with self._lock:
            if self._credentials is None:
                try:
                    self._credentials = service_account.Credentials.from_service_account_file(
                        self.credentials_file, scopes=self.scopes
                    )
                except (OSError, ValueError, GoogleAuthError) as e:
                    logger.error(f"Failed to load credentials from {self.credentials_file}: {str(e)}")
                    raise UpstreamError(f"Failed to load credentials: {str(e)}", service="auth")
                logger.info(f"Loaded service account credentials from {self.credentials_file}")
            return self._credentials

    def sheets(self) -> gspread.Client:
        """gspread client for the tabular source."""
        creds = self.credentials()
        with self._lock:
            if self._sheets is None:
                self._sheets = gspread.authorize(creds)
            return self._sheets

    def drive(self):
        """
        Drive v3 service for listing and metadata.

        The discovery client is not thread-safe, so each worker thread
        gets its own instance.
        """
        creds = self.credentials()
        service = getattr(self._local, "drive", None)
        if service is None:
            service = build("drive", "v3", credentials=creds, cache_discovery=False)
            self._local.drive = service
        return service

    def session(self) -> AuthorizedSession:
        """Authorized requests session for streaming file bytes."""
        creds = self.credentials()
        with self._lock:
            if self._session is None:
                self._session = AuthorizedSession(creds)
            return self._session
