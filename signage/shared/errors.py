"""
Error Types

Failures raised by the Google-backed sources and by the duration prober.

- UpstreamError: the tabular or file-storage service refused or failed.
  Endpoints answer these with HTTP 500 and {"error": message}.
- ProbeError: duration extraction failed. Only raised inside the prober,
  which recovers with a fallback duration.

Author: Signage Development Team
"""

from typing import Optional


class UpstreamError(Exception):
    """Credential or API failure of an upstream Google service."""

    def __init__(self, message: str, service: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.service = service

    def __str__(self):
        if self.service:
            return f"{self.service}: {self.message}"
        return self.message


class ProbeError(Exception):
    """Duration extraction failure for a single media file."""

    def __init__(self, file_id: str, reason: str):
        super().__init__(f"Could not probe {file_id}: {reason}")
        self.file_id = file_id
        self.reason = reason
