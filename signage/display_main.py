"""
Display Entry Module

Runs the kiosk display with uvicorn.

Usage:
    python -m signage.display_main

Author: Signage Development Team
"""

import logging

import uvicorn

from signage.display_app import create_display_app
from signage.shared.config import get_settings

logging.basicConfig(level=logging.INFO)

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        create_display_app(settings),
        host="0.0.0.0",
        port=settings.display_port,
        log_level="info"
    )
