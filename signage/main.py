"""
Main Entry Module

Runs the signage backend with uvicorn.

Usage:
    python -m signage.main

Author: Signage Development Team
"""

import uvicorn

from signage.shared.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "signage.app:app",
        host="0.0.0.0",
        port=settings.port,
        log_level="info"
    )
