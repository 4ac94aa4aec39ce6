"""
Display Application Module

The kiosk side of the signage system. It polls the backend API over HTTP,
rotates the sections on a timer and serves the page a TV browser shows.
It holds no Google credentials.

Features:
- Carousel driver lifecycle
- Shared aiohttp session
- Page and state routes

Dependencies:
- FastAPI for routing
- aiohttp for backend polling
- Logging

Author: Signage Development Team
"""

import logging
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI

from .features.display.carousel import AiohttpFetcher, CarouselDriver
from .features.display.routes_display import router as display_router
from .features.display.sections import default_sections
from .shared.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_display_app(settings: Settings = None, fetch_json=None, sections=None) -> FastAPI:
    """
    Build the display app.

    Args:
        settings: Settings to use (environment by default)
        fetch_json: Coroutine function URL -> JSON; an aiohttp-based
            fetcher is created at startup when omitted
        sections: Sections to rotate (default_sections by default)
    """
    settings = settings or get_settings()
    sections = sections or default_sections(settings.display_api_base)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session = None
        fetcher = fetch_json
        if fetcher is None:
            session = aiohttp.ClientSession()
            fetcher = AiohttpFetcher(session)

        driver = CarouselDriver(
            sections,
            fetcher,
            poll_seconds=settings.display_poll_seconds,
            default_slide_seconds=settings.display_slide_seconds,
        )
        app.state.driver = driver
        logger.info(f"Display polling {settings.display_api_base} every {settings.display_poll_seconds}s")
        await driver.start()
        try:
            yield
        finally:
            await driver.stop()
            if session is not None:
                await session.close()
            logger.info("Display stopped")

    app = FastAPI(title="Signage Display", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(display_router)
    return app
