"""
Display Routes

- GET /        kiosk page for the active section
- GET /state   JSON snapshot of the carousel (debugging, monitoring)

Author: Signage Development Team
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from .carousel import CarouselDriver
from .render import render_page

router = APIRouter(tags=["display"])


def get_driver(request: Request) -> CarouselDriver:
    return request.app.state.driver


@router.get("/", response_class=HTMLResponse)
async def display_page(request: Request):
    driver = get_driver(request)
    settings = request.app.state.settings
    section = driver.active_section
    query = driver.query(section)
    return render_page(
        section,
        query.cards,
        loading=query.is_loading,
        error=query.is_error,
        remaining_seconds=driver.remaining_seconds(),
        brand=settings.display_brand,
        api_base=settings.display_api_base,
        now=driver.state.now,
    )


@router.get("/state")
async def display_state(request: Request):
    return get_driver(request).snapshot()
