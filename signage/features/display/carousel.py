"""
Carousel Driver

Keeps the display's view of every section fresh and decides which section
is on screen.

Architecture:
-----------
1. Polling:
   - All sections fetched in parallel at start
   - Each section refetched on its own interval
   - Failures mark the section errored; last good cards are kept

2. Rotation:
   - Active section shown for slide_seconds(section, cards)
   - Then (i + 1) mod N, forever

3. State:
   - DisplayState: active index, per-section queries, slide start, wall clock
   - The wall clock ticks once a second for the header clock

Dependencies:
-----------
- aiohttp: HTTP client for the backend API
- asyncio: timers and tasks

Author: Signage Development Team
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiohttp

from signage.shared.config import DEFAULT_SLIDE_SECONDS

from .cards import Card, build_cards, slide_seconds
from .sections import Section

logger = logging.getLogger(__name__)

FetchJson = Callable[[str], Awaitable[Any]]


class FetchError(Exception):
    """Non-OK response from the backend API."""


class AiohttpFetcher:
    """GETs JSON from the backend with a shared aiohttp session."""

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def __call__(self, url: str) -> Any:
        async with self.session.get(url) as response:
            if response.status != 200:
                raise FetchError(f"Fetch failed: {response.status}")
            return await response.json()


@dataclass
class SectionQuery:
    """Client-side cache entry for one section."""

    cards: Optional[List[Card]] = None
    error: Optional[str] = None
    fetched_at: Optional[float] = None

    @property
    def is_loading(self) -> bool:
        return self.cards is None and self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass
class DisplayState:
    active_index: int = 0
    slide_started_at: float = 0.0
    queries: Dict[str, SectionQuery] = field(default_factory=dict)
    now: Optional[datetime] = None


class CarouselDriver:
    """
    Polls section endpoints and rotates the active section.

    Attributes:
        sections: Sections in display order
        fetch_json: Coroutine function returning parsed JSON for a URL
        poll_seconds: Refetch interval per section
        default_slide_seconds: Slide duration for non-media sections
        clock: Monotonic time source
        wall_clock: Time shown in the header clock
    """

    def __init__(self, sections: List[Section], fetch_json: FetchJson,
                 poll_seconds: float = 60,
                 default_slide_seconds: float = DEFAULT_SLIDE_SECONDS,
                 clock: Callable[[], float] = time.monotonic,
                 wall_clock: Callable[[], datetime] = datetime.now):
        if not sections:
            raise ValueError("At least one section is required")
        self.sections = list(sections)
        self.fetch_json = fetch_json
        self.poll_seconds = poll_seconds
        self.default_slide_seconds = default_slide_seconds
        self.clock = clock
        self.wall_clock = wall_clock
        self.state = DisplayState(
            slide_started_at=clock(),
            now=wall_clock(),
            queries={section.key: SectionQuery() for section in self.sections},
        )
        self._tasks: List[asyncio.Task] = []

    @property
    def active_section(self) -> Section:
        return self.sections[self.state.active_index]

    def query(self, section: Section) -> SectionQuery:
        return self.state.queries[section.key]

    async def refresh(self, section: Section) -> SectionQuery:
        """Fetch one section (and its extra endpoint) into its query."""
        query = self.query(section)
        try:
            payload = await self.fetch_json(section.url)
            extra = None
            if section.extra_url:
                extra = await self.fetch_json(section.extra_url)
            cards = build_cards(section, payload, extra)
        except Exception as e:
            logger.error(f"Failed to load section {section.key}: {str(e)}")
            query.error = str(e) or e.__class__.__name__
            return query

        query.cards = cards
        query.error = None
        query.fetched_at = self.clock()
        logger.info(f"Loaded {len(cards)} cards for {section.key}")
        return query

    async def refresh_all(self):
        await asyncio.gather(*(self.refresh(section) for section in self.sections))

    def slide_duration(self, index: Optional[int] = None) -> float:
        """Seconds the section at index (default: active) stays on screen."""
        section = self.sections[self.state.active_index if index is None else index]
        cards = self.query(section).cards or []
        return slide_seconds(section, cards, self.default_slide_seconds)

    def remaining_seconds(self) -> float:
        elapsed = self.clock() - self.state.slide_started_at
        return max(0.0, self.slide_duration() - elapsed)

    def advance(self) -> Section:
        self.state.active_index = (self.state.active_index + 1) % len(self.sections)
        self.state.slide_started_at = self.clock()
        logger.debug(f"Showing section {self.active_section.key}")
        return self.active_section

    def tick(self) -> datetime:
        self.state.now = self.wall_clock()
        return self.state.now

    def age_seconds(self, section: Section) -> Optional[float]:
        """Seconds since the section last loaded, None before the first load."""
        fetched_at = self.query(section).fetched_at
        if fetched_at is None:
            return None
        return max(0.0, self.clock() - fetched_at)

    async def _poll(self, section: Section):
        while True:
            await asyncio.sleep(self.poll_seconds)
            await self.refresh(section)

    async def _rotate(self):
        while True:
            await asyncio.sleep(self.remaining_seconds())
            # Media may have loaded while waiting
            if self.remaining_seconds() <= 0:
                self.advance()

    async def _tick(self):
        while True:
            self.tick()
            await asyncio.sleep(1)

    async def start(self):
        """Load every section once, then start polling and rotation tasks."""
        await self.refresh_all()
        self.state.slide_started_at = self.clock()
        self.tick()
        self._tasks = [asyncio.create_task(self._poll(section)) for section in self.sections]
        self._tasks.append(asyncio.create_task(self._rotate()))
        self._tasks.append(asyncio.create_task(self._tick()))

    async def stop(self):
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    def snapshot(self) -> Dict[str, Any]:
        """JSON-friendly view of the display state."""
        section = self.active_section
        query = self.query(section)
        return {
            "activeSection": section.key,
            "activeIndex": self.state.active_index,
            "slideSeconds": self.slide_duration(),
            "remainingSeconds": round(self.remaining_seconds(), 3),
            "now": self.state.now.isoformat() if self.state.now else None,
            "sections": {
                s.key: {
                    "loading": self.query(s).is_loading,
                    "error": self.query(s).error,
                    "cards": len(self.query(s).cards or []),
                    "ageSeconds": _rounded(self.age_seconds(s)),
                }
                for s in self.sections
            },
            "cards": [card.model_dump() for card in (query.cards or [])],
        }


def _rounded(value: Optional[float]) -> Optional[float]:
    return None if value is None else round(value, 3)
