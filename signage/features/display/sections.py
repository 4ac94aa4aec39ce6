"""
Display Sections

Static configuration of the carousel: which sections rotate, where their
data comes from, and how each one looks.

Author: Signage Development Team
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ContentType(str, Enum):
    NEWS = "news"
    MEDIA = "media"
    EMPLOYEE = "employee"
    EVENT_DETAIL = "eventDetail"


@dataclass(frozen=True)
class Section:
    """
    One carousel-rotated content category.

    Attributes:
        key: Stable identifier
        title: Heading shown on the slide
        theme: (from, to) gradient colours
        url: Primary data endpoint
        content_type: How the primary payload is rendered
        extra_url: Optional second endpoint whose rows are appended
            as event detail cards
    """

    key: str
    title: str
    theme: tuple
    url: str
    content_type: ContentType
    extra_url: Optional[str] = None


def default_sections(api_base: str) -> List[Section]:
    base = api_base.rstrip("/")
    return [
        Section(
            key="businessNews",
            title="📊 Business Updates",
            theme=("#0E3B43", "#415a77"),
            url=f"{base}/api/business-news",
            content_type=ContentType.NEWS,
        ),
        Section(
            key="corpNews",
            title="🏢 Office / Corporate",
            theme=("#216869", "#6e68a1"),
            url=f"{base}/api/corp-news",
            content_type=ContentType.NEWS,
        ),
        Section(
            key="media",
            title="🎥 Media & Events",
            theme=("#677DB7", "#415a77"),
            url=f"{base}/api/event-media",
            extra_url=f"{base}/api/event-details",
            content_type=ContentType.MEDIA,
        ),
        Section(
            key="employees",
            title="👥 Employee Highlights",
            theme=("#0E3B43", "#216869"),
            url=f"{base}/api/employees",
            content_type=ContentType.EMPLOYEE,
        ),
    ]
