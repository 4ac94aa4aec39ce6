"""
Display Card Models

Turns API payloads into the cards a slide shows. Each content type has its
own card model carrying only the fields its layout needs; the models form a
tagged union discriminated by `kind`.

Models Overview:
--------------
- NewsCard: title, subtitle, description, image, date
- MediaCard: image or video with a display duration
- EmployeeCard: name, detail, photo
- EventDetailCard: event name, date, description

Data Flow:
---------
1. Sheet endpoints return header + rows
2. format_rows keys each data row by the header
3. build_cards maps records (or media descriptors) to cards

Dependencies:
-----------
- Pydantic: Card models

Author: Signage Development Team
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from signage.shared.config import DEFAULT_SLIDE_SECONDS

from .sections import ContentType, Section


def format_rows(rows: Optional[List[List[Any]]]) -> List[Dict[str, str]]:
    """
    Key data rows by the header row.

    The first row is the header and never becomes a record. Missing
    trailing cells become "".
    """
    if not rows:
        return []
    headers = rows[0]
    records = []
    for row in rows[1:]:
        record = {}
        for idx, key in enumerate(headers):
            value = row[idx] if idx < len(row) else None
            record[key] = "" if value is None else str(value)
        records.append(record)
    return records


class NewsCard(BaseModel):
    kind: Literal["news"] = "news"
    title: str = ""
    subtitle: str = ""
    description: str = ""
    image_url: str = ""
    date: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, str]) -> "NewsCard":
        return cls(
            title=record.get("Title", ""),
            subtitle=record.get("Subtitle", ""),
            description=record.get("Description", ""),
            image_url=record.get("url", ""),
            date=record.get("Date", ""),
        )


class MediaCard(BaseModel):
    kind: Literal["media"] = "media"
    id: str
    name: str = ""
    media_type: Literal["image", "video"] = "image"
    url: str = ""
    duration_seconds: float = DEFAULT_SLIDE_SECONDS

    @property
    def is_video(self) -> bool:
        return self.media_type == "video" or self.url.endswith(".mp4")

    @classmethod
    def from_descriptor(cls, item: Dict[str, Any]) -> "MediaCard":
        duration = item.get("durationSeconds") or DEFAULT_SLIDE_SECONDS
        return cls(
            id=str(item.get("id", "")),
            name=item.get("name") or "",
            media_type="video" if item.get("type") == "video" else "image",
            url=item.get("url") or "",
            duration_seconds=float(duration),
        )


class EmployeeCard(BaseModel):
    kind: Literal["employee"] = "employee"
    name: str = ""
    detail: str = ""
    image_url: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, str]) -> "EmployeeCard":
        return cls(
            name=record.get("Employee name", ""),
            detail=record.get("Employee detail", ""),
            image_url=record.get("Employee image url", ""),
        )


class EventDetailCard(BaseModel):
    kind: Literal["eventDetail"] = "eventDetail"
    name: str = ""
    date: str = ""
    description: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, str]) -> "EventDetailCard":
        return cls(
            name=record.get("Event name", ""),
            date=record.get("Date", ""),
            description=record.get("Event description", ""),
        )


Card = Annotated[
    Union[NewsCard, MediaCard, EmployeeCard, EventDetailCard],
    Field(discriminator="kind"),
]

_RECORD_CARDS = {
    ContentType.NEWS: NewsCard,
    ContentType.EMPLOYEE: EmployeeCard,
    ContentType.EVENT_DETAIL: EventDetailCard,
}


def build_cards(section: Section, payload: Any, extra_payload: Any = None) -> List[Card]:
    """
    Cards for one section.

    Media sections take a descriptor list; every other section takes
    header + rows. Rows from the extra endpoint are appended as event
    detail cards.
    """
    if section.content_type == ContentType.MEDIA:
        cards = [MediaCard.from_descriptor(item) for item in payload or []]
    else:
        card_cls = _RECORD_CARDS[section.content_type]
        cards = [card_cls.from_record(record) for record in format_rows(payload)]

    if extra_payload is not None:
        cards.extend(EventDetailCard.from_record(record) for record in format_rows(extra_payload))
    return cards


def slide_seconds(section: Section, cards: List[Card], default: float = DEFAULT_SLIDE_SECONDS) -> float:
    """
    How long a section stays on screen.

    Media sections stay up for the longest loaded item (never less than the
    default) so every video plays through; other sections use the default.
    """
    if section.content_type != ContentType.MEDIA:
        return default
    durations = [card.duration_seconds for card in cards if isinstance(card, MediaCard)]
    if not durations:
        return default
    return max(default, max(durations))
