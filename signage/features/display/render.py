"""
Display Page Rendering

Builds the kiosk HTML page for the active section: a header with the brand
and a live clock, the section title over its theme gradient, and either a
status line (loading / error / empty) or the section's cards.

The page reloads itself when the current slide's time is up, so the kiosk
browser follows the carousel without any client-side framework.

Author: Signage Development Team
"""

from datetime import datetime
from html import escape
from typing import List, Optional

from .cards import Card, EmployeeCard, EventDetailCard, MediaCard, NewsCard
from .sections import Section

LOADING_TEXT = "⏳ Loading..."
ERROR_TEXT = "❌ Error loading data"
EMPTY_TEXT = "🚫 No updates"

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d")


def format_date(value: str) -> str:
    """Render a sheet date as M/D/YYYY; unparseable values pass through."""
    value = (value or "").strip()
    if not value:
        return ""
    parsed = None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return value
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def absolute_url(api_base: str, url: str) -> str:
    if not url or url.startswith(("http://", "https://", "data:")):
        return url
    return f"{api_base.rstrip('/')}/{url.lstrip('/')}"


def render_news(card: NewsCard, api_base: str) -> str:
    parts = [f'<h2 class="card-title">{escape(card.title)}</h2>']
    if card.subtitle:
        parts.append(f'<h3 class="card-subtitle">{escape(card.subtitle)}</h3>')
    if card.description:
        parts.append(f'<p class="card-text">{escape(card.description)}</p>')
    if card.image_url:
        src = escape(absolute_url(api_base, card.image_url), quote=True)
        parts.append(f'<img class="card-image" src="{src}" alt="{escape(card.title, quote=True)}" loading="lazy">')
    if card.date:
        parts.append(f'<span class="card-date">{escape(format_date(card.date))}</span>')
    return f'<div class="card padded">{"".join(parts)}</div>'


def render_media(card: MediaCard, api_base: str) -> str:
    src = escape(absolute_url(api_base, card.url), quote=True)
    if card.is_video:
        body = f'<video src="{src}" autoplay loop muted playsinline preload="auto"></video>'
    else:
        body = f'<img src="{src}" alt="{escape(card.name, quote=True)}" loading="lazy">'
    return f'<div class="card"><div class="media-frame">{body}</div></div>'


def render_employee(card: EmployeeCard, api_base: str) -> str:
    parts = []
    if card.image_url:
        src = escape(absolute_url(api_base, card.image_url), quote=True)
        parts.append(f'<img class="employee-photo" src="{src}" alt="{escape(card.name, quote=True)}" loading="lazy">')
    parts.append(f'<h2 class="card-title">{escape(card.name)}</h2>')
    parts.append(f'<p class="card-text">{escape(card.detail)}</p>')
    return f'<div class="card padded">{"".join(parts)}</div>'


def render_event_detail(card: EventDetailCard, api_base: str) -> str:
    parts = [f'<h2 class="card-title large">{escape(card.name)}</h2>']
    if card.date:
        parts.append(f'<p class="card-date">📅 {escape(format_date(card.date))}</p>')
    if card.description:
        parts.append(f'<p class="card-text">{escape(card.description)}</p>')
    return f'<div class="card padded">{"".join(parts)}</div>'


_RENDERERS = {
    "news": render_news,
    "media": render_media,
    "employee": render_employee,
    "eventDetail": render_event_detail,
}


def render_card(card: Card, api_base: str) -> str:
    return _RENDERERS[card.kind](card, api_base)


def render_body(cards: Optional[List[Card]], loading: bool, error: bool, api_base: str) -> str:
    """Status line or card grid, in that priority."""
    if loading:
        return f'<p class="status">{LOADING_TEXT}</p>'
    if error:
        return f'<p class="status">{ERROR_TEXT}</p>'
    if not cards:
        return f'<p class="status muted">{EMPTY_TEXT}</p>'
    return '<div class="grid">' + "".join(render_card(card, api_base) for card in cards) + "</div>"


PAGE_STYLE = """
* { box-sizing: border-box; }
body { margin: 0; font-family: sans-serif; color: #fff; height: 100vh; overflow: hidden; display: flex; flex-direction: column; }
header { background: #1e293b; display: flex; justify-content: space-between; align-items: center; padding: 12px 32px; }
header h1 { margin: 0; font-size: 1.5rem; }
.clock { text-align: right; }
.clock .time { font-size: 1.1rem; font-weight: bold; }
.clock .date { font-size: 0.85rem; opacity: 0.8; }
main { flex: 1; display: flex; flex-direction: column; align-items: center; padding: 24px; }
main h1 { font-size: 2.25rem; margin: 0 0 24px; }
.grid { display: flex; flex-wrap: wrap; justify-content: center; gap: 24px; width: 100%; max-width: 80rem; overflow: hidden; }
.card { background: rgba(255,255,255,0.1); border-radius: 16px; display: flex; flex-direction: column; flex: 1 1 22rem; min-width: 18rem; max-width: 24rem; overflow: hidden; }
.card.padded { padding: 24px; }
.card-title { margin: 0 0 8px; font-size: 1.25rem; }
.card-title.large { font-size: 1.5rem; }
.card-subtitle { margin: 0 0 8px; color: #e5e7eb; font-size: 1rem; }
.card-text { font-size: 0.9rem; opacity: 0.9; }
.card-date { font-size: 0.8rem; color: #e5e7eb; margin-top: 8px; }
.card-image, .employee-photo { width: 100%; height: 10rem; object-fit: contain; border-radius: 8px; margin: 12px 0; }
.media-frame { width: 100%; height: 14rem; background: rgba(0,0,0,0.5); }
.media-frame img, .media-frame video { width: 100%; height: 100%; object-fit: cover; }
.status { font-size: 1.1rem; }
.status.muted { opacity: 0.8; }
"""

CLOCK_SCRIPT = """
(function () {
  var reloadAt = Date.now() + %d;
  function tick() {
    var now = new Date();
    document.getElementById("clock-time").textContent =
      now.toLocaleTimeString("en-US", { hour12: false });
    document.getElementById("clock-date").textContent =
      now.toLocaleDateString("en-US", { weekday: "long", year: "numeric", month: "long", day: "numeric" });
    if (Date.now() >= reloadAt) { window.location.reload(); }
  }
  tick();
  setInterval(tick, 1000);
})();
"""


def render_page(section: Section, cards: Optional[List[Card]], loading: bool, error: bool,
                remaining_seconds: float, brand: str, api_base: str,
                now: Optional[datetime] = None) -> str:
    """Full HTML document for the active slide."""
    now = now or datetime.now()
    start, end = section.theme
    reload_ms = max(1000, int(remaining_seconds * 1000))
    body = render_body(cards, loading, error, api_base)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{escape(brand)} - {escape(section.title)}</title>
<style>{PAGE_STYLE}</style>
</head>
<body>
<header>
  <h1>{escape(brand)}</h1>
  <div class="clock">
    <div class="time" id="clock-time">{now.strftime("%H:%M:%S")}</div>
    <div class="date" id="clock-date">{now.strftime("%A, %B %d, %Y")}</div>
  </div>
</header>
<main data-section="{escape(section.key, quote=True)}" style="background: linear-gradient(to bottom right, {start}, {end});">
  <h1>{escape(section.title)}</h1>
  {body}
</main>
<script>{CLOCK_SCRIPT % reload_ms}</script>
</body>
</html>
"""
