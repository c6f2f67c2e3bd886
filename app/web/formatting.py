"""Text helpers for rendering VNDB data in HTML.

VNDB descriptions are plain text with a small BBCode dialect; the only markup
we turn into HTML is ``[url=...]text[/url]``. Anything that looks like an HTML
tag is stripped and all remaining text is escaped, so the output is safe to
embed as-is (the helpers return ``markupsafe.Markup``).
"""

import random
import re
from urllib.parse import urlencode, urlparse

from markupsafe import Markup, escape

from app import schemas
from app.config import get_settings

settings = get_settings()

NO_SYNOPSIS = "No synopsis available."
ELLIPSIS = "…"
VNDB_SITE = "https://vndb.org"

PLACEHOLDERS = ["Steins;Gate", "Ever17", "Fate/stay night", "White Album 2"]

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_BBCODE_LINK_RE = re.compile(r"\[url=([^\]]+)\]([^\[]+)\[/url\]", re.IGNORECASE)


def strip_markup(text: str) -> str:
    """Replace every HTML-like tag with a space."""
    return _TAG_RE.sub(" ", text)


def _link_target(url: str) -> str | None:
    url = url.strip()
    if url.startswith("/"):
        # VNDB-internal reference such as /v17 or /c123
        return f"{VNDB_SITE}{url}"
    if url.lower().startswith(("http://", "https://")):
        return url
    return None


def render_links(text: str) -> Markup:
    """Escape text and turn ``[url=...]label[/url]`` into anchors."""
    parts = []
    pos = 0
    for match in _BBCODE_LINK_RE.finditer(text):
        parts.append(escape(text[pos:match.start()]))
        target = _link_target(match.group(1))
        label = match.group(2)
        if target:
            parts.append(
                Markup('<a href="{}" target="_blank" rel="noreferrer">{}</a>').format(target, label)
            )
        else:
            parts.append(escape(label))
        pos = match.end()
    parts.append(escape(text[pos:]))
    return Markup("").join(parts)


def sanitize_description(description: str | None) -> Markup:
    """Full description for the detail page: tags stripped, whitespace collapsed."""
    if not description:
        return Markup(NO_SYNOPSIS)
    text = _WHITESPACE_RE.sub(" ", strip_markup(description)).strip()
    return render_links(text)


def format_snippet(description: str | None, length: int | None = None) -> Markup:
    """Short synopsis for result cards, truncated with an ellipsis."""
    if not description:
        return Markup(NO_SYNOPSIS)
    length = length or settings.snippet_length
    text = strip_markup(description)
    if len(text) > length:
        text = text[:length].strip() + ELLIPSIS
    return render_links(text.strip())


def format_rating(value: float | None, votes: int | None, empty: str = "Unscored") -> str:
    """Format a 10-100 VNDB average as "8.5 • 1,234 votes"."""
    if not value or not votes:
        return empty
    return f"{value / 10:.1f} • {votes:,} votes"


def format_hours(minutes: int | None) -> str | None:
    """Average play time in whole hours, rounded half up."""
    if not minutes:
        return None
    return f"{int(minutes / 60 + 0.5)}h avg"


def select_display_tags(
    tags: list[schemas.VNTag],
    limit: int | None = None,
) -> list[schemas.VNTag]:
    """Non-spoiler tags, highest rated first, capped at ``limit`` (default 12)."""
    limit = settings.display_tag_limit if limit is None else limit
    visible = [tag for tag in tags if not tag.spoiler]
    visible.sort(key=lambda tag: tag.rating or 0, reverse=True)
    return visible[:limit]


def is_allowed_image(url: str | None) -> bool:
    """Only images served from the known VNDB image hosts are rendered."""
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme == "https" and parsed.hostname in settings.image_hosts


def query_suffix(query: str | None) -> str:
    """``?q=...`` to carry the search query across pages, or empty."""
    if not query:
        return ""
    return "?" + urlencode({"q": query})


def random_placeholder() -> str:
    return random.choice(PLACEHOLDERS)
