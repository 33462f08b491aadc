"""Data normalization functions for the episode sources.

Every upstream speaks its own dialect: Anizip nests titles by language and
spells the air date two ways, Kitsu wraps everything in JSON:API
``attributes`` with a multi-size thumbnail object, and Crysoline providers
hand back images as plain strings, ``{jpeg, webp}`` objects or ``resized``
maps. The functions here reduce each record to the small shapes in
``models.types`` so the reconciliation passes never look at raw payloads.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..models.types import AirDate, MetadataEpisode, StreamingEpisode
from ..utils.helpers import first_defined, format_distance
from .responses import iso_timestamp

_RESOLUTION_RE = re.compile(r"(\d+)x(\d+)")
# fromisoformat on 3.10 wants exactly 3 or 6 fraction digits and a colon in the offset
_FRACTION_RE = re.compile(r"([T ]\d{2}:\d{2}:\d{2})\.(\d+)")
_OFFSET_RE = re.compile(r"([+-]\d{2})(\d{2})$")


def text(value: Any) -> Optional[str]:
    """Non-empty string or None."""
    if value is None:
        return None
    s = str(value)
    return s if s else None


def parse_episode_number(value: Any) -> Optional[int]:
    """Positive integer episode number, or None when the value can't be one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        n = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        n = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        n = int(value.strip())
    else:
        return None
    return n if n > 0 else None


def parse_rating(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        m = re.match(r"\s*[-+]?(\d+(\.\d*)?|\.\d+)", value)
        return float(m.group(0)) if m else None
    return None


def parse_date(raw: Any) -> Optional[datetime]:
    """Timezone-aware datetime from an ISO-8601 date/timestamp; naive values are UTC."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    s = raw.strip()
    if s[-1] in "Zz":
        s = s[:-1] + "+00:00"
    s = _FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", s)
    if len(s) > 10:
        s = _OFFSET_RE.sub(r"\1:\2", s)
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def derive_air_date(raw: Any, now: Optional[datetime] = None) -> Optional[AirDate]:
    """All three air-date representations from one timestamp, or None."""
    dt = parse_date(raw)
    if dt is None:
        return None
    utc = dt.astimezone(timezone.utc)
    return {
        "iso": iso_timestamp(utc),
        "relative": format_distance(utc, now),
        "unix": int(utc.timestamp() // 1),
    }


def best_image_url(image: Any) -> Optional[str]:
    """Collapse a Crysoline image (string, jpeg/webp set, or resized map) to one URL."""
    if not image:
        return None
    if isinstance(image, str):
        return image
    if not isinstance(image, dict):
        return None

    jpeg = image.get("jpeg")
    if isinstance(jpeg, dict) and jpeg:
        return text(first_defined([lambda: jpeg.get("hq"), lambda: jpeg.get("sm")]))

    resized = image.get("resized")
    if isinstance(resized, dict) and resized:
        sized = []
        for key in resized:
            m = _RESOLUTION_RE.search(key)
            if m:
                sized.append((int(m.group(1)) * int(m.group(2)), key))
        if sized:
            # largest area wins; first key wins ties
            best = max(sized, key=lambda s: s[0])[1]
            return text(resized[best])
        return text(next(iter(resized.values())))

    return None


def kitsu_thumbnail(thumbnail: Any) -> Optional[str]:
    thumb = thumbnail if isinstance(thumbnail, dict) else {}
    return first_defined([
        lambda: thumb.get("original"),
        lambda: thumb.get("large"),
        lambda: thumb.get("medium"),
        lambda: thumb.get("small"),
    ])


def norm_anizip_episode(e: Dict[str, Any]) -> Optional[MetadataEpisode]:
    if not isinstance(e, dict):
        return None
    number = parse_episode_number(e.get("episodeNumber"))
    if number is None:
        return None
    titles = e.get("title")
    if not isinstance(titles, dict):
        titles = {}
    return {
        "number": number,
        "id": text(e.get("tvdbId")),
        "title": first_defined([lambda: titles.get("en"), lambda: titles.get("x-jat")]),
        "rating": parse_rating(e.get("rating")),
        "airDate": first_defined([lambda: e.get("airDate"), lambda: e.get("airdate")]),
        "thumbnail": text(e.get("image")),
        "description": text(e.get("overview")),
    }


def norm_kitsu_episode(e: Dict[str, Any]) -> Optional[MetadataEpisode]:
    if not isinstance(e, dict):
        return None
    attrs = e.get("attributes")
    if not isinstance(attrs, dict):
        attrs = {}
    number = parse_episode_number(attrs.get("number"))
    if number is None:
        return None
    return {
        "number": number,
        "id": text(e.get("id")),
        "title": text(attrs.get("canonicalTitle")),
        "rating": None,
        "airDate": text(attrs.get("airDate")),
        "thumbnail": kitsu_thumbnail(attrs.get("thumbnail")),
        "description": first_defined([
            lambda: attrs.get("description"),
            lambda: attrs.get("synopsis"),
        ]),
    }


def norm_streaming_episode(e: Dict[str, Any]) -> StreamingEpisode:
    filler = e.get("isFiller")
    recap = e.get("isRecap")
    return {
        "id": e.get("id"),
        "title": text(e.get("title")),
        "image": best_image_url(e.get("image")),
        "description": text(e.get("description")),
        "number": parse_episode_number(e.get("number")),
        "teaserUrl": text(e.get("teaserUrl")),
        "metadata": e.get("metadata"),
        "isFiller": filler if isinstance(filler, bool) else None,
        "isRecap": recap if isinstance(recap, bool) else None,
    }
