"""Kitsu episode listing (Metadata Source B)."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests

from ..config import get_settings
from ..core.http_client import http_get
from ..core.normalizers import parse_episode_number

logger = logging.getLogger(__name__)

KITSU_HEADERS = {
    "Accept": "application/vnd.api+json",
    "Content-Type": "application/vnd.api+json",
}


def _fetch_page(kitsu_id: str, offset: int, limit: int) -> Optional[Dict[str, Any]]:
    url = f"{get_settings().kitsu_url}/anime/{kitsu_id}/episodes"
    params = {"page[limit]": limit, "page[offset]": offset, "sort": "number"}
    try:
        r = http_get(url, params=params, headers=KITSU_HEADERS)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("Failed to fetch Kitsu episodes for %s at offset %d: %s", kitsu_id, offset, e)
        return None


def _episode_sort_key(e: Dict[str, Any]) -> int:
    return parse_episode_number((e.get("attributes") or {}).get("number")) or 0


def get_kitsu_episodes(kitsu_id: str) -> Optional[List[Dict[str, Any]]]:
    """Every episode of a Kitsu anime, sorted by number.

    None when the first page fails; later pages that fail are skipped.
    """
    settings = get_settings()
    limit = settings.kitsu_page_size

    first = _fetch_page(kitsu_id, 0, limit)
    if first is None:
        return None

    total = ((first.get("meta") or {}).get("count")) or 0
    if total == 0:
        return []

    episodes: List[Dict[str, Any]] = list(first.get("data") or [])
    if total <= limit:
        return episodes

    offsets = [page * limit for page in range(1, math.ceil(total / limit))]
    with ThreadPoolExecutor(max_workers=settings.max_workers) as pool:
        pages = list(pool.map(lambda off: _fetch_page(kitsu_id, off, limit), offsets))

    for page in pages:
        if page and page.get("data"):
            episodes.extend(page["data"])

    episodes.sort(key=_episode_sort_key)
    logger.info("Fetched %d episodes for Kitsu anime %s", len(episodes), kitsu_id)
    return episodes
