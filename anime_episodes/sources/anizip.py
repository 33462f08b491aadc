"""Anizip: id mappings, per-episode metadata (Metadata Source A) and artwork."""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import get_settings
from ..core.http_client import http_get

logger = logging.getLogger(__name__)


def get_anizip_payload(anime_id: str) -> Optional[Dict[str, Any]]:
    """Full `/mappings?anilist_id=` document, or None if it can't be fetched."""
    url = f"{get_settings().anizip_url}/mappings"
    try:
        r = http_get(url, params={"anilist_id": anime_id})
        r.raise_for_status()
    except requests.HTTPError as e:
        logger.warning("Anizip returned %s for ID %s", getattr(e.response, "status_code", "?"), anime_id)
        return None
    except requests.RequestException as e:
        logger.error("Failed to fetch Anizip data for ID %s: %s", anime_id, e)
        return None

    try:
        data = r.json()
    except ValueError as e:
        logger.error("Failed to parse Anizip response for ID %s: %s", anime_id, e)
        return None
    return data if isinstance(data, dict) else None


def get_anizip_episodes(anime_id: str) -> Optional[List[Dict[str, Any]]]:
    payload = get_anizip_payload(anime_id)
    if payload is None:
        return None

    episodes = payload.get("episodes")
    if isinstance(episodes, dict):
        return [e for e in episodes.values() if isinstance(e, dict)]
    if isinstance(episodes, list):
        return [e for e in episodes if isinstance(e, dict)]

    logger.warning("Anizip payload for ID %s has no episodes", anime_id)
    return None


def extract_image(payload: Dict[str, Any], cover_type: str) -> Optional[str]:
    """URL of the first image whose coverType matches (Clearlogo, Banner, Poster, Fanart)."""
    for img in payload.get("images") or []:
        if (img.get("coverType") or "").lower() == cover_type.lower():
            return img.get("url")
    return None
