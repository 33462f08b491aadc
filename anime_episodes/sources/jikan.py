"""Jikan (MyAnimeList) anime details."""

import logging
from typing import Any, Dict, Optional

import requests

from ..config import get_settings
from ..core.http_client import http_get

logger = logging.getLogger(__name__)


def get_mal_anime(mal_id: str) -> Optional[Dict[str, Any]]:
    if not mal_id:
        logger.error("get_mal_anime: missing MAL id")
        return None

    try:
        r = http_get(f"{get_settings().jikan_url}/anime/{mal_id}/full")
        r.raise_for_status()
        return r.json().get("data")
    except (requests.RequestException, ValueError) as e:
        logger.error("Failed to fetch MAL anime %s: %s", mal_id, e)
        return None
