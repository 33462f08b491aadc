"""AniList GraphQL access: MAL id lookup and cover/banner images."""

import json
import logging
from typing import Any, Dict, Optional

import requests

from ..config import get_settings
from ..core.http_client import http_post

logger = logging.getLogger(__name__)

MAL_ID_QUERY = """
query ($id: Int) {
  Media(id: $id, type: ANIME) { idMal }
}"""

IMAGES_QUERY = """
query ($id: Int) {
  Media(id: $id, type: ANIME) {
    bannerImage
    coverImage { extraLarge large medium color }
  }
}"""


def gql(query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
    """Execute an AniList GraphQL query and return its `data` object."""
    r = http_post(get_settings().anilist_url, json={"query": query, "variables": variables},
                  headers={"Content-Type": "application/json", "Accept": "application/json"})
    data = r.json()

    if data.get("errors"):
        raise RuntimeError(json.dumps(data["errors"], ensure_ascii=False))

    return data["data"]


def get_mal_id(anilist_id: str) -> Optional[int]:
    try:
        media = gql(MAL_ID_QUERY, {"id": int(anilist_id)}).get("Media") or {}
    except (requests.RequestException, RuntimeError, ValueError, KeyError) as e:
        logger.error("Failed to resolve MAL id for AniList %s: %s", anilist_id, e)
        return None
    return media.get("idMal")


def get_anilist_images(anilist_id: str) -> Optional[Dict[str, Any]]:
    try:
        return gql(IMAGES_QUERY, {"id": int(anilist_id)}).get("Media")
    except (requests.RequestException, RuntimeError, ValueError, KeyError) as e:
        logger.error("Failed to fetch AniList images for %s: %s", anilist_id, e)
        return None
