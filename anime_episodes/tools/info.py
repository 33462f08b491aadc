"""Anime overview tool: MAL details plus the best artwork across sources."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from ..config import get_settings
from ..core.normalizers import text
from ..core.responses import ErrorCode, error_response, success_response
from ..models.types import AnimeInfo
from ..sources.anilist import get_anilist_images, get_mal_id
from ..sources.anizip import extract_image, get_anizip_payload
from ..sources.crysoline import get_crysoline_mapping
from ..sources.jikan import get_mal_anime
from ..utils.helpers import first_defined

logger = logging.getLogger(__name__)


def merge_info(
    mal: Dict[str, Any],
    meta: Dict[str, Any],
    crysoline_mappings: Optional[Dict[str, str]] = None,
    anilist_images: Optional[Dict[str, Any]] = None,
) -> AnimeInfo:
    images = anilist_images or {}
    cover = images.get("coverImage") or {}

    banner_chain = [
        lambda: images.get("bannerImage"),
        lambda: extract_image(meta, "banner"),
    ]
    cover_chain = [
        lambda: extract_image(meta, "poster"),
        lambda: cover.get("extraLarge"),
        lambda: cover.get("large"),
        lambda: cover.get("medium"),
    ]

    return {
        "malId": mal.get("mal_id"),
        "title": mal.get("title"),
        "titleEnglish": mal.get("title_english"),
        "synopsis": mal.get("synopsis"),
        "episodes": mal.get("episodes"),
        "status": mal.get("status"),
        "score": mal.get("score"),
        "genres": [g.get("name") for g in mal.get("genres") or []],
        "mappings": {**(meta.get("mappings") or {}), **(crysoline_mappings or {})},
        "coverImage": first_defined(cover_chain),
        "clearLogo": extract_image(meta, "clearlogo"),
        "bannerImage": first_defined(banner_chain),
        "color": cover.get("color"),
    }


def get_anime_info(anime_id: str) -> Optional[AnimeInfo]:
    meta = get_anizip_payload(anime_id)
    if meta is None:
        return None

    mal_id = text((meta.get("mappings") or {}).get("mal_id")) or text(get_mal_id(anime_id))
    if not mal_id:
        logger.error("MAL id not found for AniList %s", anime_id)
        return None

    with ThreadPoolExecutor(max_workers=min(3, get_settings().max_workers)) as pool:
        mal_f = pool.submit(get_mal_anime, mal_id)
        images_f = pool.submit(get_anilist_images, anime_id)
        crysoline_f = pool.submit(get_crysoline_mapping, mal_id)
        mal, images, crysoline = mal_f.result(), images_f.result(), crysoline_f.result()

    if not mal:
        logger.error("MAL info not found for id %s", mal_id)
        return None

    return merge_info(mal, meta, crysoline, images)


def anime_info(anime_id: str):
    """Anime overview (AniList id): MAL details, merged id mappings, cover/banner/logo art."""
    try:
        info = get_anime_info(anime_id)
    except Exception as e:
        logger.exception("Error fetching info for anime %s", anime_id)
        return error_response(ErrorCode.INTERNAL_ERROR, "Failed to fetch anime info",
                              {"animeId": anime_id, "error": str(e)})
    if info is None:
        return error_response(ErrorCode.NOT_FOUND, "Anime info not found", {"animeId": anime_id})
    return success_response(info, "Anime info retrieved successfully")


def register_tools(mcp):
    mcp.tool()(anime_info)
