"""Mapping resolution: one AniList id -> every external id the sources need."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from .anilist import get_mal_id
from .anizip import get_anizip_payload
from .crysoline import get_crysoline_mapping

logger = logging.getLogger(__name__)


def resolve_mappings(anime_id: str) -> Dict[str, Any]:
    """Anizip mappings overlaid with Crysoline provider ids; {} when Anizip is unavailable."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        payload_f = pool.submit(get_anizip_payload, anime_id)
        mal_f = pool.submit(get_mal_id, anime_id)
        payload, mal_id = payload_f.result(), mal_f.result()

    if payload is None:
        logger.error("Failed to fetch mappings for ID %s", anime_id)
        return {}

    crysoline = (get_crysoline_mapping(str(mal_id)) if mal_id else None) or {}
    return {**(payload.get("mappings") or {}), **crysoline}


def kitsu_id_from_mappings(mappings: Dict[str, Any]) -> Optional[str]:
    kitsu_id = (mappings or {}).get("kitsu_id")
    return str(kitsu_id) if kitsu_id not in (None, "") else None
