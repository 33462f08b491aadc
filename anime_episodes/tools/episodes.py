"""Provider episode listing for anime-episodes."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

from ..config import get_settings
from ..core.reconcile import reconcile
from ..core.responses import ErrorCode, error_response, success_response
from ..models.types import ErrorEnvelope, StreamingEpisode, SuccessEnvelope
from ..sources.anizip import get_anizip_episodes
from ..sources.crysoline import get_crysoline_episodes, group_by_provider
from ..sources.kitsu import get_kitsu_episodes
from ..sources.mapping import kitsu_id_from_mappings, resolve_mappings

logger = logging.getLogger(__name__)

Envelope = Union[SuccessEnvelope, ErrorEnvelope]


class EpisodeSources(NamedTuple):
    mappings: Dict[str, Any]
    anizip: Optional[List[Dict[str, Any]]]
    kitsu: List[Dict[str, Any]]
    streaming: Dict[str, List[StreamingEpisode]]


def gather_sources(anime_id: str) -> EpisodeSources:
    """Fan out to every source for one anime.

    Anizip runs alongside mapping resolution; Kitsu (only when a kitsu_id is
    mapped) and the Crysoline provider batch start once mappings are known.
    """
    with ThreadPoolExecutor(max_workers=get_settings().max_workers) as pool:
        anizip_f = pool.submit(get_anizip_episodes, anime_id)
        mappings = resolve_mappings(anime_id)

        kitsu_id = kitsu_id_from_mappings(mappings)
        kitsu_f = pool.submit(get_kitsu_episodes, kitsu_id) if kitsu_id else None
        crysoline_f = pool.submit(get_crysoline_episodes, mappings)

        provider_results = crysoline_f.result()
        kitsu = (kitsu_f.result() if kitsu_f else None) or []
        anizip = anizip_f.result()

    for r in provider_results:
        if r.get("error"):
            logger.info("Provider %s unavailable for %s: %s", r["provider"], anime_id, r["error"])

    return EpisodeSources(mappings, anizip, kitsu, group_by_provider(provider_results))


def handle_episodes_request(anime_id: Optional[str]) -> Tuple[int, Envelope]:
    """Returns (http_status, envelope)."""
    if not anime_id:
        return 200, error_response(
            ErrorCode.BAD_REQUEST,
            "Missing required parameter: id",
            {"message": "Anime ID is required"},
        )

    try:
        sources = gather_sources(anime_id)

        if sources.anizip is None:
            return 400, error_response(
                ErrorCode.NOT_FOUND,
                "No episode data found from Anizip",
                {"animeId": anime_id},
            )

        result = reconcile(sources.anizip, sources.kitsu, sources.streaming)
        return 200, success_response(result.providers, "Provider episodes retrieved successfully")

    except Exception as e:
        logger.exception("Error fetching episodes for anime %s", anime_id)
        return 500, error_response(
            ErrorCode.INTERNAL_ERROR,
            "Failed to fetch episode data",
            {"animeId": anime_id, "error": str(e) or "Unknown error"},
        )


def provider_episodes(anime_id: str):
    """Episodes per streaming provider (AniList id), each carrying fused Anizip/Kitsu metadata."""
    _, body = handle_episodes_request(anime_id)
    return body


def register_tools(mcp):
    mcp.tool()(provider_episodes)
