"""External id mapping tool."""

from ..core.responses import ErrorCode, error_response, success_response
from ..sources.mapping import resolve_mappings


def anime_mappings(anime_id: str):
    """External ids for an AniList id (MAL, Kitsu, TVDB, ... plus Crysoline providers)."""
    if not anime_id:
        return error_response(ErrorCode.BAD_REQUEST, "Missing required parameter: id")
    mappings = resolve_mappings(anime_id)
    if not mappings:
        return error_response(ErrorCode.NOT_FOUND, "No mappings found", {"animeId": anime_id})
    return success_response(mappings, "Mappings retrieved successfully")


def register_tools(mcp):
    mcp.tool()(anime_mappings)
