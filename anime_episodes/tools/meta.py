"""Metadata tools for anime-episodes."""

from importlib.metadata import version, PackageNotFoundError

from ..config import get_settings
from ..core.reconcile import OVERRIDE_PROVIDER, TEASER_PROVIDER
from ..core.responses import SCHEMA
from ..sources.crysoline import PROVIDER_NAME_MAPPING

# Version info
try:
    __VERSION__ = version("anime-episodes-mcp")
except PackageNotFoundError:
    __VERSION__ = "0.0.0+dev"

SOURCES = ["anizip", "kitsu", "crysoline", "anilist", "jikan"]


def health():
    """Health check endpoint."""
    return {"schemaVersion": SCHEMA, "ok": True, "sources": SOURCES}


def about():
    """About information for the service."""
    s = get_settings()
    return {
        "schemaVersion": SCHEMA,
        "name": "anime-episodes",
        "version": __VERSION__,
        "endpoints": {
            "anizip": s.anizip_url,
            "anilist": s.anilist_url,
            "kitsu": s.kitsu_url,
            "jikan": s.jikan_url,
            "crysoline": s.crysoline_url,
        },
        "providers": sorted(set(PROVIDER_NAME_MAPPING.values())),
        "overrides": {"fillerAndImage": OVERRIDE_PROVIDER, "teaser": TEASER_PROVIDER},
        "limits": {"timeoutSec": s.http_timeout, "providerTimeoutSec": s.provider_timeout},
    }


def register_tools(mcp):
    """Register meta tools with FastMCP."""
    mcp.tool()(health)
    mcp.tool()(about)
