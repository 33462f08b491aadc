"""MCP tools for anime-episodes."""

from . import episodes
from . import info
from . import mappings
from . import meta

__all__ = [
    "episodes",
    "info",
    "mappings",
    "meta",
]
