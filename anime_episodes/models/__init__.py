"""Models and type definitions for anime-episodes."""

from .types import (
    AirDate, AnimeEpisode, ProviderEpisodes, MetadataEpisode, StreamingEpisode,
    ProviderResult, SuccessEnvelope, ErrorEnvelope, AnimeInfo,
)

__all__ = [
    "AirDate", "AnimeEpisode", "ProviderEpisodes", "MetadataEpisode", "StreamingEpisode",
    "ProviderResult", "SuccessEnvelope", "ErrorEnvelope", "AnimeInfo",
]
