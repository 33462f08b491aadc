"""Type definitions for anime-episodes."""

from typing import Any, TypedDict, Optional, List, Dict, Union


class AirDate(TypedDict):
    iso: str                       # 2020-01-01T00:00:00.000Z
    relative: str                  # "3 days" (no "ago"; consumer adds wording)
    unix: int                      # whole seconds since epoch


class AnimeEpisode(TypedDict):
    id: str
    title: str
    number: int
    rating: Optional[float]
    airDate: Optional[AirDate]
    thumbnail: Optional[str]
    teaser: Optional[str]
    description: Optional[str]
    isFiller: bool


class ProviderEpisodes(TypedDict):
    provider: str
    episodes: List[AnimeEpisode]


class MetadataEpisode(TypedDict):
    """Anizip or Kitsu record reduced to what the merge reads."""
    number: int
    id: Optional[str]
    title: Optional[str]
    rating: Optional[float]
    airDate: Optional[str]         # raw, unparsed
    thumbnail: Optional[str]
    description: Optional[str]


class StreamingEpisode(TypedDict):
    """Crysoline episode with its image collapsed to a single URL."""
    id: Union[int, str, None]
    title: Optional[str]
    image: Optional[str]
    description: Optional[str]
    number: Optional[int]
    teaserUrl: Optional[str]
    metadata: Any
    isFiller: Optional[bool]
    isRecap: Optional[bool]


class _ProviderResultBase(TypedDict):
    provider: str
    id: str
    episodes: List[StreamingEpisode]
    rawEpisodes: List[Dict[str, Any]]


class ProviderResult(_ProviderResultBase, total=False):
    error: str


class ErrorBody(TypedDict):
    code: str
    message: str
    details: Any


class SuccessEnvelope(TypedDict):
    success: bool
    data: Any
    message: Optional[str]
    timestamp: str


class ErrorEnvelope(TypedDict):
    success: bool
    error: ErrorBody
    timestamp: str


class AnimeInfo(TypedDict):
    malId: Optional[int]
    title: Optional[str]
    titleEnglish: Optional[str]
    synopsis: Optional[str]
    episodes: Optional[int]
    status: Optional[str]
    score: Optional[float]
    genres: List[str]
    mappings: Dict[str, Any]
    coverImage: Optional[str]
    clearLogo: Optional[str]
    bannerImage: Optional[str]
    color: Optional[str]
