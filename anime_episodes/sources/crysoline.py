"""Crysoline: provider mappings and per-provider streaming episode lists."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..config import get_settings
from ..core.http_client import http_get
from ..core.normalizers import norm_streaming_episode
from ..models.types import ProviderResult, StreamingEpisode

logger = logging.getLogger(__name__)

# mapping name (lower-cased, as returned by /providers/map) -> provider slug
PROVIDER_NAME_MAPPING = {
    "animenexus": "nexus",
    "animepahe": "animepahe",
    "anizone": "anizone",
    "animeheaven": "heaven",
    "animeparadise": "paradise",
    "animeonsen": "onsen",
}


def get_crysoline_mapping(mal_id: str) -> Optional[Dict[str, str]]:
    """{mapping name: provider id} for a MAL id; {} when unmapped, None on failure."""
    settings = get_settings()
    url = f"{settings.crysoline_url}/providers/map/mal/{mal_id}"
    try:
        r = http_get(url, timeout=settings.mapping_timeout,
                     headers={"X-API-Key": settings.crysoline_api_key})
        r.raise_for_status()
        payload = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("Failed to get Crysoline mapping for MAL %s: %s", mal_id, e)
        return None

    if not payload.get("success") or not payload.get("data"):
        logger.warning("No Crysoline mappings found for MAL %s", mal_id)
        return {}

    out: Dict[str, str] = {}
    for item in payload["data"]:
        for m in item.get("mappings") or []:
            if m.get("provider") and m.get("providerId"):
                out[str(m["provider"]).lower()] = str(m["providerId"])
    return out


def _fetch_provider(provider: str, provider_id: str) -> ProviderResult:
    settings = get_settings()
    url = f"{settings.crysoline_url}/anime/{provider}/episodes/{provider_id}"
    try:
        r = http_get(url, timeout=settings.provider_timeout, attempts=1,
                     headers={"X-API-KEY": settings.crysoline_api_key})
        r.raise_for_status()
        raw = r.json().get("data") or []
    except (requests.RequestException, ValueError, AttributeError) as e:
        logger.warning("Crysoline %s episodes for %s failed: %s", provider, provider_id, e)
        return {"provider": provider, "id": provider_id, "episodes": [], "rawEpisodes": [], "error": str(e)}

    raw = [e for e in raw if isinstance(e, dict)]
    return {
        "provider": provider,
        "id": provider_id,
        "episodes": [norm_streaming_episode(e) for e in raw],
        "rawEpisodes": raw,
    }


def get_crysoline_episodes(mappings: Mapping[str, Any]) -> List[ProviderResult]:
    """Fetch every mapped provider concurrently; one provider failing never affects another."""
    jobs = []
    for name, provider_id in (mappings or {}).items():
        slug = PROVIDER_NAME_MAPPING.get(str(name).lower())
        if slug and provider_id:
            jobs.append((slug, str(provider_id)))

    if not jobs:
        return []

    settings = get_settings()
    with ThreadPoolExecutor(max_workers=min(settings.max_workers, len(jobs))) as pool:
        futures = [pool.submit(_fetch_provider, slug, pid) for slug, pid in jobs]

    results: List[ProviderResult] = []
    for (slug, pid), fut in zip(jobs, futures):
        try:
            results.append(fut.result())
        except Exception as e:
            logger.error("Crysoline %s request crashed: %s", slug, e)
            results.append({"provider": slug, "id": pid, "episodes": [], "rawEpisodes": [],
                            "error": str(e) or "Request failed"})
    return results


def group_by_provider(results: List[ProviderResult]) -> Dict[str, List[StreamingEpisode]]:
    """Provider slug -> episodes, keeping only providers that returned something."""
    return {r["provider"]: r["episodes"] for r in results if r.get("episodes")}
