"""Episode reconciliation engine.

Fuses per-episode records from the two metadata sources (Anizip, Kitsu) and
the Crysoline streaming providers into one canonical record per episode
number, then projects that canonical list back onto each provider.

The merge is an ordered pipeline of passes. Each pass takes the snapshot
produced by the previous one and returns a new snapshot; drafts are never
mutated in place. Which pass may touch which field, and how, is spelled out
in the ``*_RULES`` tables:

    FILL      write only when the canonical value is still empty
    OVERRIDE  write whenever the source supplies a value

Pass order (later passes patch, they never rebuild an entry):

    1. seed_primary        Anizip creates/overwrites entries
    2. fill_secondary      Kitsu creates missing entries, fills gaps
    3. patch_overrides     nexus:   thumbnail, isFiller
    4. patch_overrides     anizone: teaser, thumbnail (fill), isFiller
    5. fill_from_providers any other provider creates missing entries,
                           patches isFiller and fills teaser
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional

from ..models.types import AnimeEpisode, ProviderEpisodes
from .normalizers import (
    derive_air_date, norm_anizip_episode, norm_kitsu_episode, parse_episode_number, text,
)

logger = logging.getLogger(__name__)

OVERRIDE_PROVIDER = "nexus"    # authoritative for filler flag and cover image
TEASER_PROVIDER = "anizone"    # authoritative for teaser and filler flag

FILL = "fill"
OVERRIDE = "override"

SECONDARY_RULES = {"airDate": FILL, "thumbnail": FILL, "description": FILL}
OVERRIDE_RULES = {"thumbnail": OVERRIDE, "isFiller": OVERRIDE}
TEASER_RULES = {"teaser": OVERRIDE, "thumbnail": FILL, "isFiller": OVERRIDE}
FALLBACK_RULES = {"isFiller": OVERRIDE, "teaser": FILL}


def placeholder_title(number: int) -> str:
    return f"Episode {number}"


def _supplied(field: str, value: Any) -> bool:
    if field == "isFiller":
        return isinstance(value, bool)
    return value is not None and value != ""


@dataclass(frozen=True)
class Draft:
    """A canonical episode under construction plus its provenance."""

    episode: AnimeEpisode
    synthetic_title: bool = False
    from_metadata: bool = False

    def patch(self, rules: Mapping[str, str], values: Mapping[str, Any]) -> "Draft":
        updated = dict(self.episode)
        for field, rule in rules.items():
            value = values.get(field)
            if not _supplied(field, value):
                continue
            if rule == OVERRIDE or not _supplied(field, updated.get(field)):
                updated[field] = value
        return replace(self, episode=updated)


Snapshot = Dict[int, Draft]
Pass = Callable[[Snapshot], Snapshot]


class Reconciliation(NamedTuple):
    episodes: List[AnimeEpisode]
    providers: List[ProviderEpisodes]


def _streaming_values(ep: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "thumbnail": text(ep.get("image")),
        "teaser": text(ep.get("teaserUrl")),
        "isFiller": ep.get("isFiller"),
    }


def _new_episode(number: int, id: Optional[str], title: Optional[str], **fields) -> AnimeEpisode:
    episode: AnimeEpisode = {
        "id": id or f"episode-{number}",
        "title": title or placeholder_title(number),
        "number": number,
        "rating": None,
        "airDate": None,
        "thumbnail": None,
        "teaser": None,
        "description": None,
        "isFiller": False,
    }
    episode.update(fields)
    return episode


def seed_primary(snapshot: Snapshot, records: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> Snapshot:
    out = dict(snapshot)
    for raw in records:
        e = norm_anizip_episode(raw)
        if e is None:
            continue
        n = e["number"]
        out[n] = Draft(
            episode=_new_episode(
                n, e["id"], e["title"],
                rating=e["rating"],
                airDate=derive_air_date(e["airDate"], now),
                thumbnail=e["thumbnail"],
                description=e["description"],
            ),
            synthetic_title=e["title"] is None,
            from_metadata=True,
        )
    return out


def fill_secondary(snapshot: Snapshot, records: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> Snapshot:
    out = dict(snapshot)
    for raw in records:
        e = norm_kitsu_episode(raw)
        if e is None:
            continue
        n = e["number"]
        draft = out.get(n)

        if draft is None:
            out[n] = Draft(
                episode=_new_episode(
                    n, e["id"], e["title"],
                    airDate=derive_air_date(e["airDate"], now),
                    thumbnail=e["thumbnail"],
                    description=e["description"],
                ),
                synthetic_title=e["title"] is None,
                from_metadata=True,
            )
            continue

        air_date = None if draft.episode["airDate"] else derive_air_date(e["airDate"], now)
        draft = draft.patch(SECONDARY_RULES, {
            "airDate": air_date,
            "thumbnail": e["thumbnail"],
            "description": e["description"],
        })
        if draft.synthetic_title and e["title"]:
            draft = replace(draft, episode={**draft.episode, "title": e["title"]}, synthetic_title=False)
        out[n] = draft
    return out


def patch_overrides(snapshot: Snapshot, episodes: Iterable[Mapping[str, Any]], rules: Mapping[str, str]) -> Snapshot:
    """Patch existing entries from an authoritative provider; never creates entries."""
    out = dict(snapshot)
    for ep in episodes:
        n = parse_episode_number(ep.get("number"))
        if n is None or n not in out:
            continue
        out[n] = out[n].patch(rules, _streaming_values(ep))
    return out


def fill_from_providers(snapshot: Snapshot, streaming: Mapping[str, Iterable[Mapping[str, Any]]]) -> Snapshot:
    out = dict(snapshot)
    for provider, episodes in streaming.items():
        if provider in (OVERRIDE_PROVIDER, TEASER_PROVIDER) or not episodes:
            continue
        for ep in episodes:
            n = parse_episode_number(ep.get("number"))
            if n is None:
                continue
            values = _streaming_values(ep)
            if n in out:
                out[n] = out[n].patch(FALLBACK_RULES, values)
                continue
            title = text(ep.get("title"))
            out[n] = Draft(
                episode=_new_episode(
                    n, text(ep.get("id")) or f"{provider}-episode-{n}", title,
                    thumbnail=values["thumbnail"],
                    teaser=values["teaser"],
                    description=text(ep.get("description")),
                    isFiller=values["isFiller"] is True,
                ),
                synthetic_title=title is None,
            )
    return out


def _is_complete(episode: AnimeEpisode) -> bool:
    return bool(episode.get("id") and episode.get("title") and (episode.get("number") or 0) > 0)


def finalize(snapshot: Snapshot) -> List[AnimeEpisode]:
    episodes = [d.episode for d in snapshot.values() if _is_complete(d.episode)]
    return sorted(episodes, key=lambda e: e["number"])


def project_providers(snapshot: Snapshot, streaming: Mapping[str, Iterable[Mapping[str, Any]]]) -> List[ProviderEpisodes]:
    """Per-provider lists carrying fused metadata under the provider's own ids.

    Only numbers backed by a metadata source are projected; an episode known
    solely from streaming data is never invented into a provider list.
    """
    fused = {
        n: d.episode for n, d in snapshot.items()
        if d.from_metadata and _is_complete(d.episode)
    }
    out: List[ProviderEpisodes] = []
    for provider, episodes in streaming.items():
        projected: List[AnimeEpisode] = []
        for ep in episodes or []:
            n = parse_episode_number(ep.get("number"))
            if n is None or n not in fused:
                continue
            projected.append({**fused[n], "id": text(ep.get("id")) or f"{provider}-episode-{n}"})
        if projected:
            out.append({"provider": provider, "episodes": sorted(projected, key=lambda e: e["number"])})
    return out


def build_passes(primary, secondary, streaming, now: Optional[datetime] = None) -> List[Pass]:
    return [
        partial(seed_primary, records=primary, now=now),
        partial(fill_secondary, records=secondary, now=now),
        partial(patch_overrides, episodes=streaming.get(OVERRIDE_PROVIDER) or [], rules=OVERRIDE_RULES),
        partial(patch_overrides, episodes=streaming.get(TEASER_PROVIDER) or [], rules=TEASER_RULES),
        partial(fill_from_providers, streaming=streaming),
    ]


def reconcile(
    primary: Iterable[Dict[str, Any]],
    secondary: Iterable[Dict[str, Any]],
    streaming_by_provider: Mapping[str, List[Mapping[str, Any]]],
    now: Optional[datetime] = None,
) -> Reconciliation:
    """Merge all sources into canonical episodes and per-provider projections.

    `now` pins the clock used for the relative air-date phrase.
    """
    primary = list(primary or [])
    secondary = list(secondary or [])
    streaming = dict(streaming_by_provider or {})

    snapshot: Snapshot = {}
    for step in build_passes(primary, secondary, streaming, now):
        snapshot = step(snapshot)

    episodes = finalize(snapshot)
    providers = project_providers(snapshot, streaming)
    logger.debug(
        "Reconciled %d episodes (%d primary, %d secondary) across %d providers",
        len(episodes), len(primary), len(secondary), len(providers),
    )
    return Reconciliation(episodes, providers)
