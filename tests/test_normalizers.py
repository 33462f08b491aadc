from datetime import datetime, timedelta, timezone

import pytest

from anime_episodes.core import normalizers as nz
from anime_episodes.utils.helpers import first_defined, format_distance

T0 = datetime(2020, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("value,expected", [
    (1, 1), (12.0, 12), ("7", 7), (" 8 ", 8),
    (0, None), (-1, None), (1.5, None), ("x", None), ("", None), (None, None), (True, None),
])
def test_parse_episode_number(value, expected):
    assert nz.parse_episode_number(value) == expected


def test_best_image_url_string_and_empty():
    assert nz.best_image_url("https://img/a.jpg") == "https://img/a.jpg"
    assert nz.best_image_url(None) is None
    assert nz.best_image_url("") is None
    assert nz.best_image_url({}) is None
    assert nz.best_image_url({"unknown": "shape"}) is None
    assert nz.best_image_url({"jpeg": "x.jpg"}) is None
    assert nz.best_image_url({"resized": ["a.jpg"]}) is None


def test_best_image_url_prefers_jpeg_hq():
    image = {"aspectRatio": 1.7, "jpeg": {"sm": "sm.jpg", "hq": "hq.jpg"}, "webp": {"sm": "sm.webp", "hq": "hq.webp"}}
    assert nz.best_image_url(image) == "hq.jpg"
    assert nz.best_image_url({"jpeg": {"sm": "sm.jpg", "hq": ""}}) == "sm.jpg"


def test_best_image_url_picks_largest_resized():
    image = {"resized": {"320x180": "small.jpg", "1280x720": "large.jpg", "640x360": "mid.jpg"},
             "resized_blur": {"320x180": "blur.jpg"}}
    assert nz.best_image_url(image) == "large.jpg"


def test_best_image_url_resized_without_dimensions_uses_first_key():
    assert nz.best_image_url({"resized": {"thumb": "first.jpg", "cover": "second.jpg"}}) == "first.jpg"


def test_kitsu_thumbnail_priority():
    assert nz.kitsu_thumbnail({"small": "s", "original": "o", "large": "l"}) == "o"
    assert nz.kitsu_thumbnail({"small": "s", "medium": "m"}) == "m"
    assert nz.kitsu_thumbnail({"tiny": "t"}) is None
    assert nz.kitsu_thumbnail(None) is None
    assert nz.kitsu_thumbnail("t.jpg") is None


def test_derive_air_date_from_offset_timestamp():
    air = nz.derive_air_date("2020-01-01T09:00:00+09:00", now=T0)
    assert air == {"iso": "2020-01-01T00:00:00.000Z", "relative": "less than a minute", "unix": 1577836800}


def test_derive_air_date_zulu_with_millis():
    air = nz.derive_air_date("2020-01-01T00:00:00.250Z", now=T0 + timedelta(days=1))
    assert air["iso"] == "2020-01-01T00:00:00.250Z"
    assert air["unix"] == 1577836800
    assert air["relative"] == "1 day"


@pytest.mark.parametrize("raw", [None, "", "   ", "yesterday", "2020-13-40", 1577836800])
def test_derive_air_date_rejects_garbage(raw):
    assert nz.derive_air_date(raw, now=T0) is None


def test_norm_streaming_episode_collapses_image_and_flags():
    ep = nz.norm_streaming_episode({
        "id": 10, "title": "", "number": "3", "image": {"jpeg": {"hq": "hq.jpg"}},
        "teaserUrl": None, "isFiller": "yes", "isRecap": False,
    })
    assert ep["id"] == 10
    assert ep["title"] is None
    assert ep["number"] == 3
    assert ep["image"] == "hq.jpg"
    assert ep["isFiller"] is None
    assert ep["isRecap"] is False


def test_norm_kitsu_episode_description_fallback():
    ep = nz.norm_kitsu_episode({"id": "77", "attributes": {"number": 2, "synopsis": "syn"}})
    assert ep["id"] == "77"
    assert ep["description"] == "syn"
    assert nz.norm_kitsu_episode({"id": "1", "attributes": {}}) is None


def test_first_defined_is_lazy_and_skips_empty():
    calls = []

    def later():
        calls.append("later")
        return "never"

    assert first_defined([lambda: None, lambda: "", lambda: "hit", later]) == "hit"
    assert calls == []
    assert first_defined([]) is None


@pytest.mark.parametrize("delta,expected", [
    (timedelta(seconds=20), "less than a minute"),
    (timedelta(seconds=60), "1 minute"),
    (timedelta(minutes=30), "30 minutes"),
    (timedelta(minutes=60), "about 1 hour"),
    (timedelta(hours=3), "about 3 hours"),
    (timedelta(hours=25), "1 day"),
    (timedelta(days=3), "3 days"),
    (timedelta(days=35), "about 1 month"),
    (timedelta(days=50), "about 2 months"),
    (timedelta(days=100), "3 months"),
])
def test_format_distance_short_ranges(delta, expected):
    assert format_distance(T0, now=T0 + delta) == expected


@pytest.mark.parametrize("later,expected", [
    (datetime(2021, 2, 1, tzinfo=timezone.utc), "about 1 year"),
    (datetime(2021, 6, 1, tzinfo=timezone.utc), "over 1 year"),
    (datetime(2021, 11, 1, tzinfo=timezone.utc), "almost 2 years"),
    (datetime(2025, 1, 2, tzinfo=timezone.utc), "about 5 years"),
])
def test_format_distance_years(later, expected):
    assert format_distance(T0, now=later) == expected


def test_format_distance_ignores_direction():
    assert format_distance(T0 + timedelta(days=3), now=T0) == "3 days"


@pytest.mark.parametrize("raw,iso", [
    ("2020-01-01T00:00:00.5Z", "2020-01-01T00:00:00.500Z"),
    ("2020-01-01T00:00:00.25+00:00", "2020-01-01T00:00:00.250Z"),
    ("2020-01-01T00:00:00.1234567Z", "2020-01-01T00:00:00.123Z"),
    ("2020-01-01T09:00:00+0900", "2020-01-01T00:00:00.000Z"),
    ("2020-01-01 00:00:00-0130", "2020-01-01T01:30:00.000Z"),
    ("2020-01-01", "2020-01-01T00:00:00.000Z"),
])
def test_derive_air_date_accepts_loose_iso_forms(raw, iso):
    assert nz.derive_air_date(raw, now=T0)["iso"] == iso


def test_norm_anizip_episode_string_title_and_non_dict_record():
    ep = nz.norm_anizip_episode({"episodeNumber": 2, "title": "Plain", "airdate": "2020-01-01"})
    assert ep["title"] is None
    assert ep["airDate"] == "2020-01-01"
    assert nz.norm_anizip_episode("junk") is None
    assert nz.norm_kitsu_episode(["junk"]) is None
