import requests

from anime_episodes.sources import crysoline as cr


class DummyResponse:
    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json = json_data if json_data is not None else {}

    def json(self):
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


def test_episodes_fetched_per_mapped_provider(monkeypatch):
    seen = []

    def fake_get(url, **kw):
        seen.append((url, kw))
        if "/nexus/" in url:
            return DummyResponse(200, {"data": [
                {"id": "n1", "number": 1, "image": {"resized": {"100x100": "s.jpg", "900x500": "l.jpg"}},
                 "isFiller": True},
            ]})
        return DummyResponse(200, {"data": [{"id": 7, "number": 1, "image": "p.jpg"}]})

    monkeypatch.setattr(cr, "http_get", fake_get)

    results = cr.get_crysoline_episodes({
        "animenexus": "abc",
        "AnimePahe": "def",
        "mal_id": 21,            # not a streaming provider
        "anizone": None,         # mapped name but no id
    })

    assert [r["provider"] for r in results] == ["nexus", "animepahe"]
    nexus = results[0]
    assert nexus["id"] == "abc"
    assert nexus["episodes"][0]["image"] == "l.jpg"
    assert nexus["episodes"][0]["isFiller"] is True
    assert nexus["rawEpisodes"][0]["image"] == {"resized": {"100x100": "s.jpg", "900x500": "l.jpg"}}
    assert "error" not in nexus

    url, kw = seen[0]
    assert url.endswith("/anime/nexus/episodes/abc")
    assert kw["headers"] == {"X-API-KEY": "test-key"}
    assert kw["attempts"] == 1
    assert kw["timeout"] == 2.0


def test_one_provider_failing_does_not_affect_others(monkeypatch):
    def fake_get(url, **kw):
        if "/heaven/" in url:
            raise requests.Timeout("read timed out")
        if "/onsen/" in url:
            return DummyResponse(502)
        return DummyResponse(200, {"data": [{"number": 1}]})

    monkeypatch.setattr(cr, "http_get", fake_get)

    results = cr.get_crysoline_episodes({"animeheaven": "h", "animeonsen": "o", "animeparadise": "p"})
    by_provider = {r["provider"]: r for r in results}

    assert by_provider["heaven"]["episodes"] == []
    assert "timed out" in by_provider["heaven"]["error"]
    assert by_provider["onsen"]["episodes"] == []
    assert by_provider["onsen"]["error"]
    assert len(by_provider["paradise"]["episodes"]) == 1
    assert "error" not in by_provider["paradise"]

    assert list(cr.group_by_provider(results)) == ["paradise"]


def test_no_mapped_providers_makes_no_requests(monkeypatch):
    def fake_get(url, **kw):
        raise AssertionError("no request expected")

    monkeypatch.setattr(cr, "http_get", fake_get)
    assert cr.get_crysoline_episodes({}) == []
    assert cr.get_crysoline_episodes({"kitsu_id": 1}) == []


def test_crysoline_mapping_flattens_and_lowercases(monkeypatch):
    payload = {
        "success": True,
        "data": [
            {"id": "x", "base": {"anilistId": "1", "malId": "1"},
             "mappings": [{"provider": "AnimeNexus", "providerId": "n-1"},
                          {"provider": "anizone", "providerId": "z-1"}]},
        ],
    }
    captured = {}

    def fake_get(url, **kw):
        captured.update(url=url, **kw)
        return DummyResponse(200, payload)

    monkeypatch.setattr(cr, "http_get", fake_get)

    assert cr.get_crysoline_mapping("1") == {"animenexus": "n-1", "anizone": "z-1"}
    assert captured["url"].endswith("/providers/map/mal/1")
    assert captured["headers"] == {"X-API-Key": "test-key"}
    assert captured["timeout"] == 15.0


def test_crysoline_mapping_empty_and_failure(monkeypatch):
    monkeypatch.setattr(cr, "http_get", lambda url, **kw: DummyResponse(200, {"success": False, "data": []}))
    assert cr.get_crysoline_mapping("1") == {}

    monkeypatch.setattr(cr, "http_get", lambda url, **kw: DummyResponse(500))
    assert cr.get_crysoline_mapping("1") is None


def test_off_shape_image_keeps_provider_episodes(monkeypatch):
    monkeypatch.setattr(cr, "http_get", lambda url, **kw: DummyResponse(200, {"data": [
        {"id": "a", "number": 1, "image": {"jpeg": "x.jpg"}},
        {"id": "b", "number": 2, "image": {"resized": "y.jpg"}},
    ]}))

    results = cr.get_crysoline_episodes({"animepahe": "p"})

    assert "error" not in results[0]
    assert [(e["number"], e["image"]) for e in results[0]["episodes"]] == [(1, None), (2, None)]
