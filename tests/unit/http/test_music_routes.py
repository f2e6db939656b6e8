import pytest
from prometheus_client import REGISTRY

from beatify.errors import AuthError, RateLimitError
from tests.support.stubs import raw_artist, raw_track


@pytest.mark.unit
def test_routes_require_a_user(client):
    r = client.get('/api/music/tracks?mood=happy')
    assert r.status_code == 401
    assert r.get_json()["error"] == "authentication_required"


@pytest.mark.unit
def test_mood_tracks_from_spotify(client, auth_headers):
    r = client.get('/api/music/tracks?mood=happy&limit=20', headers=auth_headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body["success"] is True
    data = body["data"]
    assert (data["mood"], data["provider"], data["count"]) == ("happy", "spotify", 20)
    assert len({track["id"] for track in data["tracks"]}) == 20
    assert r.headers.get("X-Request-ID")


@pytest.mark.unit
def test_missing_mood_is_a_bad_request(client, auth_headers):
    r = client.get('/api/music/tracks', headers=auth_headers)
    assert r.status_code == 400
    assert r.get_json()["success"] is False


@pytest.mark.unit
def test_search_type_uses_plain_mood_tracks(app, client, auth_headers, monkeypatch):
    provider = app.extensions['spotify_provider']
    seen = []
    monkeypatch.setattr(provider, "get_tracks_by_mood", lambda mood, limit: seen.append((mood, limit)) or [])
    r = client.get('/api/music/tracks?mood=sad&limit=5&type=search', headers=auth_headers)
    assert r.status_code == 200
    assert seen == [("sad", 5)]
    assert r.get_json()["data"]["count"] == 0


@pytest.mark.unit
def test_unconfigured_soundcloud_falls_back_to_spotify(client, auth_headers):
    r = client.get('/api/music/tracks?mood=sad&limit=6&service=soundcloud', headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["provider"] == "spotify"


@pytest.mark.unit
def test_exhausted_fallback_maps_the_last_error_to_http(app, client, auth_headers, monkeypatch):
    def _auth_fail(mood, limit):
        raise AuthError("rejected", provider="spotify")

    monkeypatch.setattr(app.extensions['spotify_provider'], "get_recommendations_by_mood", _auth_fail)
    # YouTube has no key in tests, so it fails with a configuration error last
    r = client.get('/api/music/tracks?mood=happy', headers=auth_headers)
    assert r.status_code == 503
    body = r.get_json()
    assert body == {
        "success": False,
        "error": "configuration_error",
        "message": body["message"],
        "provider": "youtube",
    }


@pytest.mark.unit
def test_rate_limited_answer_carries_retry_after(app, client, auth_headers, monkeypatch):
    def _limited(seeds, **kwargs):
        raise RateLimitError("slow down", retry_after=12, provider="spotify")

    monkeypatch.setattr(app.extensions['spotify_provider'], "get_recommendations_by_artists", _limited)
    r = client.get('/api/music/recommendations/artists?artist_ids=a1', headers=auth_headers)
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "12"


@pytest.mark.unit
def test_showcase_route(client, auth_headers):
    r = client.get('/api/music/artists/showcase?limit_per_category=1&top_track_limit=2', headers=auth_headers)
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["total_artists"] == 3
    assert [s["category"] for s in data["sections"]] == ["punjabi", "english", "global"]


@pytest.mark.unit
def test_artist_detail_route(client, auth_headers, spotipy_stub):
    spotipy_stub.artists_by_id["id-drake"] = raw_artist("Drake", genres=["rap"])
    r = client.get('/api/music/artists/id-drake', headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["category"] == "english"

    missing = client.get('/api/music/artists/nobody', headers=auth_headers)
    assert missing.status_code == 404


@pytest.mark.unit
def test_catalog_search_route(client, auth_headers, spotipy_stub):
    spotipy_stub.search_response = {
        "artists": {"items": [raw_artist("Shubh")]},
        "tracks": {"items": [raw_track("t1")]},
    }
    r = client.get('/api/music/spotify/search?query=shubh', headers=auth_headers)
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["artists"][0]["name"] == "Shubh"
    assert data["tracks"][0]["id"] == "t1"


@pytest.mark.unit
def test_recommendations_by_artists_route(client, auth_headers, spotipy_stub):
    r = client.get(
        '/api/music/recommendations/artists?artist_ids=a1,a2&limit=4&target_energy=0.7&target_valence=3',
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.get_json()["data"]["count"] == 4
    call = spotipy_stub.recommendation_calls[-1]
    assert call["seed_artists"] == ["a1", "a2"]
    assert call["target_energy"] == 0.7
    assert "target_valence" not in call

    assert client.get('/api/music/recommendations/artists', headers=auth_headers).status_code == 400


@pytest.mark.unit
def test_embed_route(client, auth_headers):
    r = client.post('/api/music/spotify/embed', json={"input": "spotify:track:abc"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["embed_url"] == "https://open.spotify.com/embed/track/abc"
    assert client.post('/api/music/spotify/embed', json={}, headers=auth_headers).status_code == 400

    rejected = client.post(
        '/api/music/spotify/embed', json={"input": '"><script>alert(1)</script>'}, headers=auth_headers
    )
    assert rejected.status_code == 400
    assert rejected.get_json()["error"] == "invalid_input"


@pytest.mark.unit
def test_health_reports_provider_configuration(client):
    r = client.get('/healthz')
    assert r.status_code == 200
    checks = r.get_json()["checks"]
    assert checks["database"] == "ok"
    assert checks["providers"] == {
        "spotify": "configured",
        "youtube": "unconfigured",
        "soundcloud": "unconfigured",
    }
    assert client.get('/readyz').status_code == 200


@pytest.mark.unit
def test_metrics_endpoint_exposes_provider_counters(client, auth_headers):
    labels = {"provider": "spotify", "outcome": "success"}
    before = REGISTRY.get_sample_value("beatify_provider_attempts_total", labels) or 0.0

    client.get('/api/music/tracks?mood=relaxed&limit=3', headers=auth_headers)

    assert REGISTRY.get_sample_value("beatify_provider_attempts_total", labels) == before + 1
    r = client.get('/metrics')
    assert r.status_code == 200
    assert "beatify_provider_attempts_total" in r.get_data(as_text=True)
