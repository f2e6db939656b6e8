import random

import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st

from beatify.domain.catalog.aggregator import dedupe_tracks
from beatify.domain.catalog.artist_pools import PUNJABI_ARTISTS, pools
from beatify.domain.providers import build_spotify_provider
from beatify.errors import ConfigurationError
from beatify.settings import load_app_settings
from tests.support.stubs import SpotipyCatalogStub, raw_track, slugify


def _provider(settings, stub, **overrides):
    if overrides:
        settings = settings.model_copy(update=overrides)
    return build_spotify_provider(
        settings, client_id="cid", client_secret="secret", spotify_client=stub, rng=random.Random(3)
    )


@pytest.mark.unit
def test_happy_mood_returns_exactly_limit_unique_ranked_tracks(spotify_provider):
    tracks = spotify_provider.aggregator.collect_top_tracks_for_mood("happy", 20)

    assert len(tracks) == 20
    ids = [track["id"] for track in tracks]
    assert len(set(ids)) == 20
    popularity = [track["popularity"] for track in tracks]
    assert popularity == sorted(popularity, reverse=True)


@pytest.mark.unit
@hypothesis_settings(max_examples=25, deadline=None)
@given(
    limit=st.integers(min_value=1, max_value=60),
    mood=st.sampled_from(["happy", "sad", "relaxed", "focused", "excited", "unknown"]),
)
def test_any_limit_yields_at_most_limit_unique_tracks_by_popularity(limit, mood):
    provider = build_spotify_provider(
        load_app_settings(),
        client_id="cid",
        client_secret="secret",
        spotify_client=SpotipyCatalogStub(),
        rng=random.Random(limit),
    )

    tracks = provider.aggregator.collect_top_tracks_for_mood(mood, limit)

    assert 0 < len(tracks) <= limit
    ids = [track["id"] for track in tracks]
    assert len(set(ids)) == len(ids)
    popularity = [track["popularity"] for track in tracks]
    assert popularity == sorted(popularity, reverse=True)


@pytest.mark.unit
def test_first_pass_fans_out_over_every_selected_artist(spotify_provider, spotipy_stub):
    spotify_provider.aggregator.collect_top_tracks_for_mood("sad", 12)
    # sad selects 2 + 3 + 1 artists, each asked for ceil(12 / 6) = 2 tracks
    assert len(spotipy_stub.top_tracks_calls) == 6


@pytest.mark.unit
def test_unresolvable_artists_are_skipped_and_topped_up(settings):
    stub = SpotipyCatalogStub(missing=PUNJABI_ARTISTS)
    provider = _provider(settings, stub)

    tracks = provider.aggregator.collect_top_tracks_for_mood("happy", 20)

    assert len(tracks) == 20
    punjabi_ids = {f"id-{slugify(name)}" for name in PUNJABI_ARTISTS}
    fetched = {artist_id for artist_id, _ in stub.top_tracks_calls}
    assert not fetched & punjabi_ids
    # 5 resolvable selected artists give 15 tracks; the top-up supplies the rest
    assert len(fetched) > 5


@pytest.mark.unit
def test_top_up_stops_after_the_configured_number_of_extra_artists(settings):
    everyone = [name for pool in pools().values() for name in pool]
    stub = SpotipyCatalogStub(missing=everyone)
    provider = _provider(settings, stub, aggregator_max_topup_artists=4)

    assert provider.aggregator.collect_top_tracks_for_mood("happy", 20) == []
    # 8 selected artists plus 4 top-up attempts
    assert len(stub.search_calls) == 12


@pytest.mark.unit
def test_failing_artist_only_shrinks_the_candidate_set(settings):
    stub = SpotipyCatalogStub(failing_top_tracks=[f"id-{slugify(name)}" for name in PUNJABI_ARTISTS])
    provider = _provider(settings, stub)
    tracks = provider.aggregator.collect_top_tracks_for_mood("relaxed", 10)
    assert len(tracks) == 10


@pytest.mark.unit
def test_credential_errors_abort_the_whole_aggregation(settings, monkeypatch):
    monkeypatch.delenv("SPOTIPY_CLIENT_ID")
    stub = SpotipyCatalogStub()
    provider = build_spotify_provider(settings, spotify_client=stub)
    with pytest.raises(ConfigurationError):
        provider.aggregator.collect_top_tracks_for_mood("happy", 20)
    assert stub.search_calls == []


@pytest.mark.unit
def test_dedupe_keeps_first_occurrence_and_drops_idless_tracks():
    first = raw_track("a", popularity=10)
    tracks = [first, raw_track("b"), raw_track("a", popularity=99), {"name": "no id"}]
    assert dedupe_tracks(tracks) == [first, tracks[1]]
