import random

import pytest
from hypothesis import given, strategies as st

from beatify.domain.catalog.artist_pools import (
    ENGLISH_ARTISTS,
    GLOBAL_ARTISTS,
    PUNJABI_ARTISTS,
    category_of,
    infer_category_from_genres,
    pools,
)
from beatify.domain.catalog.mood_selector import DEFAULT_SLICE, MOOD_SLICES, MoodSelector, slice_for
from beatify.models.dto import ArtistCategory

KNOWN_MOODS = sorted(MOOD_SLICES)


@pytest.mark.unit
def test_pools_have_no_duplicates_within_a_category():
    for pool in (PUNJABI_ARTISTS, ENGLISH_ARTISTS, GLOBAL_ARTISTS):
        lowered = [name.lower() for name in pool]
        assert len(lowered) == len(set(lowered))
        assert len(pool) >= 12


@pytest.mark.unit
def test_known_and_unknown_mood_slices():
    assert slice_for("happy") == (3, 3, 2)
    assert slice_for(" SAD ") == (2, 3, 1)
    assert slice_for("focused") == (1, 3, 2)
    assert slice_for("melancholic") == DEFAULT_SLICE
    assert slice_for(None) == DEFAULT_SLICE


@pytest.mark.unit
@given(mood=st.one_of(st.sampled_from(KNOWN_MOODS), st.text(max_size=12)), seed=st.integers(0, 10_000))
def test_selection_sizes_follow_mood_weights(mood, seed):
    selection = MoodSelector(random.Random(seed)).select_artists_for_mood(mood)
    expected = dict(zip(
        (ArtistCategory.PUNJABI, ArtistCategory.ENGLISH, ArtistCategory.GLOBAL),
        slice_for(mood),
    ))
    all_pools = pools()
    for category, names in selection.items():
        assert len(names) == expected[category]
        assert len(set(names)) == len(names)
        assert set(names) <= set(all_pools[category])


@pytest.mark.unit
def test_selection_is_reshuffled_per_call():
    selector = MoodSelector(random.Random(1))
    picks = {tuple(selector.select_artists_for_mood("relaxed")[ArtistCategory.GLOBAL]) for _ in range(10)}
    assert len(picks) > 1


@pytest.mark.unit
def test_category_lookup_and_genre_inference():
    assert category_of("Sidhu Moose Wala") is ArtistCategory.PUNJABI
    assert category_of("taylor swift") is ArtistCategory.ENGLISH
    assert category_of("Somebody Unlisted") is ArtistCategory.GLOBAL
    assert infer_category_from_genres(["desi pop", "Punjabi Hip Hop"]) is ArtistCategory.PUNJABI
    assert infer_category_from_genres(["pop"]) is ArtistCategory.ENGLISH
    assert infer_category_from_genres(None) is ArtistCategory.ENGLISH
