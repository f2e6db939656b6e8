"""Weighted, shuffled artist selection per mood."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

from beatify.domain.catalog.artist_pools import pools
from beatify.models.dto import ArtistCategory

# (punjabi, english, global) slice sizes
MOOD_SLICES: Dict[str, Tuple[int, int, int]] = {
    'happy': (3, 3, 2),
    'excited': (3, 3, 2),
    'sad': (2, 3, 1),
    'relaxed': (2, 2, 2),
    'focused': (1, 3, 2),
}
DEFAULT_SLICE: Tuple[int, int, int] = (2, 2, 2)
FALLBACK_SLICE = 2

_ORDER = (ArtistCategory.PUNJABI, ArtistCategory.ENGLISH, ArtistCategory.GLOBAL)


def slice_for(mood: Optional[str]) -> Tuple[int, int, int]:
    return MOOD_SLICES.get((mood or "").strip().lower(), DEFAULT_SLICE)


class MoodSelector:
    """Shuffles every pool independently on each call; ``rng`` is injectable."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def shuffled(self, names: List[str]) -> List[str]:
        candidates = list(names)
        self._rng.shuffle(candidates)
        return candidates

    def select_artists_for_mood(self, mood: Optional[str]) -> Dict[ArtistCategory, List[str]]:
        counts = dict(zip(_ORDER, slice_for(mood)))
        selections: Dict[ArtistCategory, List[str]] = {}
        for category, pool in pools().items():
            candidates = self.shuffled(pool)
            chosen = candidates[:counts[category]]
            if not chosen:
                chosen = candidates[:FALLBACK_SLICE]
            selections[category] = chosen
        return selections


__all__ = ["MoodSelector", "MOOD_SLICES", "DEFAULT_SLICE", "slice_for"]
