"""Mood track aggregation: fan out per artist, merge, top up, rank."""

from __future__ import annotations

import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from beatify.domain.catalog.artist_pools import CATEGORY_CONFIGS, category_of
from beatify.domain.catalog.mood_selector import MoodSelector
from beatify.domain.catalog.track_fetcher import TrackFetcher, rank_by_popularity
from beatify.models.dto import ArtistCategory

logger = logging.getLogger(__name__)


def dedupe_tracks(tracks: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the first occurrence of each track id; id-less tracks are dropped."""
    seen: Set[str] = set()
    unique: List[Dict[str, Any]] = []
    for track in tracks:
        track_id = (track or {}).get('id')
        if not track_id or track_id in seen:
            continue
        seen.add(track_id)
        unique.append(track)
    return unique


class MoodTrackAggregator:
    def __init__(
        self,
        selector: MoodSelector,
        fetcher: TrackFetcher,
        *,
        max_workers: int = 8,
        max_topup_artists: int = 12,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._selector = selector
        self._fetcher = fetcher
        self._max_workers = max(1, max_workers)
        self._max_topup_artists = max(0, max_topup_artists)
        self._rng = rng or random.Random()

    def _selected_artists(self, mood: str) -> List[Tuple[str, ArtistCategory]]:
        selections = self._selector.select_artists_for_mood(mood)
        seen: Set[str] = set()
        entries: List[Tuple[str, ArtistCategory]] = []
        for category in (cfg.category for cfg in CATEGORY_CONFIGS):
            for name in selections.get(category, []):
                key = name.lower()
                if key in seen:
                    continue
                seen.add(key)
                entries.append((name, category))
        return entries

    def _fan_out(self, entries: List[Tuple[str, ArtistCategory]], per_artist_limit: int) -> List[List[Dict[str, Any]]]:
        def fetch(entry):
            name, category = entry
            tracks = self._fetcher.get_artist_top_tracks(name, per_artist_limit, category)
            if not tracks:
                logger.warning("No top tracks returned for artist %r (%s)", name, category.value)
            return tracks

        workers = min(self._max_workers, len(entries))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order, so merging keeps selection order
            return list(executor.map(fetch, entries))

    def _top_up(
        self,
        combined: List[Dict[str, Any]],
        used: Set[str],
        limit: int,
        per_artist_limit: int,
    ) -> List[Dict[str, Any]]:
        remaining = [
            name
            for cfg in CATEGORY_CONFIGS
            for name in cfg.pool
            if name.lower() not in used
        ]
        self._rng.shuffle(remaining)

        attempts = 0
        for name in remaining:
            if len(combined) >= limit:
                break
            if attempts >= self._max_topup_artists:
                logger.info("Top-up stopped after %d extra artists with %d/%d tracks", attempts, len(combined), limit)
                break
            attempts += 1
            extra = self._fetcher.get_artist_top_tracks(name, per_artist_limit, category_of(name))
            used.add(name.lower())
            combined = dedupe_tracks(combined + extra)
        return combined

    def collect_top_tracks_for_mood(self, mood: str, limit: int) -> List[Dict[str, Any]]:
        """Return up to ``limit`` unique raw Spotify tracks for ``mood``.

        The result is sorted by descending popularity. Per-artist failures only
        shrink the candidate set; credential failures propagate.
        """
        if limit < 1:
            return []

        entries = self._selected_artists(mood)
        if not entries:
            return []
        per_artist_limit = max(2, math.ceil(limit / len(entries)))
        used = {name.lower() for name, _ in entries}

        results = self._fan_out(entries, per_artist_limit)
        combined = dedupe_tracks(track for tracks in results for track in tracks)

        if len(combined) < limit:
            logger.debug("Mood %r undershot with %d/%d tracks; topping up", mood, len(combined), limit)
            combined = self._top_up(combined, used, limit, per_artist_limit)

        ranked = rank_by_popularity(combined)
        return ranked[:limit]


__all__ = ["MoodTrackAggregator", "dedupe_tracks"]
