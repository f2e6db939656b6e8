"""Per-artist top-track lookup, ranked by popularity and cached per category."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from beatify.domain.catalog.artist_pools import market_for
from beatify.domain.catalog.artist_resolver import ArtistResolver
from beatify.domain.catalog.spotify_catalog import SpotifyCatalog
from beatify.errors import CREDENTIAL_ERRORS, CatalogError
from beatify.models.dto import ArtistCategory
from beatify.utils.cache import MISSING, TTLCache

logger = logging.getLogger(__name__)


def rank_by_popularity(tracks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Stable descending sort; ties keep their incoming order."""
    return sorted(tracks, key=lambda track: track.get('popularity') or 0, reverse=True)


class TrackFetcher:
    def __init__(self, catalog: SpotifyCatalog, resolver: ArtistResolver, cache: TTLCache) -> None:
        self._catalog = catalog
        self._resolver = resolver
        self._cache = cache

    def get_artist_top_tracks(
        self,
        name: str,
        limit: int,
        category: ArtistCategory,
    ) -> List[Dict[str, Any]]:
        """Return at most ``limit`` raw tracks for ``name``, most popular first.

        The full ranked list is cached under ``(name, category)`` so later
        calls with a different limit are served from the cache too.
        """
        if limit < 1:
            return []
        category = ArtistCategory(category)
        cache_key = ((name or "").strip().lower(), category.value)
        cached = self._cache.get(cache_key, MISSING)
        if cached is not MISSING:
            logger.debug("Top tracks cache hit for %r (%s)", name, category.value)
            return cached[:limit]

        artist_id = self._resolver.resolve_artist_id(name)
        if not artist_id:
            return []

        try:
            tracks = self._catalog.artist_top_tracks(artist_id, market=market_for(category))
        except CREDENTIAL_ERRORS:
            raise
        except CatalogError as exc:
            logger.warning("Top tracks fetch failed for %r (%s): %s", name, category.value, exc)
            return []

        ranked = rank_by_popularity([track for track in tracks if isinstance(track, dict)])
        self._cache.set(cache_key, ranked)
        return ranked[:limit]


__all__ = ["TrackFetcher", "rank_by_popularity"]
