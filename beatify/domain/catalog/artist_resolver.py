"""Artist name to Spotify id resolution with a TTL cache."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from beatify.domain.catalog.artist_pools import DEFAULT_MARKET
from beatify.domain.catalog.spotify_catalog import SpotifyCatalog
from beatify.errors import CREDENTIAL_ERRORS, CatalogError
from beatify.utils.cache import MISSING, TTLCache

logger = logging.getLogger(__name__)


class ArtistResolver:
    def __init__(self, catalog: SpotifyCatalog, cache: TTLCache) -> None:
        self._catalog = catalog
        self._cache = cache

    def resolve_artist(self, name: str, market: str = DEFAULT_MARKET) -> Optional[Dict[str, Any]]:
        """Search for ``name`` and return the raw artist object, or None.

        A successful lookup also seeds the id cache. Credential failures
        propagate; any other upstream failure is logged and yields None.
        """
        normalized = (name or "").strip()
        if not normalized:
            return None
        try:
            artist = self._catalog.search_artist(normalized, market=market)
        except CREDENTIAL_ERRORS:
            raise
        except CatalogError as exc:
            logger.warning("Artist search failed for %r: %s", normalized, exc)
            return None
        if not artist or not artist.get('id'):
            logger.warning("No Spotify artist found for %r", normalized)
            return None
        self._cache.set(normalized.lower(), artist['id'])
        return artist

    def resolve_artist_id(self, name: str) -> Optional[str]:
        key = (name or "").strip().lower()
        if not key:
            return None
        cached = self._cache.get(key, MISSING)
        if cached is not MISSING:
            logger.debug("Artist id cache hit for %r", key)
            return cached
        artist = self.resolve_artist(name, market=DEFAULT_MARKET)
        return artist['id'] if artist else None


__all__ = ["ArtistResolver"]
