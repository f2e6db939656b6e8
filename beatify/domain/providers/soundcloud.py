"""Tertiary provider: mood searches against the SoundCloud v2 API."""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import Any, Dict, List, Optional

import requests

from beatify.domain.providers.base import MusicProvider, ProviderName
from beatify.domain.providers.http import get_json
from beatify.errors import ConfigurationError
from beatify.models.dto import FormattedTrack
from beatify.utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

API_URL = "https://api-v2.soundcloud.com"
HOME_URL = "https://soundcloud.com"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

MOOD_QUERIES = {
    'sad': "happy upbeat",
    'happy': "happy energetic",
    'excited': "energetic dance",
    'relaxed': "calm peaceful",
    'focused': "instrumental ambient",
}
DEFAULT_QUERY = "chill"

_CLIENT_ID_RE = re.compile(r'"client_id":"([^"]+)"')


def mood_query(mood: Optional[str]) -> str:
    return MOOD_QUERIES.get((mood or "").strip().lower(), DEFAULT_QUERY)


class SoundCloudProvider(MusicProvider):
    name = ProviderName.SOUNDCLOUD

    def __init__(
        self,
        client_id: Optional[str] = None,
        *,
        scrape_client_id: bool = True,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self._client_id = client_id
        self._scrape_client_id = scrape_client_id
        self._scraped_client_id: Optional[str] = None
        self._scrape_lock = threading.Lock()
        self._rate_limiter = rate_limiter or RateLimiter({self.name.value: 200})
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        self._timeout = timeout

    def _configured_client_id(self) -> Optional[str]:
        return self._client_id or os.getenv("SOUNDCLOUD_CLIENT_ID") or None

    def is_configured(self) -> bool:
        return bool(self._configured_client_id() or self._scraped_client_id)

    def _scrape(self) -> str:
        logger.warning("No SOUNDCLOUD_CLIENT_ID configured; scraping one from %s", HOME_URL)
        try:
            response = self._session.get(HOME_URL, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ConfigurationError(
                "SoundCloud client id is not configured and could not be discovered. Set SOUNDCLOUD_CLIENT_ID.",
                provider=self.name.value,
            ) from exc
        match = _CLIENT_ID_RE.search(response.text or "")
        if not match:
            raise ConfigurationError(
                "SoundCloud client id is not configured and could not be discovered. Set SOUNDCLOUD_CLIENT_ID.",
                provider=self.name.value,
            )
        return match.group(1)

    def client_id(self) -> str:
        """Configured client id, else a scraped one memoized for the process."""
        configured = self._configured_client_id()
        if configured:
            return configured
        if not self._scrape_client_id:
            raise ConfigurationError(
                "SoundCloud client id is not configured. Set SOUNDCLOUD_CLIENT_ID.",
                provider=self.name.value,
            )
        with self._scrape_lock:
            if self._scraped_client_id is None:
                self._scraped_client_id = self._scrape()
            return self._scraped_client_id

    def search_tracks(self, query: str, limit: int = 20) -> List[Dict[str, Any]]:
        client_id = self.client_id()
        self._rate_limiter.throttle(self.name.value)
        logger.debug("Searching SoundCloud for %r", query)
        payload = get_json(
            self._session,
            f"{API_URL}/search/tracks",
            {
                'q': query,
                'client_id': client_id,
                'limit': max(1, limit),
                'linked_partitioning': 1,
            },
            provider=self.name.value,
            timeout=self._timeout,
        )
        collection = payload.get('collection') or []
        if not collection:
            logger.warning("SoundCloud search for %r returned no results", query)
        return [item for item in collection if isinstance(item, dict)]

    def get_tracks_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        raw_tracks = self.search_tracks(mood_query(mood), limit)
        client_id = self.client_id()
        tracks: List[FormattedTrack] = []
        for raw in raw_tracks:
            try:
                tracks.append(FormattedTrack.from_soundcloud(raw, client_id=client_id))
            except ValueError as exc:
                logger.warning("Skipping malformed SoundCloud track: %s", exc)
        return tracks[:limit]

    def get_recommendations_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        return self.get_tracks_by_mood(mood, limit)


__all__ = ["SoundCloudProvider", "mood_query", "MOOD_QUERIES"]
