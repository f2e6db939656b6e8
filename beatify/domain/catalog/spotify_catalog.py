"""Thin spotipy wrapper that translates upstream failures into catalog errors."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from beatify.domain.catalog.token_manager import TokenManager
from beatify.errors import (
    CatalogError,
    ConfigurationError,
    UpstreamUnavailableError,
    error_for_status,
)

logger = logging.getLogger(__name__)

PROVIDER = "spotify"


def _retry_after(exc: SpotifyException) -> Optional[int]:
    headers = getattr(exc, "headers", None) or {}
    value = headers.get("Retry-After") or headers.get("retry-after")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class SpotifyCatalog:
    """Lazily builds one spotipy client driven by ``token_manager``.

    Configuration is re-validated on every call since credentials may be
    loaded after process start.
    """

    def __init__(
        self,
        token_manager: TokenManager,
        spotify_client: Optional[spotipy.Spotify] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._token_manager = token_manager
        self._timeout = timeout
        self._session = session
        self._client_lock = threading.Lock()
        self.sp = spotify_client
        if spotify_client is not None:
            logger.info("Spotipy client injected into SpotifyCatalog.")

    @property
    def token_manager(self) -> TokenManager:
        return self._token_manager

    def is_configured(self) -> bool:
        return self._token_manager.is_configured()

    def client(self) -> spotipy.Spotify:
        if not self._token_manager.is_configured():
            raise ConfigurationError(
                "Spotify credentials are not configured. Set SPOTIPY_CLIENT_ID and SPOTIPY_CLIENT_SECRET.",
                provider=PROVIDER,
            )
        with self._client_lock:
            if self.sp is None:
                # plain session: spotipy's retry adapter reports any exhausted 5xx as a header-less 429
                self.sp = spotipy.Spotify(
                    auth_manager=self._token_manager,
                    requests_timeout=self._timeout,
                    requests_session=self._session or requests.Session(),
                    retries=0,
                    status_retries=0,
                )
                logger.info("Spotipy client initialized.")
            return self.sp

    def _call(self, action: str, call: Callable[[spotipy.Spotify], Any]) -> Any:
        client = self.client()
        try:
            return call(client)
        except CatalogError:
            raise
        except SpotifyException as exc:
            status = getattr(exc, "http_status", None)
            if status == 401:
                self._token_manager.invalidate()
            logger.debug("Spotify call failed during %s (status %s): %s", action, status, exc)
            raise error_for_status(
                status,
                f"Spotify request failed during {action}: {getattr(exc, 'msg', exc)}",
                provider=PROVIDER,
                retry_after=_retry_after(exc),
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamUnavailableError(
                f"Spotify unreachable during {action}: {exc}", provider=PROVIDER
            ) from exc

    def search_artist(self, name: str, market: str = "US") -> Optional[Dict[str, Any]]:
        """First artist matching ``artist:"<name>"``, or None."""
        result = self._call(
            f'search artist "{name}"',
            lambda sp: sp.search(q=f'artist:"{name}"', limit=1, type="artist", market=market),
        )
        items = ((result or {}).get("artists") or {}).get("items") or []
        return items[0] if items else None

    def artist(self, artist_id: str) -> Optional[Dict[str, Any]]:
        return self._call(f"fetch artist {artist_id}", lambda sp: sp.artist(artist_id))

    def artist_top_tracks(self, artist_id: str, market: str = "US") -> List[Dict[str, Any]]:
        result = self._call(
            f"fetch top tracks for {artist_id}",
            lambda sp: sp.artist_top_tracks(artist_id, country=market),
        )
        tracks = (result or {}).get("tracks")
        if not isinstance(tracks, list):
            raise UpstreamUnavailableError(
                f"Unexpected top-tracks payload for artist {artist_id}", provider=PROVIDER
            )
        return tracks

    def search(self, query: str, types: str, limit: int, market: str = "US") -> Dict[str, Any]:
        return self._call(
            f'search "{query}"',
            lambda sp: sp.search(q=query, limit=limit, type=types, market=market),
        ) or {}

    def recommendations(
        self,
        seed_artist_ids: Sequence[str],
        limit: int,
        **params: Any,
    ) -> List[Dict[str, Any]]:
        result = self._call(
            "fetch recommendations",
            lambda sp: sp.recommendations(seed_artists=list(seed_artist_ids), limit=limit, **params),
        )
        tracks = (result or {}).get("tracks")
        if not isinstance(tracks, list):
            raise UpstreamUnavailableError("Unexpected recommendations payload", provider=PROVIDER)
        return tracks


__all__ = ["SpotifyCatalog"]
