"""Client-credentials token cache for the Spotify Web API.

The manager doubles as a spotipy ``auth_manager``: spotipy only calls
``get_access_token(as_dict=False)`` on it before every request.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from beatify.errors import (
    AuthConfigError,
    AuthRequestError,
    AuthUnavailableError,
    ConfigurationError,
)

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
PROVIDER = "spotify"


@dataclass(frozen=True)
class CachedToken:
    value: str
    expires_at: float


class TokenManager:
    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        *,
        expiry_margin_seconds: int = 60,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], float]] = None,
        timeout: float = 10.0,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._margin = max(0, int(expiry_margin_seconds))
        self._session = session or requests.Session()
        self._clock = clock or time.time
        self._timeout = timeout
        self._token: Optional[CachedToken] = None
        self._lock = threading.Lock()

    def _credentials(self):
        client_id = self._client_id or os.getenv("SPOTIPY_CLIENT_ID")
        client_secret = self._client_secret or os.getenv("SPOTIPY_CLIENT_SECRET")
        return client_id, client_secret

    def is_configured(self) -> bool:
        client_id, client_secret = self._credentials()
        return bool(client_id and client_secret)

    def get_access_token(self, as_dict: bool = False) -> str:
        """Return a valid bearer token, exchanging credentials when needed.

        Credentials are checked on every call, even with a cached token, so a
        process whose environment loses them starts failing immediately.
        """
        client_id, client_secret = self._credentials()
        if not client_id or not client_secret:
            raise ConfigurationError(
                "Spotify credentials are not configured. Set SPOTIPY_CLIENT_ID and SPOTIPY_CLIENT_SECRET.",
                provider=PROVIDER,
            )

        with self._lock:
            token = self._token
            if token is not None and self._clock() < token.expires_at:
                logger.debug("Reusing cached Spotify access token.")
                return token.value
            self._token = self._exchange(client_id, client_secret)
            return self._token.value

    def invalidate(self) -> None:
        with self._lock:
            self._token = None

    def _exchange(self, client_id: str, client_secret: str) -> CachedToken:
        logger.info("Requesting new Spotify access token.")
        try:
            response = self._session.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(client_id, client_secret),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Spotify token endpoint unreachable: %s", exc)
            raise AuthUnavailableError(
                f"Could not reach the Spotify token endpoint: {exc}", provider=PROVIDER
            ) from exc

        status = response.status_code
        if status == 401:
            raise AuthConfigError(
                "Spotify rejected the client credentials.", provider=PROVIDER, status=status
            )
        if status == 400:
            raise AuthRequestError(
                "Spotify rejected the token request.", provider=PROVIDER, status=status,
                details=_safe_json(response),
            )
        if status != 200:
            raise AuthUnavailableError(
                f"Spotify token endpoint answered with status {status}.",
                provider=PROVIDER, status=status,
            )

        payload = _safe_json(response)
        try:
            value = payload["access_token"]
            expires_in = int(payload.get("expires_in", 3600))
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthUnavailableError(
                "Spotify token response was malformed.", provider=PROVIDER, status=status
            ) from exc
        if not value:
            raise AuthUnavailableError("Spotify token response had an empty token.", provider=PROVIDER)

        expires_at = self._clock() + expires_in - self._margin
        return CachedToken(value=value, expires_at=expires_at)


def _safe_json(response):
    try:
        return response.json()
    except ValueError:
        return None


__all__ = ["TokenManager", "CachedToken", "TOKEN_URL"]
