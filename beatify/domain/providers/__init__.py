"""Music provider facades and the cross-provider fallback orchestrator."""

from __future__ import annotations

import random
from typing import Optional

import requests

from beatify.domain.catalog import (
    ArtistResolver,
    MoodSelector,
    MoodTrackAggregator,
    SpotifyCatalog,
    TokenManager,
    TrackFetcher,
)
from beatify.settings import AppSettings, load_app_settings
from beatify.utils.cache import TTLCache
from beatify.utils.rate_limit import RateLimiter

from .base import MusicProvider, ProviderName, ProviderRegistry, RequestType
from .fallback import FallbackOrchestrator, attempt_chain
from .soundcloud import SoundCloudProvider
from .spotify import SpotifyProvider
from .youtube import YouTubeProvider


def build_spotify_provider(
    settings: AppSettings,
    *,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    spotify_client=None,
    session: Optional[requests.Session] = None,
    rng: Optional[random.Random] = None,
) -> SpotifyProvider:
    """Wire the Spotify catalog stack with one cache per lookup granularity."""
    token_manager = TokenManager(
        client_id,
        client_secret,
        expiry_margin_seconds=settings.token_expiry_margin_seconds,
        session=session,
        timeout=settings.upstream_timeout_seconds,
    )
    catalog = SpotifyCatalog(
        token_manager,
        spotify_client=spotify_client,
        timeout=settings.upstream_timeout_seconds,
        session=session,
    )

    def _cache() -> TTLCache:
        return TTLCache(maxsize=settings.cache_maxsize, ttl=settings.cache_ttl_seconds)

    resolver = ArtistResolver(catalog, _cache())
    fetcher = TrackFetcher(catalog, resolver, _cache())
    aggregator = MoodTrackAggregator(
        MoodSelector(rng),
        fetcher,
        max_workers=settings.aggregator_max_workers,
        max_topup_artists=settings.aggregator_max_topup_artists,
        rng=rng,
    )
    return SpotifyProvider(catalog, resolver, fetcher, aggregator, _cache())


def build_default_registry(
    settings: Optional[AppSettings] = None,
    *,
    spotify_client_id: Optional[str] = None,
    spotify_client_secret: Optional[str] = None,
    youtube_api_key: Optional[str] = None,
    soundcloud_client_id: Optional[str] = None,
    spotify_client=None,
    session: Optional[requests.Session] = None,
) -> ProviderRegistry:
    """Build all three providers from settings; credentials stay lazy."""
    settings = settings or load_app_settings()
    rate_limiter = RateLimiter(settings.rate_limits_ms())
    return ProviderRegistry([
        build_spotify_provider(
            settings,
            client_id=spotify_client_id,
            client_secret=spotify_client_secret,
            spotify_client=spotify_client,
            session=session,
        ),
        YouTubeProvider(
            youtube_api_key,
            rate_limiter=rate_limiter,
            session=session,
            timeout=settings.upstream_timeout_seconds,
        ),
        SoundCloudProvider(
            soundcloud_client_id,
            scrape_client_id=settings.soundcloud_scrape_client_id,
            rate_limiter=rate_limiter,
            session=session,
            timeout=settings.upstream_timeout_seconds,
        ),
    ])


__all__ = [
    "MusicProvider",
    "ProviderName",
    "ProviderRegistry",
    "RequestType",
    "FallbackOrchestrator",
    "attempt_chain",
    "SpotifyProvider",
    "YouTubeProvider",
    "SoundCloudProvider",
    "build_spotify_provider",
    "build_default_registry",
]
