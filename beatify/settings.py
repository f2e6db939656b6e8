#!/usr/bin/env python
"""
Typed settings used to wire the catalog services.

Merges defaults from config.Config with optional runtime overrides. Provider
credentials are deliberately absent here: the token manager and the secondary
providers re-read them on every call.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config


PROVIDER_NAMES = ("spotify", "youtube", "soundcloud")


def _coerce_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return bool(value)


class AppSettings(BaseModel):
    """Catalog and aggregation options."""

    model_config = ConfigDict(extra="ignore")

    default_music_service: str = "spotify"

    cache_ttl_seconds: int = 30 * 60
    cache_maxsize: int = 2048

    token_expiry_margin_seconds: int = 60
    youtube_min_interval_ms: int = 100
    soundcloud_min_interval_ms: int = 200
    soundcloud_scrape_client_id: bool = True

    aggregator_max_workers: int = 8
    aggregator_max_topup_artists: int = 12

    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("default_music_service", mode="before")
    @classmethod
    def _normalize_service(cls, value: object) -> str:
        key = str(value or "").strip().lower()
        if key not in PROVIDER_NAMES:
            return "spotify"
        return key

    @field_validator("cache_ttl_seconds", "cache_maxsize", "aggregator_max_workers", mode="before")
    @classmethod
    def _positive_int(cls, value: object) -> int:
        try:
            number = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 1
        return max(1, number)

    @field_validator(
        "token_expiry_margin_seconds",
        "youtube_min_interval_ms",
        "soundcloud_min_interval_ms",
        "aggregator_max_topup_artists",
        mode="before",
    )
    @classmethod
    def _non_negative_int(cls, value: object) -> int:
        try:
            number = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0
        return max(0, number)

    @field_validator("soundcloud_scrape_client_id", mode="before")
    @classmethod
    def _coerce_scrape(cls, value: object) -> bool:
        return _coerce_bool(value)

    @field_validator("aggregator_max_workers")
    @classmethod
    def _cap_workers(cls, value: int) -> int:
        return min(value, 32)

    def rate_limits_ms(self) -> Dict[str, int]:
        """Minimum spacing per provider; the primary provider is not throttled."""
        return {
            "youtube": self.youtube_min_interval_ms,
            "soundcloud": self.soundcloud_min_interval_ms,
        }


def load_app_settings(overrides: Optional[Dict[str, Any]] = None) -> AppSettings:
    """Load settings merging config defaults with optional runtime overrides."""
    data: Dict[str, Any] = {
        "default_music_service": Config.DEFAULT_MUSIC_SERVICE,
        "cache_ttl_seconds": Config.CATALOG_CACHE_TTL_SECONDS,
        "cache_maxsize": Config.CATALOG_CACHE_MAXSIZE,
        "token_expiry_margin_seconds": Config.SPOTIFY_TOKEN_EXPIRY_MARGIN_SECONDS,
        "youtube_min_interval_ms": Config.YOUTUBE_MIN_INTERVAL_MS,
        "soundcloud_min_interval_ms": Config.SOUNDCLOUD_MIN_INTERVAL_MS,
        "soundcloud_scrape_client_id": Config.SOUNDCLOUD_SCRAPE_CLIENT_ID,
        "aggregator_max_workers": Config.AGGREGATOR_MAX_WORKERS,
        "aggregator_max_topup_artists": Config.AGGREGATOR_MAX_TOPUP_ARTISTS,
        "upstream_timeout_seconds": Config.UPSTREAM_TIMEOUT_SECONDS,
    }
    if overrides:
        data.update(overrides)
    return AppSettings.model_validate(data)


__all__ = ["AppSettings", "load_app_settings", "PROVIDER_NAMES"]
