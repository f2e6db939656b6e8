#!/usr/bin/env python
# config.py
import os
from typing import List

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'beatify-dev-secret'

    # Database (favorites, playlists, followed artists)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'beatify.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Spotify API (primary catalog)
    SPOTIPY_CLIENT_ID = os.environ.get('SPOTIPY_CLIENT_ID')
    SPOTIPY_CLIENT_SECRET = os.environ.get('SPOTIPY_CLIENT_SECRET')
    # Tokens are treated as expired this many seconds before Spotify says so
    SPOTIFY_TOKEN_EXPIRY_MARGIN_SECONDS = _get_int('SPOTIFY_TOKEN_EXPIRY_MARGIN_SECONDS', 60)

    # YouTube Data API (secondary catalog)
    YOUTUBE_API_KEY = os.environ.get('YOUTUBE_API_KEY')
    YOUTUBE_MIN_INTERVAL_MS = _get_int('YOUTUBE_MIN_INTERVAL_MS', 100)

    # SoundCloud v2 API (tertiary catalog)
    SOUNDCLOUD_CLIENT_ID = os.environ.get('SOUNDCLOUD_CLIENT_ID')
    SOUNDCLOUD_SCRAPE_CLIENT_ID = _get_bool('SOUNDCLOUD_SCRAPE_CLIENT_ID', True)
    SOUNDCLOUD_MIN_INTERVAL_MS = _get_int('SOUNDCLOUD_MIN_INTERVAL_MS', 200)

    # 'spotify', 'youtube' or 'soundcloud'
    DEFAULT_MUSIC_SERVICE = os.getenv('DEFAULT_MUSIC_SERVICE', 'spotify')

    # Catalog caching (artist ids, top tracks, artist metadata)
    CATALOG_CACHE_TTL_SECONDS = _get_int('CATALOG_CACHE_TTL_SECONDS', 30 * 60)
    CATALOG_CACHE_MAXSIZE = max(1, _get_int('CATALOG_CACHE_MAXSIZE', 2048))

    # Mood aggregation
    AGGREGATOR_MAX_WORKERS = max(1, _get_int('AGGREGATOR_MAX_WORKERS', 8))
    # Upper bound on extra artists tried when the first fan-out undershoots
    AGGREGATOR_MAX_TOPUP_ARTISTS = max(0, _get_int('AGGREGATOR_MAX_TOPUP_ARTISTS', 12))

    UPSTREAM_TIMEOUT_SECONDS = _get_float('UPSTREAM_TIMEOUT_SECONDS', 10.0)

    # HTTP
    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', 'http://localhost:3000')

    # Runtime behavior
    DEBUG = _get_bool('DEBUG', False)
    # Control console logging; when disabled, logs go only to file
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
    LOG_DIR = os.getenv('LOG_DIR', os.path.join(basedir, 'log'))
