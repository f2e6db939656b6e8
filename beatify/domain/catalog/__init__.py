"""Spotify catalog services (tokens, artist resolution, mood aggregation)."""

from .token_manager import TokenManager
from .spotify_catalog import SpotifyCatalog
from .artist_resolver import ArtistResolver
from .track_fetcher import TrackFetcher
from .mood_selector import MoodSelector
from .aggregator import MoodTrackAggregator

__all__ = [
    "TokenManager",
    "SpotifyCatalog",
    "ArtistResolver",
    "TrackFetcher",
    "MoodSelector",
    "MoodTrackAggregator",
]
