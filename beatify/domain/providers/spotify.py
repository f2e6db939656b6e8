"""Primary provider: curated mood playlists and catalog lookups on Spotify."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from beatify.domain.catalog.aggregator import MoodTrackAggregator
from beatify.domain.catalog.artist_pools import (
    CATEGORY_CONFIGS,
    DEFAULT_MARKET,
    CategoryConfig,
    infer_category_from_genres,
    market_for,
)
from beatify.domain.catalog.artist_resolver import ArtistResolver
from beatify.domain.catalog.spotify_catalog import SpotifyCatalog
from beatify.domain.catalog.track_fetcher import TrackFetcher, rank_by_popularity
from beatify.domain.providers.base import MusicProvider, ProviderName
from beatify.errors import CatalogError, NotFoundError, UpstreamRequestError
from beatify.models.dto import (
    ArtistCategory,
    ArtistMetadata,
    ArtistShowcaseSection,
    AudioFeatureTargets,
    CatalogSearchResult,
    FormattedTrack,
    TopArtistsPayload,
)
from beatify.utils.cache import MISSING, TTLCache

logger = logging.getLogger(__name__)

MIN_RECOMMENDATION_CANDIDATES = 20
MAX_SEED_ARTISTS = 5


def _clamp(value: Any, low: int, high: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = default
    return max(low, min(number, high))


def format_tracks(raw_tracks: Iterable[Dict[str, Any]]) -> List[FormattedTrack]:
    """Strictly format each track, dropping the ones that fail."""
    formatted: List[FormattedTrack] = []
    for raw in raw_tracks:
        try:
            formatted.append(FormattedTrack.from_spotify(raw))
        except ValueError as exc:
            logger.warning("Skipping malformed Spotify track: %s", exc)
    return formatted


class SpotifyProvider(MusicProvider):
    name = ProviderName.SPOTIFY

    def __init__(
        self,
        catalog: SpotifyCatalog,
        resolver: ArtistResolver,
        fetcher: TrackFetcher,
        aggregator: MoodTrackAggregator,
        metadata_cache: TTLCache,
    ) -> None:
        self.catalog = catalog
        self.resolver = resolver
        self.fetcher = fetcher
        self.aggregator = aggregator
        self._metadata_cache = metadata_cache

    def is_configured(self) -> bool:
        return self.catalog.is_configured()

    # Mood operations

    def get_tracks_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        tracks = self.aggregator.collect_top_tracks_for_mood(mood, limit)
        if not tracks:
            logger.warning("No curated tracks found for mood %r", mood)
            return []
        return format_tracks(tracks)

    def get_recommendations_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        """Rank from a wider candidate set, then truncate to ``limit``.

        Aggregation failures degrade to :meth:`get_tracks_by_mood`.
        """
        candidates = max(limit, MIN_RECOMMENDATION_CANDIDATES)
        try:
            tracks = self.aggregator.collect_top_tracks_for_mood(mood, candidates)
        except CatalogError as exc:
            logger.warning("Recommendation aggregation failed for mood %r, degrading: %s", mood, exc)
            return self.get_tracks_by_mood(mood, limit)
        return format_tracks(tracks)[:limit]

    # Artist showcase

    def _artist_metadata(
        self,
        name: str,
        config: CategoryConfig,
        top_track_limit: int,
    ) -> Optional[ArtistMetadata]:
        cache_key = (config.category.value, name.strip().lower(), top_track_limit)
        cached = self._metadata_cache.get(cache_key, MISSING)
        if cached is not MISSING:
            return cached

        artist = self.resolver.resolve_artist(name, market=config.market)
        if not artist:
            return None
        top_tracks = format_tracks(
            self.fetcher.get_artist_top_tracks(name, top_track_limit, config.category)
        )
        try:
            metadata = ArtistMetadata.from_spotify(artist, config.category, top_tracks)
        except ValueError as exc:
            logger.warning("Skipping malformed Spotify artist %r: %s", name, exc)
            return None
        self._metadata_cache.set(cache_key, metadata)
        return metadata

    def get_top_artists_showcase(
        self,
        limit_per_category: int = 6,
        top_track_limit: int = 6,
    ) -> TopArtistsPayload:
        per_category = _clamp(limit_per_category, 1, 30, 6)
        track_limit = _clamp(top_track_limit, 1, 10, 6)

        sections: List[ArtistShowcaseSection] = []
        for config in CATEGORY_CONFIGS:
            artists: List[ArtistMetadata] = []
            attempted = 0
            for name in config.pool:
                if len(artists) >= per_category:
                    break
                attempted += 1
                metadata = self._artist_metadata(name, config, track_limit)
                if metadata is not None:
                    artists.append(metadata)
            sections.append(
                ArtistShowcaseSection(
                    category=config.category,
                    title=config.title,
                    description=config.description,
                    artists=artists,
                    has_more=attempted < len(config.pool),
                )
            )

        return TopArtistsPayload(
            fetched_at=datetime.now(timezone.utc),
            limit_per_category=per_category,
            total_artists=sum(len(section.artists) for section in sections),
            sections=sections,
        )

    # Direct catalog access

    def search_catalog(
        self,
        query: str,
        artist_limit: int = 12,
        track_limit: int = 12,
    ) -> CatalogSearchResult:
        normalized = (query or "").strip()
        if not normalized:
            return CatalogSearchResult()
        artist_limit = _clamp(artist_limit, 1, 50, 12)
        track_limit = _clamp(track_limit, 1, 50, 12)

        payload = self.catalog.search(
            normalized, "artist,track", max(artist_limit, track_limit), market=DEFAULT_MARKET
        )
        artist_items = (payload.get('artists') or {}).get('items') or []
        track_items = (payload.get('tracks') or {}).get('items') or []

        artists: List[ArtistMetadata] = []
        for raw in artist_items[:artist_limit]:
            try:
                artists.append(ArtistMetadata.from_spotify(raw, ArtistCategory.GLOBAL))
            except ValueError as exc:
                logger.warning("Skipping malformed Spotify artist in search: %s", exc)
        return CatalogSearchResult(artists=artists, tracks=format_tracks(track_items[:track_limit]))

    def get_artist_by_id_with_tracks(
        self,
        artist_id: str,
        top_track_limit: int = 10,
    ) -> Optional[ArtistMetadata]:
        artist_id = (artist_id or "").strip()
        if not artist_id:
            return None
        try:
            artist = self.catalog.artist(artist_id)
        except NotFoundError:
            logger.info("Spotify artist %s not found", artist_id)
            return None
        if not isinstance(artist, dict) or not artist:
            return None

        category = infer_category_from_genres(artist.get('genres'))
        tracks = self.catalog.artist_top_tracks(artist_id, market=market_for(category))
        ranked = rank_by_popularity([track for track in tracks if isinstance(track, dict)])
        top_tracks = format_tracks(ranked[:_clamp(top_track_limit, 1, 50, 10)])
        try:
            return ArtistMetadata.from_spotify(artist, category, top_tracks)
        except ValueError as exc:
            logger.warning("Malformed Spotify artist %s: %s", artist_id, exc)
            return None

    def get_recommendations_by_artists(
        self,
        seed_artist_ids: Sequence[str],
        limit: int = 20,
        targets: Optional[AudioFeatureTargets] = None,
        min_popularity: Optional[int] = None,
    ) -> List[FormattedTrack]:
        seeds: List[str] = []
        for seed in seed_artist_ids or []:
            seed = (seed or "").strip()
            if seed and seed not in seeds:
                seeds.append(seed)
        if not seeds:
            raise UpstreamRequestError(
                "At least one seed artist id is required.", provider=self.name.value
            )
        if len(seeds) > MAX_SEED_ARTISTS:
            logger.info("Trimming %d seed artists to %d", len(seeds), MAX_SEED_ARTISTS)
            seeds = seeds[:MAX_SEED_ARTISTS]

        params: Dict[str, Any] = {}
        if targets is not None:
            params.update(targets.to_params())
        if min_popularity is not None:
            params['min_popularity'] = _clamp(min_popularity, 0, 100, 0)

        tracks = self.catalog.recommendations(seeds, _clamp(limit, 1, 100, 20), **params)
        return format_tracks(tracks)


__all__ = ["SpotifyProvider", "format_tracks"]
