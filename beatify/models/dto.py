#!/usr/bin/env python
"""
Pydantic DTOs for the normalized track and artist shapes.

Every provider's raw payload is converted into these models at the provider
boundary; the same shapes are returned by the API and copied verbatim into
favorites, playlists and followed artists.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


SPOTIFY_TRACK_URL = "https://open.spotify.com/track/{id}"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={id}"
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{id}"


class TrackSource(str, Enum):
    SPOTIFY = "spotify"
    YOUTUBE = "youtube"
    SOUNDCLOUD = "soundcloud"


class ArtistCategory(str, Enum):
    """The three fixed artist pools used for mood curation."""

    PUNJABI = "punjabi"
    ENGLISH = "english"
    GLOBAL = "global"


def _id_from_url(url: Optional[str]) -> str:
    """Return the last path segment of ``url`` (ignoring query strings)."""
    if not url:
        return ""
    path = urlparse(url).path
    segments = [segment for segment in path.split('/') if segment]
    if segments:
        return segments[-1]
    return ""


def _mapping(value: Any) -> Dict[str, Any]:
    """Nested payload objects are trusted only when they really are objects."""
    return value if isinstance(value, dict) else {}


def _first_image(images: Any) -> str:
    if not isinstance(images, (list, tuple)):
        return ""
    for image in images:
        url = _mapping(image).get('url')
        if url:
            return url
    return ""


def scale_play_count(count: Any) -> int:
    """Map an unbounded view/play count onto the 0-100 popularity scale."""
    try:
        value = max(0, int(count or 0))
    except (TypeError, ValueError):
        return 0
    return min(100, int(round(math.log10(value + 1) * 10)))


class FormattedTrack(BaseModel):
    """Normalized track. ``id`` and ``external_url`` are never empty."""

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(min_length=1)
    name: str = ""
    artists: str = ""
    album: str = ""
    album_image: str = ""
    preview_url: Optional[str] = None
    external_url: str = Field(min_length=1)
    duration_ms: int = Field(default=0, ge=0)
    popularity: int = Field(default=0, ge=0, le=100)
    source: TrackSource

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("duration_ms", mode="before")
    @classmethod
    def _coerce_duration(cls, value: Any) -> int:
        try:
            return max(0, int(value or 0))
        except (TypeError, ValueError):
            return 0

    @field_validator("popularity", mode="before")
    @classmethod
    def _clamp_popularity(cls, value: Any) -> int:
        try:
            return max(0, min(100, int(value or 0)))
        except (TypeError, ValueError):
            return 0

    @classmethod
    def from_spotify(cls, raw: Dict[str, Any]) -> "FormattedTrack":
        """Strictly format a Spotify track object.

        Raises ValueError when neither an id nor an external URL is present.
        """
        if not isinstance(raw, dict):
            raise ValueError("Spotify track payload must be an object")
        external_url = _mapping(raw.get('external_urls')).get('spotify') or ""
        track_id = raw.get('id') or _id_from_url(external_url)
        if not track_id:
            raise ValueError("Spotify track has neither an id nor an external URL")
        album = _mapping(raw.get('album'))
        artists = raw.get('artists') if isinstance(raw.get('artists'), list) else []
        artist_names = [str(a['name']) for a in artists if isinstance(a, dict) and a.get('name')]
        return cls(
            id=track_id,
            name=raw.get('name') or "",
            artists=", ".join(artist_names),
            album=album.get('name') or "",
            album_image=_first_image(album.get('images')),
            preview_url=raw.get('preview_url'),
            external_url=external_url or SPOTIFY_TRACK_URL.format(id=track_id),
            duration_ms=raw.get('duration_ms'),
            popularity=raw.get('popularity'),
            source=TrackSource.SPOTIFY,
        )

    @classmethod
    def from_youtube(cls, video: Dict[str, Any]) -> "FormattedTrack":
        """Format a merged YouTube search+details record.

        Titles shaped like ``"Artist - Song"`` are split; otherwise the channel
        stands in for the artist.
        """
        video_id = video.get('id')
        if not video_id:
            raise ValueError("YouTube video has no id")
        title = video.get('title') or ""
        channel = video.get('channel_title') or ""
        parts = title.split(" - ")
        if len(parts) > 1:
            artist, song = parts[0], " - ".join(parts[1:])
        else:
            artist, song = channel, title
        return cls(
            id=video_id,
            name=song,
            artists=artist,
            album=channel,
            album_image=video.get('thumbnail') or "",
            preview_url=YOUTUBE_EMBED_URL.format(id=video_id),
            external_url=YOUTUBE_WATCH_URL.format(id=video_id),
            duration_ms=video.get('duration_ms'),
            popularity=scale_play_count(video.get('view_count')),
            source=TrackSource.YOUTUBE,
        )

    @classmethod
    def from_soundcloud(cls, raw: Dict[str, Any], client_id: Optional[str] = None) -> "FormattedTrack":
        if not isinstance(raw, dict):
            raise ValueError("SoundCloud track payload must be an object")
        user = _mapping(raw.get('user'))
        permalink = raw.get('permalink_url') or ""
        if not permalink and user.get('permalink') and raw.get('permalink'):
            permalink = f"https://soundcloud.com/{user['permalink']}/{raw['permalink']}"
        track_id = raw.get('id') or _id_from_url(permalink)
        if not track_id:
            raise ValueError("SoundCloud track has neither an id nor a permalink")
        stream_url = raw.get('stream_url')
        if stream_url and client_id:
            stream_url = f"{stream_url}?client_id={client_id}"
        return cls(
            id=track_id,
            name=raw.get('title') or "",
            artists=user.get('username') or user.get('full_name') or "Unknown Artist",
            album=raw.get('genre') or "SoundCloud",
            album_image=raw.get('artwork_url') or user.get('avatar_url') or "",
            preview_url=stream_url or None,
            external_url=permalink or f"https://soundcloud.com/tracks/{track_id}",
            duration_ms=raw.get('duration'),
            popularity=scale_play_count(raw.get('playback_count')),
            source=TrackSource.SOUNDCLOUD,
        )


class ArtistMetadata(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(min_length=1)
    name: str
    image: Optional[str] = None
    genres: List[str] = Field(default_factory=list)
    followers: int = 0
    popularity: int = 0
    external_url: Optional[str] = None
    top_tracks: List[FormattedTrack] = Field(default_factory=list)
    category: ArtistCategory

    @field_validator("genres", mode="before")
    @classmethod
    def _unique_genres(cls, value: Any) -> List[str]:
        if not isinstance(value, (list, tuple)):
            return []
        ordered: List[str] = []
        for genre in value:
            if genre and genre not in ordered:
                ordered.append(str(genre))
        return ordered

    @classmethod
    def from_spotify(
        cls,
        raw: Dict[str, Any],
        category: ArtistCategory,
        top_tracks: Optional[List[FormattedTrack]] = None,
    ) -> "ArtistMetadata":
        if not isinstance(raw, dict):
            raise ValueError("Spotify artist payload must be an object")
        return cls(
            id=raw.get('id') or "",
            name=raw.get('name') or "",
            image=_first_image(raw.get('images')) or None,
            genres=raw.get('genres') or [],
            followers=_mapping(raw.get('followers')).get('total') or 0,
            popularity=raw.get('popularity') or 0,
            external_url=_mapping(raw.get('external_urls')).get('spotify'),
            top_tracks=top_tracks or [],
            category=category,
        )


class ArtistShowcaseSection(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    category: ArtistCategory
    title: str
    description: str
    artists: List[ArtistMetadata]
    has_more: bool


class TopArtistsPayload(BaseModel):
    fetched_at: datetime
    limit_per_category: int
    total_artists: int
    sections: List[ArtistShowcaseSection]


class CatalogSearchResult(BaseModel):
    artists: List[ArtistMetadata] = Field(default_factory=list)
    tracks: List[FormattedTrack] = Field(default_factory=list)


class TrackListResult(BaseModel):
    """Uniform answer of the fallback orchestrator."""

    mood: str
    provider: str
    tracks: List[FormattedTrack]
    count: int

    @classmethod
    def build(cls, mood: str, provider: str, tracks: List[FormattedTrack]) -> "TrackListResult":
        return cls(mood=mood, provider=provider, tracks=tracks, count=len(tracks))


class AudioFeatureTargets(BaseModel):
    """Optional normalized targets for seeded recommendations."""

    energy: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    danceability: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    valence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def to_params(self) -> Dict[str, float]:
        return {
            f"target_{name}": value
            for name, value in self.model_dump().items()
            if value is not None
        }


__all__ = [
    "TrackSource",
    "ArtistCategory",
    "FormattedTrack",
    "ArtistMetadata",
    "ArtistShowcaseSection",
    "TopArtistsPayload",
    "CatalogSearchResult",
    "TrackListResult",
    "AudioFeatureTargets",
    "scale_play_count",
]
