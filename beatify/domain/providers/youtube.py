"""Secondary provider: mood searches against the YouTube Data API v3."""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Dict, List, Optional

import requests

from beatify.domain.providers.base import MusicProvider, ProviderName
from beatify.domain.providers.http import get_json
from beatify.errors import ConfigurationError
from beatify.models.dto import FormattedTrack
from beatify.utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

API_URL = "https://www.googleapis.com/youtube/v3"
MUSIC_CATEGORY_ID = "10"
MAX_RESULTS = 50

MOOD_QUERIES = {
    'sad': "happy upbeat music",
    'happy': "happy energetic music",
    'excited': "energetic dance music",
    'relaxed': "calm peaceful music",
    'focused': "instrumental study music",
}
DEFAULT_QUERY = "chill music"

_DURATION_RE = re.compile(r'PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?')


def mood_query(mood: Optional[str]) -> str:
    return MOOD_QUERIES.get((mood or "").strip().lower(), DEFAULT_QUERY)


def parse_duration_ms(value: Optional[str]) -> int:
    """ISO-8601 ``PT#H#M#S`` to milliseconds; unparseable values give 0."""
    match = _DURATION_RE.match(value or "")
    if not match:
        return 0
    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    return (hours * 3600 + minutes * 60 + seconds) * 1000


def _thumbnail(snippet: Dict[str, Any]) -> str:
    thumbnails = snippet.get('thumbnails') or {}
    for size in ('medium', 'default', 'high'):
        url = (thumbnails.get(size) or {}).get('url')
        if url:
            return url
    return ""


class YouTubeProvider(MusicProvider):
    name = ProviderName.YOUTUBE

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._rate_limiter = rate_limiter or RateLimiter({self.name.value: 100})
        self._session = session or requests.Session()
        self._timeout = timeout

    def _key(self) -> Optional[str]:
        return self._api_key or os.getenv("YOUTUBE_API_KEY")

    def is_configured(self) -> bool:
        return bool(self._key())

    def _require_key(self) -> str:
        key = self._key()
        if not key:
            raise ConfigurationError(
                "YouTube API key is not configured. Set YOUTUBE_API_KEY.", provider=self.name.value
            )
        return key

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self._rate_limiter.throttle(self.name.value)
        return get_json(
            self._session, f"{API_URL}/{path}", params, provider=self.name.value, timeout=self._timeout
        )

    def search_videos(self, query: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Search music videos and merge in their duration and view counts."""
        key = self._require_key()
        search = self._get("search", {
            'part': "snippet",
            'q': query,
            'type': "video",
            'videoCategoryId': MUSIC_CATEGORY_ID,
            'maxResults': max(1, min(limit, MAX_RESULTS)),
            'order': "relevance",
            'key': key,
        })
        items = [
            item for item in search.get('items') or []
            if isinstance(item, dict) and isinstance(item.get('id'), dict) and item['id'].get('videoId')
        ]
        if not items:
            return []

        video_ids = [item['id']['videoId'] for item in items]
        details = self._get("videos", {
            'part': "contentDetails,statistics",
            'id': ",".join(video_ids),
            'key': key,
        })
        details_by_id = {
            detail.get('id'): detail for detail in details.get('items') or [] if isinstance(detail, dict)
        }

        videos = []
        for item in items:
            video_id = item['id']['videoId']
            snippet = item['snippet'] if isinstance(item.get('snippet'), dict) else {}
            detail = details_by_id.get(video_id) or {}
            videos.append({
                'id': video_id,
                'title': snippet.get('title') or "",
                'channel_title': snippet.get('channelTitle') or "",
                'thumbnail': _thumbnail(snippet),
                'duration_ms': parse_duration_ms((detail.get('contentDetails') or {}).get('duration')),
                'view_count': (detail.get('statistics') or {}).get('viewCount') or 0,
            })
        return videos

    def get_tracks_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        query = mood_query(mood)
        logger.debug("YouTube mood %r mapped to query %r", mood, query)
        tracks: List[FormattedTrack] = []
        for video in self.search_videos(query, limit):
            try:
                tracks.append(FormattedTrack.from_youtube(video))
            except ValueError as exc:
                logger.warning("Skipping malformed YouTube video: %s", exc)
        return tracks[:limit]

    def get_recommendations_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        return self.get_tracks_by_mood(mood, limit)


__all__ = ["YouTubeProvider", "parse_duration_ms", "mood_query", "MOOD_QUERIES"]
