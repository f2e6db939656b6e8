"""Cross-provider fallback for mood track requests."""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from beatify.domain.providers.base import ProviderName, ProviderRegistry, RequestType
from beatify.errors import CatalogError, UpstreamRequestError
from beatify.models.dto import TrackListResult
from beatify.observability.metrics import (
    record_fallback,
    record_provider_failure,
    record_provider_success,
)

logger = logging.getLogger(__name__)


def attempt_chain(requested: ProviderName) -> List[ProviderName]:
    """Providers to try, in order.

    Spotify is the universal fallback target; YouTube is the last resort.
    """
    if requested is ProviderName.SPOTIFY:
        return [ProviderName.SPOTIFY, ProviderName.YOUTUBE]
    return [requested, ProviderName.SPOTIFY, ProviderName.YOUTUBE]


class FallbackOrchestrator:
    def __init__(self, registry: ProviderRegistry, default_provider: Optional[str] = None) -> None:
        self._registry = registry
        self._default = ProviderName.parse(default_provider)

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def get_tracks(
        self,
        mood: str,
        limit: int = 20,
        request_type: RequestType = RequestType.RECOMMENDATIONS,
        provider: Optional[str] = None,
    ) -> TrackListResult:
        """Answer a mood request from the first provider that succeeds.

        Attempts are independent; no results are merged across providers.
        When every provider fails, the last error is re-raised unchanged.
        """
        mood = (mood or "").strip()
        if not mood:
            raise UpstreamRequestError("A mood is required.")
        requested = ProviderName.parse(provider) if provider else self._default
        request_type = RequestType.parse(request_type)

        chain = attempt_chain(requested)
        last_error: Optional[Exception] = None
        for position, name in enumerate(chain):
            if last_error is not None:
                logger.info("Falling back from %s to %s for mood %r", chain[position - 1].value, name.value, mood)
                record_fallback(chain[position - 1].value, name.value)
            started = time.monotonic()
            try:
                facade = self._registry.get(name)
                if request_type is RequestType.SEARCH:
                    tracks = facade.get_tracks_by_mood(mood, limit)
                else:
                    tracks = facade.get_recommendations_by_mood(mood, limit)
            except CatalogError as exc:
                record_provider_failure(name.value, exc.kind, time.monotonic() - started)
                logger.error("Provider %s failed for mood %r (%s): %s", name.value, mood, exc.kind, exc)
                last_error = exc
                continue
            except Exception as exc:
                # unregistered providers and malformed payloads count as failed attempts too
                kind = "unavailable" if isinstance(exc, LookupError) else "unexpected"
                record_provider_failure(name.value, kind, time.monotonic() - started)
                logger.exception("Provider %s failed unexpectedly for mood %r", name.value, mood)
                last_error = exc
                continue
            record_provider_success(name.value, len(tracks), time.monotonic() - started)
            return TrackListResult.build(mood=mood, provider=name.value, tracks=tracks)

        raise last_error


__all__ = ["FallbackOrchestrator", "attempt_chain"]
