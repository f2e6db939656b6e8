"""Provider contract shared by every music catalog facade."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterable, List, Optional

from beatify.models.dto import FormattedTrack

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    SPOTIFY = "spotify"
    YOUTUBE = "youtube"
    SOUNDCLOUD = "soundcloud"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProviderName":
        """Unknown or missing names resolve to the primary provider."""
        if isinstance(value, cls):
            return value
        key = (value or "").strip().lower()
        for member in cls:
            if member.value == key:
                return member
        if key:
            logger.info("Unknown music service %r; using spotify", value)
        return cls.SPOTIFY


class RequestType(str, Enum):
    SEARCH = "search"
    RECOMMENDATIONS = "recommendations"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RequestType":
        key = (value or "").strip().lower()
        if key == cls.SEARCH.value:
            return cls.SEARCH
        return cls.RECOMMENDATIONS


class MusicProvider(ABC):
    """A catalog able to answer mood queries with formatted tracks."""

    name: ProviderName

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials are currently available (checked per call)."""

    @abstractmethod
    def get_tracks_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        ...

    @abstractmethod
    def get_recommendations_by_mood(self, mood: str, limit: int = 20) -> List[FormattedTrack]:
        ...


class ProviderRegistry:
    """Lookup of provider facades by name."""

    def __init__(self, providers: Iterable[MusicProvider] = ()) -> None:
        self._providers: Dict[ProviderName, MusicProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: MusicProvider) -> None:
        self._providers[ProviderName(provider.name)] = provider

    def get(self, name: ProviderName) -> MusicProvider:
        try:
            return self._providers[ProviderName(name)]
        except KeyError:
            raise LookupError(f"No provider registered for {name}") from None

    def names(self) -> List[ProviderName]:
        return list(self._providers)

    def status(self) -> Dict[str, bool]:
        return {name.value: provider.is_configured() for name, provider in self._providers.items()}


__all__ = ["ProviderName", "RequestType", "MusicProvider", "ProviderRegistry"]
