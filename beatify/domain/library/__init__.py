"""User library (favorites, playlists, followed artists)."""

from .service import (
    DuplicatePlaylist,
    InvalidPayload,
    LibraryError,
    LibraryNotFound,
    LibraryService,
    derive_track_id,
)

__all__ = [
    "LibraryService",
    "LibraryError",
    "InvalidPayload",
    "LibraryNotFound",
    "DuplicatePlaylist",
    "derive_track_id",
]
