"""Per-user favorites, playlists and followed artists."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from beatify.database.db_manager import (
    FavoriteTrack,
    FollowedArtist,
    Playlist,
    PlaylistTrack,
    db,
)

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    status = 400
    code = "invalid_request"


class InvalidPayload(LibraryError, ValueError):
    pass


class LibraryNotFound(LibraryError, LookupError):
    status = 404
    code = "not_found"


class DuplicatePlaylist(LibraryError):
    status = 409
    code = "duplicate_playlist"


def derive_track_id(track: Dict[str, Any]) -> Optional[str]:
    """Identity of a submitted track: ``track_id``, then ``id``, then ``external_url``."""
    for field in ('track_id', 'id', 'external_url'):
        value = track.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _track_fields(track: Any, mood: Optional[str]) -> Tuple[str, Dict[str, Any]]:
    if not isinstance(track, dict):
        raise InvalidPayload("Track data is required.")
    name = track.get('name')
    if not isinstance(name, str) or not name.strip():
        raise InvalidPayload("Track name is required.")
    track_id = derive_track_id(track)
    if not track_id:
        raise InvalidPayload("A valid track identifier is required.")
    fields = {
        'name': name.strip(),
        'artists': track.get('artists') or '',
        'album': track.get('album') or '',
        'album_image': track.get('album_image') or '',
        'external_url': track.get('external_url') or '',
        'preview_url': track.get('preview_url') or '',
        'source': track.get('source') or 'spotify',
        'mood': (mood or '').strip(),
        'added_at': datetime.now(timezone.utc),
    }
    return track_id, fields


class LibraryService:
    """find/create/save/delete over the three per-user collections."""

    # Favorites

    def list_favorites(self, user_id: str) -> List[FavoriteTrack]:
        return (
            FavoriteTrack.query.filter_by(user_id=user_id)
            .order_by(FavoriteTrack.added_at.desc())
            .all()
        )

    def upsert_favorite(self, user_id: str, track: Any, mood: Optional[str] = None) -> Tuple[FavoriteTrack, bool]:
        """Insert or refresh a favorite. Returns ``(favorite, created)``."""
        track_id, fields = _track_fields(track, mood)
        existing = FavoriteTrack.query.filter_by(user_id=user_id, track_id=track_id).first()
        if existing is None:
            favorite = FavoriteTrack(user_id=user_id, track_id=track_id, **fields)
            db.session.add(favorite)
            try:
                db.session.commit()
                return favorite, True
            except IntegrityError:
                db.session.rollback()
                logger.info("Concurrent favorite insert for %s/%s; updating instead", user_id, track_id)
                existing = FavoriteTrack.query.filter_by(user_id=user_id, track_id=track_id).one()

        if not fields['mood']:
            fields['mood'] = existing.mood
        for key, value in fields.items():
            setattr(existing, key, value)
        db.session.commit()
        return existing, False

    def remove_favorite(self, user_id: str, track_id: Optional[str]) -> None:
        if not isinstance(track_id, str) or not track_id.strip():
            raise InvalidPayload("trackId is required to remove a favorite.")
        favorite = FavoriteTrack.query.filter_by(user_id=user_id, track_id=track_id.strip()).first()
        if favorite is None:
            raise LibraryNotFound("Track not found in favorites.")
        db.session.delete(favorite)
        db.session.commit()

    # Playlists

    def list_playlists(self, user_id: str) -> List[Playlist]:
        return Playlist.query.filter_by(user_id=user_id).order_by(Playlist.updated_at.desc()).all()

    def get_playlist(self, user_id: str, playlist_id: int) -> Playlist:
        playlist = Playlist.query.filter_by(id=playlist_id, user_id=user_id).first()
        if playlist is None:
            raise LibraryNotFound("Playlist not found.")
        return playlist

    def create_playlist(self, user_id: str, name: Any, description: Any = None) -> Playlist:
        if not isinstance(name, str) or not name.strip():
            raise InvalidPayload("Playlist name is required.")
        name = name.strip()
        if Playlist.query.filter_by(user_id=user_id, name=name).first() is not None:
            raise DuplicatePlaylist("A playlist with this name already exists.")
        playlist = Playlist(
            user_id=user_id,
            name=name,
            description=(description or '').strip() if isinstance(description, str) else '',
        )
        db.session.add(playlist)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise DuplicatePlaylist("A playlist with this name already exists.") from exc
        return playlist

    def delete_playlist(self, user_id: str, playlist_id: int) -> None:
        playlist = self.get_playlist(user_id, playlist_id)
        db.session.delete(playlist)
        db.session.commit()

    def add_track_to_playlist(
        self,
        user_id: str,
        playlist_id: int,
        track: Any,
        mood: Optional[str] = None,
    ) -> Tuple[Playlist, bool]:
        """Append a track once. Returns ``(playlist, added)``."""
        track_id, fields = _track_fields(track, mood)
        playlist = self.get_playlist(user_id, playlist_id)
        if any(entry.track_id == track_id for entry in playlist.entries):
            return playlist, False

        next_position = max((entry.position for entry in playlist.entries), default=-1) + 1
        playlist.entries.append(PlaylistTrack(track_id=track_id, position=next_position, **fields))
        playlist.updated_at = datetime.now(timezone.utc)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return self.get_playlist(user_id, playlist_id), False
        return playlist, True

    def remove_track_from_playlist(self, user_id: str, playlist_id: int, track_id: Any) -> Playlist:
        if not isinstance(track_id, str) or not track_id.strip():
            raise InvalidPayload("trackId is required to remove a track from the playlist.")
        playlist = self.get_playlist(user_id, playlist_id)
        entry = next((e for e in playlist.entries if e.track_id == track_id.strip()), None)
        if entry is None:
            raise LibraryNotFound("Track not found in this playlist.")
        playlist.entries.remove(entry)
        playlist.updated_at = datetime.now(timezone.utc)
        db.session.commit()
        return playlist

    # Followed artists

    def list_followed_artists(self, user_id: str) -> List[FollowedArtist]:
        return FollowedArtist.query.filter_by(user_id=user_id).order_by(FollowedArtist.name.asc()).all()

    def follow_artist(self, user_id: str, artist: Any) -> Tuple[FollowedArtist, bool]:
        if not isinstance(artist, dict) or not artist.get('id') or not artist.get('name'):
            raise InvalidPayload("Artist id and name are required to follow an artist.")
        artist_id = str(artist['id']).strip()
        genres = artist.get('genres')
        genres = [g for g in genres if g] if isinstance(genres, list) else None
        followers = artist.get('followers') if isinstance(artist.get('followers'), int) else None
        popularity = artist.get('popularity') if isinstance(artist.get('popularity'), int) else None

        existing = FollowedArtist.query.filter_by(user_id=user_id, artist_id=artist_id).first()
        if existing is None:
            followed = FollowedArtist(
                user_id=user_id,
                artist_id=artist_id,
                name=artist['name'],
                image=artist.get('image'),
                genres=genres,
                followers=followers,
                popularity=popularity,
                external_url=artist.get('external_url'),
            )
            db.session.add(followed)
            try:
                db.session.commit()
                return followed, True
            except IntegrityError:
                db.session.rollback()
                existing = FollowedArtist.query.filter_by(user_id=user_id, artist_id=artist_id).one()

        existing.name = artist['name']
        existing.image = artist.get('image')
        existing.genres = genres
        if followers is not None:
            existing.followers = followers
        if popularity is not None:
            existing.popularity = popularity
        existing.external_url = artist.get('external_url') or existing.external_url
        db.session.commit()
        return existing, False

    def unfollow_artist(self, user_id: str, artist_id: str) -> None:
        followed = FollowedArtist.query.filter_by(user_id=user_id, artist_id=(artist_id or '').strip()).first()
        if followed is None:
            raise LibraryNotFound("Artist is not followed.")
        db.session.delete(followed)
        db.session.commit()


__all__ = [
    "LibraryService",
    "LibraryError",
    "InvalidPayload",
    "LibraryNotFound",
    "DuplicatePlaylist",
    "derive_track_id",
]
