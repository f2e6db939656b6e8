# database/db_manager.py
import logging
import os
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.engine import make_url
from sqlalchemy.orm import relationship

# Initialize the SQLAlchemy object
db = SQLAlchemy()
logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class TrackFieldsMixin:
    """Columns mirroring a formatted track, copied verbatim from provider output."""

    track_id = db.Column(db.String(512), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    artists = db.Column(db.String(512), nullable=False, default='')
    album = db.Column(db.String(255), nullable=False, default='')
    album_image = db.Column(db.String(1024), nullable=False, default='')
    external_url = db.Column(db.String(1024), nullable=False, default='')
    preview_url = db.Column(db.String(1024), nullable=False, default='')
    source = db.Column(db.String(32), nullable=False, default='spotify')
    mood = db.Column(db.String(64), nullable=False, default='')
    added_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)

    def track_dict(self) -> dict:
        return {
            'track_id': self.track_id,
            'name': self.name,
            'artists': self.artists,
            'album': self.album,
            'album_image': self.album_image,
            'external_url': self.external_url,
            'preview_url': self.preview_url,
            'source': self.source,
            'mood': self.mood,
            'added_at': _iso(self.added_at),
        }


class FavoriteTrack(TrackFieldsMixin, db.Model):
    __tablename__ = 'favorite_tracks'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'track_id', name='uq_favorite_track_per_user'),
    )

    def to_dict(self) -> dict:
        data = self.track_dict()
        data.update({
            'id': self.id,
            'user_id': self.user_id,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        })
        return data

    def __repr__(self) -> str:
        return f'<FavoriteTrack {self.track_id} for {self.user_id}>'


class Playlist(db.Model):
    __tablename__ = 'playlists'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    entries = relationship(
        'PlaylistTrack',
        back_populates='playlist',
        order_by='PlaylistTrack.position',
        cascade='all, delete-orphan',
        lazy='joined',
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'name', name='uq_playlist_name_per_user'),
    )

    def to_dict(self, *, include_tracks: bool = False) -> dict:
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'track_count': len(self.entries or []),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        if include_tracks:
            data['tracks'] = [entry.to_dict() for entry in self.entries]
        return data


class PlaylistTrack(TrackFieldsMixin, db.Model):
    __tablename__ = 'playlist_tracks'

    id = db.Column(db.Integer, primary_key=True)
    playlist_id = db.Column(
        db.Integer,
        ForeignKey('playlists.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    position = db.Column(db.Integer, nullable=False, default=0)

    playlist = relationship('Playlist', back_populates='entries')

    __table_args__ = (
        UniqueConstraint('playlist_id', 'track_id', name='uq_playlist_track_once'),
    )

    def to_dict(self) -> dict:
        data = self.track_dict()
        data.update({'id': self.id, 'position': self.position})
        return data


class FollowedArtist(db.Model):
    __tablename__ = 'followed_artists'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    artist_id = db.Column(db.String(128), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    image = db.Column(db.String(1024), nullable=True)
    genres = db.Column(db.JSON, nullable=True)  # list[str]
    followers = db.Column(db.Integer, nullable=True)
    popularity = db.Column(db.Integer, nullable=True)
    external_url = db.Column(db.String(1024), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'artist_id', name='uq_followed_artist_per_user'),
    )

    def to_dict(self) -> dict:
        return {
            'id': self.artist_id,
            'artist_id': self.artist_id,
            'name': self.name,
            'image': self.image,
            'genres': list(self.genres or []),
            'followers': self.followers,
            'popularity': self.popularity,
            'external_url': self.external_url,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


def initialize_database(app):
    """
    Initializes the SQLAlchemy extension with the Flask app instance
    and creates all database tables if they don't already exist.
    """
    db.init_app(app)

    # Ensure the directory for the configured SQLite file exists
    uri = app.config.get('SQLALCHEMY_DATABASE_URI')
    if uri:
        url = make_url(uri)
        # Only handle file-based SQLite (not :memory:)
        if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
            db_dir = os.path.dirname(url.database)
            if db_dir and not os.path.exists(db_dir):
                os.makedirs(db_dir, exist_ok=True)
                logger.info("Created SQLite DB directory: %s", db_dir)

    with app.app_context():
        db.create_all()
        logger.info("Database tables created or already exist.")
