"""Factory Boy factories for the library models used in tests."""

import factory
from factory.alchemy import SQLAlchemyModelFactory

from beatify.database.db_manager import FavoriteTrack, FollowedArtist, Playlist, PlaylistTrack


class _BaseFactory(SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"


class FavoriteTrackFactory(_BaseFactory):
    class Meta:
        model = FavoriteTrack

    user_id = "user-1"
    track_id = factory.Sequence(lambda n: f"track-{n}")
    name = factory.Sequence(lambda n: f"Track {n}")
    artists = "Artist"
    album = "Album"
    album_image = factory.LazyAttribute(lambda obj: f"http://images/{obj.track_id}.jpg")
    external_url = factory.LazyAttribute(lambda obj: f"https://open.spotify.com/track/{obj.track_id}")
    preview_url = ""
    source = "spotify"
    mood = "happy"


class PlaylistFactory(_BaseFactory):
    class Meta:
        model = Playlist

    user_id = "user-1"
    name = factory.Sequence(lambda n: f"Playlist {n}")
    description = ""


class PlaylistTrackFactory(_BaseFactory):
    class Meta:
        model = PlaylistTrack

    playlist = factory.SubFactory(PlaylistFactory)
    position = factory.Sequence(lambda n: n)
    track_id = factory.Sequence(lambda n: f"pl-track-{n}")
    name = factory.Sequence(lambda n: f"Playlist Track {n}")
    artists = "Artist"
    external_url = factory.LazyAttribute(lambda obj: f"https://open.spotify.com/track/{obj.track_id}")
    source = "spotify"


class FollowedArtistFactory(_BaseFactory):
    class Meta:
        model = FollowedArtist

    user_id = "user-1"
    artist_id = factory.Sequence(lambda n: f"artist-{n}")
    name = factory.Sequence(lambda n: f"Artist {n}")
    genres = factory.LazyFunction(lambda: ["pop"])
    followers = 100
    popularity = 50


_FACTORIES = [FavoriteTrackFactory, PlaylistFactory, PlaylistTrackFactory, FollowedArtistFactory]


def set_session(session):
    for factory_cls in _FACTORIES:
        factory_cls._meta.sqlalchemy_session = session


def reset_session():
    for factory_cls in _FACTORIES:
        factory_cls._meta.sqlalchemy_session = None


__all__ = [
    "FavoriteTrackFactory",
    "PlaylistFactory",
    "PlaylistTrackFactory",
    "FollowedArtistFactory",
    "set_session",
    "reset_session",
]
