"""Favorites, playlists and followed artists for the calling user."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from beatify.support.identity import current_user_id

library_bp = Blueprint('library_bp', __name__, url_prefix='/api/music')


def get_library():
    return current_app.extensions['library_service']


def _body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


# Favorites

@library_bp.route('/favorites', methods=['GET'])
@login_required
def list_favorites():
    favorites = get_library().list_favorites(current_user_id())
    return jsonify({
        'success': True,
        'data': [favorite.to_dict() for favorite in favorites],
        'count': len(favorites),
    }), 200


@library_bp.route('/favorites', methods=['POST'])
@login_required
def add_favorite():
    payload = _body()
    favorite, created = get_library().upsert_favorite(current_user_id(), payload.get('track'), payload.get('mood'))
    message = 'Track added to your favorites.' if created else 'Track is already in your favorites. Details updated.'
    return jsonify({'success': True, 'data': favorite.to_dict(), 'message': message}), 201 if created else 200


@library_bp.route('/favorites', methods=['DELETE'])
@login_required
def remove_favorite():
    get_library().remove_favorite(current_user_id(), _body().get('track_id'))
    return jsonify({'success': True, 'message': 'Track removed from favorites.'}), 200


# Playlists

@library_bp.route('/playlists', methods=['GET'])
@login_required
def list_playlists():
    playlists = get_library().list_playlists(current_user_id())
    return jsonify({
        'success': True,
        'data': [playlist.to_dict() for playlist in playlists],
        'count': len(playlists),
    }), 200


@library_bp.route('/playlists', methods=['POST'])
@login_required
def create_playlist():
    payload = _body()
    playlist = get_library().create_playlist(current_user_id(), payload.get('name'), payload.get('description'))
    return jsonify({'success': True, 'data': playlist.to_dict(include_tracks=True)}), 201


@library_bp.route('/playlists/<int:playlist_id>', methods=['GET'])
@login_required
def get_playlist(playlist_id: int):
    playlist = get_library().get_playlist(current_user_id(), playlist_id)
    return jsonify({'success': True, 'data': playlist.to_dict(include_tracks=True)}), 200


@library_bp.route('/playlists/<int:playlist_id>', methods=['DELETE'])
@login_required
def delete_playlist(playlist_id: int):
    get_library().delete_playlist(current_user_id(), playlist_id)
    return jsonify({'success': True, 'message': 'Playlist deleted successfully.'}), 200


@library_bp.route('/playlists/<int:playlist_id>/tracks', methods=['POST'])
@login_required
def add_playlist_track(playlist_id: int):
    payload = _body()
    playlist, added = get_library().add_track_to_playlist(
        current_user_id(), playlist_id, payload.get('track'), payload.get('mood')
    )
    message = 'Track added to playlist.' if added else 'Track is already in this playlist.'
    return jsonify({'success': True, 'data': playlist.to_dict(include_tracks=True), 'message': message}), 200


@library_bp.route('/playlists/<int:playlist_id>/tracks', methods=['DELETE'])
@login_required
def remove_playlist_track(playlist_id: int):
    playlist = get_library().remove_track_from_playlist(current_user_id(), playlist_id, _body().get('track_id'))
    return jsonify({'success': True, 'data': playlist.to_dict(include_tracks=True)}), 200


# Followed artists

@library_bp.route('/artists/followed', methods=['GET'])
@login_required
def list_followed_artists():
    artists = get_library().list_followed_artists(current_user_id())
    return jsonify({
        'success': True,
        'data': [artist.to_dict() for artist in artists],
        'count': len(artists),
    }), 200


@library_bp.route('/artists/followed', methods=['POST'])
@login_required
def follow_artist():
    followed, created = get_library().follow_artist(current_user_id(), _body().get('artist'))
    message = 'Artist followed.' if created else 'Artist already followed. Details updated.'
    return jsonify({'success': True, 'data': followed.to_dict(), 'message': message}), 201 if created else 200


@library_bp.route('/artists/followed/<string:artist_id>', methods=['DELETE'])
@login_required
def unfollow_artist(artist_id: str):
    get_library().unfollow_artist(current_user_id(), artist_id)
    return jsonify({'success': True, 'message': 'Artist unfollowed.'}), 200
