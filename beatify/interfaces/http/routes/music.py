"""Mood tracks, artist showcase, catalog search and recommendations."""

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from beatify.domain.catalog.embed import build_embed
from beatify.domain.providers import RequestType
from beatify.models.dto import AudioFeatureTargets

logger = logging.getLogger(__name__)

music_bp = Blueprint('music_bp', __name__, url_prefix='/api/music')

MAX_TRACK_LIMIT = 100


def get_orchestrator():
    return current_app.extensions['fallback_orchestrator']


def get_spotify_provider():
    return current_app.extensions['spotify_provider']


def _positive_int(name: str, default: int) -> int:
    value = request.args.get(name, type=int)
    if value is None or value <= 0:
        return default
    return value


def _unit_float(name: str):
    """A query float in [0, 1]; anything else is ignored."""
    value = request.args.get(name, type=float)
    if value is None or not 0.0 <= value <= 1.0:
        return None
    return value


@music_bp.route('/tracks', methods=['GET'])
@login_required
def get_tracks():
    mood = (request.args.get('mood') or '').strip()
    if not mood:
        return jsonify({'success': False, 'error': 'mood_required', 'message': 'Mood parameter is required'}), 400

    limit = min(_positive_int('limit', 20), MAX_TRACK_LIMIT)
    request_type = RequestType.parse(request.args.get('type'))
    service = request.args.get('service') or current_app.config.get('DEFAULT_MUSIC_SERVICE')
    logger.info("Fetching %s tracks for mood %r via %s", request_type.value, mood, service)

    result = get_orchestrator().get_tracks(mood, limit, request_type=request_type, provider=service)
    return jsonify({'success': True, 'data': result.model_dump(mode='json')}), 200


@music_bp.route('/artists/showcase', methods=['GET'])
@login_required
def artists_showcase():
    payload = get_spotify_provider().get_top_artists_showcase(
        limit_per_category=_positive_int('limit_per_category', 6),
        top_track_limit=_positive_int('top_track_limit', 6),
    )
    return jsonify({'success': True, 'data': payload.model_dump(mode='json')}), 200


@music_bp.route('/artists/<string:artist_id>', methods=['GET'])
@login_required
def artist_detail(artist_id: str):
    artist = get_spotify_provider().get_artist_by_id_with_tracks(
        artist_id, top_track_limit=_positive_int('top_track_limit', 10)
    )
    if artist is None:
        return jsonify({'success': False, 'error': 'not_found', 'message': 'Artist not found.'}), 404
    return jsonify({'success': True, 'data': artist.model_dump(mode='json')}), 200


@music_bp.route('/spotify/search', methods=['GET'])
@login_required
def search_catalog():
    result = get_spotify_provider().search_catalog(
        request.args.get('query', ''),
        artist_limit=_positive_int('artist_limit', 12),
        track_limit=_positive_int('track_limit', 12),
    )
    return jsonify({'success': True, 'data': result.model_dump(mode='json')}), 200


@music_bp.route('/recommendations/artists', methods=['GET'])
@login_required
def recommendations_by_artists():
    raw_ids = request.args.get('artist_ids') or ''
    seeds = [seed.strip() for seed in raw_ids.split(',') if seed.strip()]
    if not seeds:
        return jsonify({
            'success': False,
            'error': 'artist_ids_required',
            'message': 'artist_ids parameter is required (comma-separated list of Spotify artist IDs).',
        }), 400

    targets = AudioFeatureTargets(
        energy=_unit_float('target_energy'),
        danceability=_unit_float('target_danceability'),
        valence=_unit_float('target_valence'),
    )
    tracks = get_spotify_provider().get_recommendations_by_artists(
        seeds,
        limit=_positive_int('limit', 20),
        targets=targets,
        min_popularity=request.args.get('min_popularity', type=int),
    )
    return jsonify({
        'success': True,
        'data': {
            'tracks': [track.model_dump(mode='json') for track in tracks],
            'count': len(tracks),
            'seed_artists': seeds,
        },
    }), 200


@music_bp.route('/spotify/embed', methods=['POST'])
@login_required
def spotify_embed():
    payload = request.get_json(silent=True) or {}
    value = payload.get('input')
    if not isinstance(value, str) or not value.strip():
        return jsonify({'success': False, 'error': 'input_required', 'message': 'Missing input (Spotify URL or ID)'}), 400
    try:
        embed = build_embed(value)
    except ValueError as exc:
        return jsonify({'success': False, 'error': 'invalid_input', 'message': str(exc)}), 400
    return jsonify({'success': True, 'data': embed}), 200
