from flask import Blueprint, jsonify, request

from tracket.app import socketio
from tracket.services.court_filters import CourtFilters, favorite_key
from tracket.services.courts import get_courts_data
from tracket.services.favorites import (
    add_favorite, get_favorites, is_favorite, remove_favorite,
)

courts_bp = Blueprint('courts', __name__)


def _broadcast_favorites_change(action, key):
    socketio.emit('favorites_changed', {'action': action, 'key': key})


def _club_from_request(data):
    """Return ``(club_name, club_location, error)`` from a JSON body or query args."""
    if not isinstance(data, dict):
        return None, None, 'Invalid JSON payload'
    club_name = str(data.get('clubName') or '').strip()
    club_location = str(data.get('clubLocation') or '').strip()
    if not club_name:
        return None, None, 'clubName is required'
    return club_name, club_location, None


@courts_bp.route('', methods=['GET'])
def get_courts():
    filters = CourtFilters.from_mapping(request.args)
    return jsonify(get_courts_data(filters))


@courts_bp.route('/favorites', methods=['GET'])
def list_favorites():
    return jsonify(get_favorites())


@courts_bp.route('/favorites', methods=['POST'])
def create_favorite():
    club_name, club_location, error = _club_from_request(request.get_json(silent=True))
    if error:
        return jsonify({'error': error}), 400

    key = favorite_key(club_name, club_location)
    if add_favorite(club_name, club_location):
        _broadcast_favorites_change('added', key)
    return jsonify({'message': 'Favorite added', 'key': key}), 201


@courts_bp.route('/favorites', methods=['DELETE'])
def delete_favorite():
    club_name, club_location, error = _club_from_request(request.get_json(silent=True))
    if error:
        return jsonify({'error': error}), 400

    key = favorite_key(club_name, club_location)
    if remove_favorite(club_name, club_location):
        _broadcast_favorites_change('removed', key)
    return jsonify({'message': 'Favorite removed', 'key': key})


@courts_bp.route('/favorites/check', methods=['GET'])
def check_favorite():
    club_name, club_location, error = _club_from_request(request.args)
    if error:
        return jsonify({'error': error}), 400
    return jsonify({'isFavorite': is_favorite(club_name, club_location)})
