"""Client-side courts and favorites helpers.

``LocalFavorites`` keeps the user's favorite courts in a small JSON file
(the local-storage copy) and ``TracketClient`` talks to the JSON API.
"""

import json
import logging
from pathlib import Path

import requests

from tracket.services.court_filters import (
    CourtFilters, favorite_key, filter_courts, split_favorite_key,
)

logger = logging.getLogger(__name__)

FAVORITES_FILE_NAME = 'tracket-favorites.json'


class TracketClientError(Exception):
    pass


def classify_error(message):
    """Pick the fallback state shown for a failed courts load."""
    text = str(message or '').lower()
    if 'network' in text or 'fetch' in text:
        return 'network'
    return 'data'


def view_state(error=None, courts=None):
    if error:
        return classify_error(error)
    if not courts:
        return 'empty'
    return 'ok'


class LocalFavorites:
    """Favorite courts persisted to disk on every change."""

    def __init__(self, path):
        self.path = Path(path)
        self.error = None
        self._favorites = self._load()

    def _load(self):
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError):
            self.error = 'Failed to load favorites from storage'
            logger.exception('Error loading favorites from %s', self.path)
            return []
        if not isinstance(data, list):
            return []
        return [str(item) for item in data]

    def _save(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._favorites), encoding='utf-8')
        except OSError:
            self.error = 'Failed to save favorites to storage'
            logger.exception('Error saving favorites to %s', self.path)

    @property
    def favorites(self):
        return list(self._favorites)

    def add(self, club_name, club_location):
        key = favorite_key(club_name, club_location)
        if key not in self._favorites:
            self._favorites.append(key)
            self._save()
        self.error = None

    def remove(self, club_name, club_location):
        key = favorite_key(club_name, club_location)
        if key in self._favorites:
            self._favorites = [fav for fav in self._favorites if fav != key]
            self._save()
        self.error = None

    def toggle(self, club_name, club_location):
        if self.is_favorite(club_name, club_location):
            self.remove(club_name, club_location)
        else:
            self.add(club_name, club_location)

    def is_favorite(self, club_name, club_location):
        return favorite_key(club_name, club_location) in self._favorites

    def favorite_clubs(self):
        clubs = []
        for key in self._favorites:
            club_name, club_location = split_favorite_key(key)
            clubs.append({'clubName': club_name, 'clubLocation': club_location})
        return clubs

    def clear(self):
        self._favorites = []
        self._save()
        self.error = None

    def count(self):
        return len(self._favorites)

    def sync_with_backend(self, fetch_remote):
        """Merge the server's favorites into the local set.

        This is a plain union: a favorite removed locally but still
        present on the server comes back after a sync.
        """
        try:
            remote = fetch_remote()
        except (TracketClientError, requests.RequestException):
            self.error = 'Failed to sync favorites with server'
            logger.exception('Error syncing favorites')
            return False

        merged = list(self._favorites)
        for key in remote or []:
            if key not in merged:
                merged.append(key)
        self._favorites = merged
        self._save()
        self.error = None
        return True


class TracketClient:
    def __init__(self, base_url, session=None, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, failure_message, **kwargs):
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TracketClientError(f'{failure_message}: network error ({exc})') from exc
        if not response.ok:
            raise TracketClientError(f'{failure_message}: {response.reason}')
        return response

    def get_courts(self, filters=None):
        filters = filters or CourtFilters()
        response = self._request(
            'GET', '/api/courts', 'Failed to fetch courts data',
            params=filters.to_query_params(),
        )
        return response.json()

    def get_favorites(self):
        return self._request(
            'GET', '/api/courts/favorites', 'Failed to fetch favorites from server',
        ).json()

    def add_favorite(self, club_name, club_location):
        self._request(
            'POST', '/api/courts/favorites', 'Failed to add favorite',
            json={'clubName': club_name, 'clubLocation': club_location},
        )

    def remove_favorite(self, club_name, club_location):
        self._request(
            'DELETE', '/api/courts/favorites', 'Failed to remove favorite',
            json={'clubName': club_name, 'clubLocation': club_location},
        )

    def is_favorite(self, club_name, club_location):
        response = self._request(
            'GET', '/api/courts/favorites/check', 'Failed to check favorite',
            params={'clubName': club_name, 'clubLocation': club_location},
        )
        return bool(response.json().get('isFavorite'))

    def toggle_favorite(self, local_favorites, club_name, club_location):
        """Flip a favorite on the server, then mirror it locally.

        The local set only changes once the server call succeeded.
        """
        if local_favorites.is_favorite(club_name, club_location):
            self.remove_favorite(club_name, club_location)
            local_favorites.remove(club_name, club_location)
        else:
            self.add_favorite(club_name, club_location)
            local_favorites.add(club_name, club_location)

    def load_courts_view(self, filters=None, local_favorites=None, only_favorites=False):
        """Fetch courts and apply the client-side pass, as the courts page does."""
        filters = filters or CourtFilters()
        try:
            courts = self.get_courts(filters)
        except TracketClientError as exc:
            return {'state': view_state(error=str(exc)), 'error': str(exc), 'courts': []}

        favorites = local_favorites.favorites if local_favorites else []
        visible = filter_courts(
            courts, filters, favorites=favorites, only_favorites=only_favorites,
        )
        return {'state': view_state(courts=visible), 'error': None, 'courts': visible}
