"""Court filter state and the client-side pass over aggregated courts.

A ``CourtFilters`` record has only optional fields; a missing field means
"no constraint on that dimension". The same record drives the server query
string and the client-side filtering of an already aggregated court list.
"""

import math
from dataclasses import dataclass, fields, replace
from datetime import date

from tracket.time_utils import date_key

DATE_RANGE_PRESETS = ('this-year', 'last-year', 'custom')

# attribute -> query parameter
_QUERY_PARAMS = {
    'date_range': 'dateRange',
    'start_date': 'startDate',
    'end_date': 'endDate',
    'sport': 'sport',
    'activity_type': 'activityType',
    'player': 'player',
}


def favorite_key(club_name, club_location):
    """Favorites are addressed by a ``"name|location"`` string."""
    return f'{club_name or ""}|{club_location or ""}'


def split_favorite_key(key):
    club_name, _, club_location = str(key).partition('|')
    return club_name, club_location


def _clean(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class CourtFilters:
    date_range: str = None
    start_date: str = None
    end_date: str = None
    sport: str = None
    activity_type: str = None
    player: str = None

    @classmethod
    def from_mapping(cls, mapping):
        """Build filters from query args or a camelCase dict."""
        mapping = mapping or {}
        values = {}
        for attr, param in _QUERY_PARAMS.items():
            raw = mapping.get(param)
            if raw is None:
                raw = mapping.get(attr)
            values[attr] = _clean(raw)
        if values['date_range'] not in DATE_RANGE_PRESETS:
            values['date_range'] = None
        return cls(**values)

    def to_query_params(self):
        return {
            param: getattr(self, attr)
            for attr, param in _QUERY_PARAMS.items()
            if getattr(self, attr) not in (None, '')
        }

    def active_count(self):
        return sum(1 for f in fields(self) if getattr(self, f.name) not in (None, ''))

    def has_active(self):
        return self.active_count() > 0

    def cleared(self):
        return CourtFilters()

    def with_date_range(self, preset, today=None):
        """Apply a date range preset the way the filter panel does.

        ``all-time`` (or anything unknown) drops the range entirely,
        ``custom`` keeps whatever explicit bounds are already set.
        """
        today = today or date.today()
        if preset == 'this-year':
            return replace(
                self, date_range='this-year',
                start_date=f'{today.year}-01-01', end_date=f'{today.year}-12-31',
            )
        if preset == 'last-year':
            year = today.year - 1
            return replace(
                self, date_range='last-year',
                start_date=f'{year}-01-01', end_date=f'{year}-12-31',
            )
        if preset == 'custom':
            return replace(self, date_range='custom')
        return replace(self, date_range=None, start_date=None, end_date=None)

    def resolved_bounds(self, today=None):
        """Explicit bounds win; otherwise a year preset supplies them."""
        if self.start_date or self.end_date:
            return self.start_date, self.end_date
        if self.date_range in ('this-year', 'last-year'):
            resolved = self.with_date_range(self.date_range, today=today)
            return resolved.start_date, resolved.end_date
        return None, None


def within_bounds(value, start_date=None, end_date=None):
    key = date_key(value)
    if start_date and key < date_key(start_date):
        return False
    if end_date and key > date_key(end_date):
        return False
    return True


def filter_courts(courts, filters=None, favorites=None, only_favorites=False):
    """Filter aggregated court dicts without another server round trip."""
    filters = filters or CourtFilters()
    results = list(courts)

    if filters.sport:
        results = [c for c in results if filters.sport in c.get('sports', [])]
    if filters.activity_type:
        results = [c for c in results if filters.activity_type in c.get('activityTypes', [])]
    if filters.player:
        needle = filters.player.lower()
        results = [
            c for c in results
            if any(needle in player.lower() for player in c.get('players', []))
        ]
    if filters.start_date or filters.end_date:
        results = [
            c for c in results
            if within_bounds(c.get('lastPlayed'), filters.start_date, filters.end_date)
        ]
    if only_favorites:
        favorite_set = set(favorites or ())
        results = [
            c for c in results
            if favorite_key(c.get('clubName'), c.get('clubLocation')) in favorite_set
        ]
    return results


def available_options(courts):
    sports = set()
    activity_types = set()
    players = set()
    for court in courts:
        sports.update(court.get('sports', []))
        activity_types.update(court.get('activityTypes', []))
        players.update(court.get('players', []))
    return {
        'sports': sorted(sports),
        'activityTypes': sorted(activity_types),
        'players': sorted(players),
    }


def has_coordinates(court):
    coords = court.get('coordinates')
    if not coords:
        return False
    try:
        return math.isfinite(float(coords['lat'])) and math.isfinite(float(coords['lng']))
    except (KeyError, TypeError, ValueError):
        return False


def courts_with_coordinates(courts):
    return sum(1 for court in courts if has_coordinates(court))
