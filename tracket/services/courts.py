"""Group logged activities into per-venue court summaries."""

import math

from tracket.models import Activity
from tracket.services.court_filters import CourtFilters, within_bounds


def _parse_coordinate(value):
    if value is None or value == '':
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def split_players(partner, opponents):
    """Partner plus comma-split opponents, trimmed, blanks dropped."""
    names = []
    if partner:
        names.append(str(partner).strip())
    if opponents:
        names.extend(name.strip() for name in str(opponents).split(','))
    return [name for name in names if name]


def _append_unique(items, value):
    if value and value not in items:
        items.append(value)


def activity_matches(activity, filters, today=None):
    start_date, end_date = filters.resolved_bounds(today=today)
    if (start_date or end_date) and not within_bounds(activity.date, start_date, end_date):
        return False
    if filters.sport and (activity.sport or '').lower() != filters.sport.lower():
        return False
    if filters.activity_type and activity.activity_type != filters.activity_type:
        return False
    if filters.player:
        needle = filters.player.lower()
        haystacks = [activity.partner or '', activity.opponents or '']
        if not any(needle in text.lower() for text in haystacks):
            return False
    return True


def aggregate_courts(activities, filters=None, today=None):
    """Return court summaries sorted by play count, most played first.

    ``activities`` must be in creation order; ties in play count keep
    the order in which each court was first seen.
    """
    filters = filters or CourtFilters()
    groups = {}

    for activity in activities:
        if not activity_matches(activity, filters, today=today):
            continue
        if not activity.club_name:
            continue

        key = (activity.club_name, activity.club_location)
        court = groups.get(key)
        if court is None:
            court = {
                'clubName': activity.club_name,
                'clubLocation': activity.club_location,
                'playCount': 0,
                'totalDuration': 0,
                'lastPlayed': activity.date,
                'sports': [],
                'activityTypes': [],
                'players': [],
            }
            groups[key] = court

        court['playCount'] += 1
        court['totalDuration'] += activity.duration or 0
        if activity.date > court['lastPlayed']:
            court['lastPlayed'] = activity.date
        _append_unique(court['sports'], activity.sport)
        _append_unique(court['activityTypes'], activity.activity_type)
        for player in split_players(activity.partner, activity.opponents):
            _append_unique(court['players'], player)

        if 'coordinates' not in court:
            lat = _parse_coordinate(activity.club_latitude)
            lng = _parse_coordinate(activity.club_longitude)
            if lat is not None and lng is not None:
                court['coordinates'] = {'lat': lat, 'lng': lng}

    return sorted(groups.values(), key=lambda c: c['playCount'], reverse=True)


def get_courts_data(filters=None, today=None):
    activities = Activity.query.order_by(Activity.id.asc()).all()
    return aggregate_courts(activities, filters=filters, today=today)
