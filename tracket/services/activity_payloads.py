"""Shared payload helpers for creating and updating Activity records."""

from tracket.time_utils import parse_activity_date

ALLOWED_SPORTS = {'padel', 'tennis', 'pickleball'}
ALLOWED_ACTIVITY_TYPES = {'training', 'friendly', 'tournament'}
REQUIRED_FIELDS = ('date', 'sport', 'duration')
MAX_DURATION_MINUTES = 24 * 60

# Wire name -> model attribute.
ACTIVITY_WRITABLE_FIELDS = {
    'date': 'date',
    'sport': 'sport',
    'activityType': 'activity_type',
    'duration': 'duration',
    'clubName': 'club_name',
    'clubLocation': 'club_location',
    'clubMapLink': 'club_map_link',
    'clubLatitude': 'club_latitude',
    'clubLongitude': 'club_longitude',
    'sessionRating': 'session_rating',
    'racket': 'racket',
    'partner': 'partner',
    'opponents': 'opponents',
    'notes': 'notes',
}

_OPTIONAL_TEXT_LIMITS = {
    'clubName': 200,
    'clubLocation': 500,
    'clubMapLink': 500,
    'clubLatitude': 40,
    'clubLongitude': 40,
    'racket': 200,
    'partner': 200,
    'opponents': 500,
    'notes': 5000,
}


def clean_text(value, max_len):
    if value is None:
        return ''
    text = str(value).strip()
    if len(text) > max_len:
        return text[:max_len]
    return text


def _optional_text(value, max_len):
    cleaned = clean_text(value, max_len)
    return cleaned or None


def _parse_int(value):
    if value is None or value == '' or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _normalize_field(field, value, errors):
    """Return the cleaned value for ``field`` or append to ``errors``.

    Returns a ``(ok, value)`` pair so that ``None`` stays a legal value
    for optional fields.
    """
    if field == 'date':
        text = clean_text(value, 32)
        if not text:
            errors.append('date is required.')
            return False, None
        if parse_activity_date(text) is None:
            errors.append('date must be an ISO date (YYYY-MM-DD).')
            return False, None
        return True, text

    if field == 'sport':
        text = clean_text(value, 20).lower()
        if not text:
            errors.append('sport is required.')
            return False, None
        if text not in ALLOWED_SPORTS:
            allowed = ', '.join(sorted(ALLOWED_SPORTS))
            errors.append(f'sport must be one of: {allowed}.')
            return False, None
        return True, text

    if field == 'activityType':
        text = clean_text(value, 20).lower()
        if not text:
            return True, None
        if text not in ALLOWED_ACTIVITY_TYPES:
            allowed = ', '.join(sorted(ALLOWED_ACTIVITY_TYPES))
            errors.append(f'activityType must be one of: {allowed}.')
            return False, None
        return True, text

    if field == 'duration':
        parsed = _parse_int(value)
        if parsed is None:
            errors.append('duration must be an integer number of minutes.')
            return False, None
        if parsed <= 0:
            errors.append('duration must be greater than 0.')
            return False, None
        if parsed > MAX_DURATION_MINUTES:
            errors.append(f'duration must be at most {MAX_DURATION_MINUTES} minutes.')
            return False, None
        return True, parsed

    if field == 'sessionRating':
        if value is None or value == '':
            return True, None
        parsed = _parse_int(value)
        if parsed is None or not 1 <= parsed <= 5:
            errors.append('sessionRating must be an integer between 1 and 5.')
            return False, None
        return True, parsed

    return True, _optional_text(value, _OPTIONAL_TEXT_LIMITS[field])


def normalize_activity_payload(raw_data, partial=False):
    """Return normalized activity attributes and validation errors.

    Keys of the returned dict are model attribute names. With
    ``partial=True`` only supplied fields are validated and returned.
    """
    if not isinstance(raw_data, dict):
        return {}, ['Invalid JSON payload']

    errors = []
    activity_data = {}

    for field, attr in ACTIVITY_WRITABLE_FIELDS.items():
        if field not in raw_data:
            continue
        ok, value = _normalize_field(field, raw_data.get(field), errors)
        if ok:
            activity_data[attr] = value

    if not partial:
        for field in REQUIRED_FIELDS:
            if field not in raw_data:
                errors.append(f'{field} is required.')

    return activity_data, errors


def apply_activity_changes(activity, activity_data):
    for attr, value in activity_data.items():
        setattr(activity, attr, value)
