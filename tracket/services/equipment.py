"""Racket payload helpers and usage aggregation.

Rackets are linked to activities only by their free-text ``"brand model"``
label. Labels are compared after normalisation; there is no fuzzy matching,
so a typo on either side simply leaves minutes uncounted.
"""

import re

from tracket.services.activity_payloads import clean_text

_BOOL_TRUE = {'true', '1', 'yes', 'on'}
_BOOL_FALSE = {'false', '0', 'no', 'off'}

# Wire name -> model attribute.
RACKET_WRITABLE_FIELDS = {
    'brand': 'brand',
    'model': 'model',
    'isActive': 'is_active',
    'isBroken': 'is_broken',
    'notes': 'notes',
    'imageUrl': 'image_url',
}
_TEXT_LIMITS = {'brand': 100, 'model': 100, 'notes': 5000, 'imageUrl': 500}
_BOOL_FIELDS = {'isActive', 'isBroken'}


def parse_bool(value):
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    normalized = str(value).strip().lower()
    if normalized in _BOOL_TRUE:
        return True
    if normalized in _BOOL_FALSE:
        return False
    return None


def normalize_racket_payload(raw_data, partial=False):
    """Return normalized racket attributes and validation errors."""
    if not isinstance(raw_data, dict):
        return {}, ['Invalid JSON payload']

    errors = []
    racket_data = {}
    for field, attr in RACKET_WRITABLE_FIELDS.items():
        if field not in raw_data:
            continue
        value = raw_data.get(field)

        if field in _BOOL_FIELDS:
            parsed = parse_bool(value)
            if parsed is None:
                errors.append(f'{field} must be true or false.')
                continue
            racket_data[attr] = parsed
            continue

        cleaned = clean_text(value, _TEXT_LIMITS[field])
        if field in ('brand', 'model'):
            if not cleaned:
                errors.append(f'{field} cannot be empty.')
                continue
            racket_data[attr] = cleaned
        else:
            racket_data[attr] = cleaned or None

    if not partial:
        for field in ('brand', 'model'):
            if field not in raw_data:
                errors.append(f'{field} is required.')

    return racket_data, errors


def normalize_racket_label(label):
    return re.sub(r'\s+', ' ', str(label or '').strip().lower())


def racket_label(racket):
    return normalize_racket_label(f'{racket.brand} {racket.model}')


def usage_minutes_by_racket(rackets, activities):
    """Total minutes played per racket id, keyed only for rackets with usage."""
    label_to_id = {}
    for racket in rackets:
        label_to_id[racket_label(racket)] = racket.id

    minutes_by_id = {}
    for activity in activities:
        if not activity.racket:
            continue
        racket_id = label_to_id.get(normalize_racket_label(activity.racket))
        if racket_id is None:
            continue
        minutes_by_id[racket_id] = minutes_by_id.get(racket_id, 0) + (activity.duration or 0)
    return minutes_by_id
