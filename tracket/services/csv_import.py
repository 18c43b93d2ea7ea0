"""Import activities from the spreadsheet CSV export.

The export header has a long-standing typo (``oponents``); it is part of
the file format and is read as-is.
"""

import csv
import io
import re
from pathlib import Path

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from tracket.app import db
from tracket.models import Activity
from tracket.services.activity_payloads import normalize_activity_payload

CSV_HEADERS = [
    'date', 'sport', 'activity type', 'duration minutes', 'club name',
    'club location', 'club map link', 'club latitude', 'club longitude',
    'session rating', 'racket', 'partner', 'oponents', 'notes',
]

# CSV column -> activity wire field
_CSV_TO_ACTIVITY = {
    'activity type': 'activityType',
    'club name': 'clubName',
    'club location': 'clubLocation',
    'club map link': 'clubMapLink',
    'club latitude': 'clubLatitude',
    'club longitude': 'clubLongitude',
    'racket': 'racket',
    'partner': 'partner',
    'oponents': 'opponents',
    'notes': 'notes',
}


def parse_csv_text(csv_text):
    """Parse CSV text into row dicts keyed by the header row.

    Quoted cells may contain commas. Short rows are padded with ``''``.
    """
    text = str(csv_text or '').strip()
    if not text:
        return []
    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    rows = list(reader)
    headers = [header.strip() for header in rows[0]]
    parsed = []
    for values in rows[1:]:
        if not any(value.strip() for value in values):
            continue
        row = {}
        for index, header in enumerate(headers):
            row[header] = values[index].strip() if index < len(values) else ''
        parsed.append(row)
    return parsed


_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def _parse_int(value, default=None):
    """Read the leading integer of a cell, so ``"90.5"`` gives 90."""
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def is_csv_row(row):
    return isinstance(row, dict) and 'duration minutes' in row


def csv_row_to_activity(row):
    """Map one CSV row to an activity payload (camelCase wire fields)."""
    payload = {
        'date': (row.get('date') or '').strip(),
        'sport': (row.get('sport') or '').strip().lower(),
        'duration': _parse_int(row.get('duration minutes'), default=0),
    }
    rating = (row.get('session rating') or '').strip()
    payload['sessionRating'] = _parse_int(rating) if rating else None
    for column, field in _CSV_TO_ACTIVITY.items():
        value = (row.get(column) or '').strip()
        payload[field] = value or None
    return payload


def import_activity_rows(rows, commit=True):
    """Create one activity per row; bad rows are logged and skipped.

    Each row is written in its own savepoint, so a row the database
    refuses is rolled back alone.
    """
    imported = 0
    for index, row in enumerate(rows):
        payload = csv_row_to_activity(row) if is_csv_row(row) else row
        activity_data, errors = normalize_activity_payload(payload, partial=False)
        if errors:
            current_app.logger.warning(
                'Failed to import activity row %d: %s', index + 1, '; '.join(errors)
            )
            continue
        try:
            with db.session.begin_nested():
                db.session.add(Activity(**activity_data))
                db.session.flush()
        except (SQLAlchemyError, OverflowError) as exc:
            current_app.logger.warning('Failed to import activity row %d: %s', index + 1, exc)
            continue
        imported += 1

    if commit:
        db.session.commit()
    else:
        db.session.flush()

    return {
        'message': f'Imported {imported} activities',
        'imported': imported,
        'total': len(rows),
    }


def import_csv_file(file_path, commit=True):
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f'File not found: {path}')
    rows = parse_csv_text(path.read_text(encoding='utf-8'))
    return import_activity_rows(rows, commit=commit)
