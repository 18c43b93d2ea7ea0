"""Seed the activity store from the bundled CSV export."""

from pathlib import Path

from flask import current_app

from tracket.app import db
from tracket.models import Activity
from tracket.services.csv_import import import_csv_file


def seed_activities(csv_path=None):
    """Import the seed CSV only when the store is empty."""
    if Activity.query.first():
        return 0

    csv_path = csv_path or current_app.config.get('SEED_CSV_PATH')
    if not csv_path or not Path(csv_path).exists():
        return 0

    try:
        result = import_csv_file(csv_path, commit=True)
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info('Seeded %d activities from %s', result['imported'], csv_path)
    return result['imported']
