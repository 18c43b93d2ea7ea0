"""WSGI entrypoint used by Gunicorn."""
import os

from tracket.app import create_app
from tracket.services.activity_seeder import seed_activities

config_name = os.environ.get('FLASK_ENV', 'production')
app = create_app(config_name)

if app.config.get('AUTO_SEED_ACTIVITIES'):
    with app.app_context():
        try:
            seed_activities()
        except (OSError, ValueError):
            app.logger.exception('Failed to seed activities from %s', app.config.get('SEED_CSV_PATH'))
