#!/usr/bin/env python3
"""Entry point for the Tracket activity tracker API."""
import os
from tracket.app import create_app, socketio

config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)

# Load the sample sessions into the in-memory store on first run
with app.app_context():
    from tracket.services.activity_seeder import seed_activities
    count = seed_activities()
    if count:
        print(f"Seeded {count} activities")

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5001))
    print(f"Tracket starting on http://localhost:{port}")
    socketio.run(
        app, host='0.0.0.0', port=port,
        debug=(config_name == 'development'),
        allow_unsafe_werkzeug=True,
    )
