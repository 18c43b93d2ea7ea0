import pytest
from tracket.app import create_app, db


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_activity(client):
    """Create an activity through the API and return its JSON."""
    def _make(**overrides):
        data = {
            'date': '2024-01-01', 'sport': 'padel', 'duration': 90,
            'activityType': 'friendly',
            'clubName': 'Club A', 'clubLocation': 'Location A',
        }
        data.update(overrides)
        data = {key: value for key, value in data.items() if value is not None}
        res = client.post('/api/activities', json=data)
        assert res.status_code == 201, res.get_json()
        return res.get_json()
    return _make
