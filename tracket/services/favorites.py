"""Server-side favorite courts: one shared set of ``"name|location"`` keys."""

from tracket.app import db
from tracket.models import Favorite
from tracket.services.court_filters import favorite_key


def get_favorites():
    return [fav.key for fav in Favorite.query.order_by(Favorite.id.asc()).all()]


def is_favorite(club_name, club_location):
    key = favorite_key(club_name, club_location)
    return Favorite.query.filter_by(key=key).first() is not None


def add_favorite(club_name, club_location):
    """Idempotent; returns True when the set changed."""
    key = favorite_key(club_name, club_location)
    if Favorite.query.filter_by(key=key).first():
        return False
    db.session.add(Favorite(key=key))
    db.session.commit()
    return True


def remove_favorite(club_name, club_location):
    """Idempotent; returns True when the set changed."""
    key = favorite_key(club_name, club_location)
    existing = Favorite.query.filter_by(key=key).first()
    if not existing:
        return False
    db.session.delete(existing)
    db.session.commit()
    return True
