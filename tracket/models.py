from tracket.app import db
from tracket.time_utils import utcnow_naive


class Activity(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.String(32), nullable=False, index=True)
    sport = db.Column(db.String(20), nullable=False, index=True)  # padel, tennis, pickleball
    activity_type = db.Column(db.String(20), nullable=True)  # training, friendly, tournament
    duration = db.Column(db.Integer, nullable=False)  # minutes
    club_name = db.Column(db.String(200), nullable=True)
    club_location = db.Column(db.String(500), nullable=True)
    club_map_link = db.Column(db.String(500), nullable=True)
    # Coordinates are kept as entered; parsing happens at aggregation time.
    club_latitude = db.Column(db.String(40), nullable=True)
    club_longitude = db.Column(db.String(40), nullable=True)
    session_rating = db.Column(db.Integer, nullable=True)  # 1-5
    racket = db.Column(db.String(200), nullable=True)
    partner = db.Column(db.String(200), nullable=True)
    opponents = db.Column(db.String(500), nullable=True)  # comma-joined names
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    def to_dict(self):
        return {
            'id': self.id, 'date': self.date, 'sport': self.sport,
            'activityType': self.activity_type, 'duration': self.duration,
            'clubName': self.club_name, 'clubLocation': self.club_location,
            'clubMapLink': self.club_map_link,
            'clubLatitude': self.club_latitude, 'clubLongitude': self.club_longitude,
            'sessionRating': self.session_rating, 'racket': self.racket,
            'partner': self.partner, 'opponents': self.opponents,
            'notes': self.notes,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class Favorite(db.Model):
    """Server-side favorite court. One shared set, no per-user partition."""
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(720), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())


class Racket(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    brand = db.Column(db.String(100), nullable=False)
    model = db.Column(db.String(100), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    is_broken = db.Column(db.Boolean, default=False, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    @property
    def label(self):
        return f'{self.brand} {self.model}'

    def to_dict(self):
        return {
            'id': self.id, 'brand': self.brand, 'model': self.model,
            'isActive': self.is_active, 'isBroken': self.is_broken,
            'notes': self.notes, 'imageUrl': self.image_url,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
