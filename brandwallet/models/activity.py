"""
Activity records that feed the unlock engine: vehicle activations and
event RSVPs.
"""
from datetime import datetime
from ..extensions import db


class Activation(db.Model):
    """
    A vehicle activated with a brand.
    Only verified activations count toward card unlocks.
    """
    __tablename__ = 'activations'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'), nullable=False, index=True)

    vin = db.Column(db.String(17))
    license_plate = db.Column(db.String(20))
    model = db.Column(db.String(100))
    year = db.Column(db.Integer)
    verification_method = db.Column(db.String(30), default='vin')  # vin, plate, dealer
    status = db.Column(db.String(20), default='pending')  # pending, verified, rejected
    verified_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index('ix_activations_user_brand_status', 'user_id', 'brand_id', 'status'),
    )

    def __repr__(self):
        return f'<Activation {self.id} {self.status}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'brand_id': self.brand_id,
            'vin': self.vin,
            'license_plate': self.license_plate,
            'model': self.model,
            'year': self.year,
            'verification_method': self.verification_method,
            'status': self.status,
            'verified_at': self.verified_at.isoformat() if self.verified_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Event(db.Model):
    """A brand event users can RSVP to."""
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'), nullable=False, index=True)

    type = db.Column(db.String(50))  # meetup, track_day, launch, workshop, ...
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    city = db.Column(db.String(100))
    location_text = db.Column(db.String(255))
    start_at = db.Column(db.DateTime, nullable=False)
    end_at = db.Column(db.DateTime)
    capacity = db.Column(db.Integer)
    published = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    rsvps = db.relationship('EventRSVP', backref='event', lazy='dynamic')

    def __repr__(self):
        return f'<Event {self.title}>'

    def to_summary(self):
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type,
            'startAt': self.start_at.isoformat() if self.start_at else None,
            'city': self.city,
            'imageUrl': self.image_url,
        }


class EventRSVP(db.Model):
    """A user's RSVP to an event. Status 'going' counts as attendance."""
    __tablename__ = 'event_rsvps'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    status = db.Column(db.String(20), default='going')  # going, interested, not_going

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('event_id', 'user_id', name='uq_event_rsvp_event_user'),
    )

    def __repr__(self):
        return f'<EventRSVP event={self.event_id} user={self.user_id} {self.status}>'
