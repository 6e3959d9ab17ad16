"""
Notification and CardUnlockNotice models.

CardUnlockNotice tracks which card unlocks a user has already been told about,
so repeated evaluations (page loads, polling, the batch CLI) never send the
same "card unlocked" notification twice.
"""
from datetime import datetime
from typing import Set
from ..extensions import db


class Notification(db.Model):
    """In-app notification shown in the user's notification bell."""
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'))

    type = db.Column(db.String(30), nullable=False)  # card_unlock, event_reminder, ...
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    action_url = db.Column(db.String(500))
    image_url = db.Column(db.String(500))
    is_read = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index('ix_notifications_user_read', 'user_id', 'is_read'),
    )

    def __repr__(self):
        return f'<Notification {self.type} user={self.user_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'actionUrl': self.action_url,
            'imageUrl': self.image_url,
            'isRead': bool(self.is_read),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class CardUnlockNotice(db.Model):
    """
    Suppression record: one row per (user, card template) already notified.

    The unique constraint is what makes concurrent evaluations safe; a second
    writer fails on insert and rolls back its notification with it.
    """
    __tablename__ = 'card_unlock_notices'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'), nullable=False)
    card_template_id = db.Column(db.Integer, db.ForeignKey('card_templates.id'), nullable=False)
    notification_id = db.Column(db.Integer, db.ForeignKey('notifications.id'))

    # Snapshot of the template at unlock time (templates can be renamed)
    tier = db.Column(db.String(50), nullable=False)
    card_name = db.Column(db.String(100))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'card_template_id', name='uq_card_unlock_notice_user_template'),
        db.Index('ix_card_unlock_notices_user_brand', 'user_id', 'brand_id'),
    )

    def __repr__(self):
        return f'<CardUnlockNotice user={self.user_id} template={self.card_template_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'brand_id': self.brand_id,
            'card_template_id': self.card_template_id,
            'notification_id': self.notification_id,
            'tier': self.tier,
            'card_name': self.card_name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def notified_template_ids(cls, user_id: int, brand_id: int) -> Set[int]:
        """
        Card templates the user has already been notified about for a brand.

        Args:
            user_id: The user ID
            brand_id: The brand ID

        Returns:
            Set of card_template_id values
        """
        rows = db.session.query(cls.card_template_id).filter(
            cls.user_id == user_id,
            cls.brand_id == brand_id
        ).all()
        return {row[0] for row in rows}
