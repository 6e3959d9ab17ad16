"""
Notification Service.

The in-app notification sink. Other services create notifications through
create_notification(); users read them through NotificationService.
"""
from typing import Dict, List, Optional
from flask import current_app
from ..extensions import db
from ..models import Notification


def create_notification(
    user_id: int,
    type: str,
    title: str,
    message: str,
    brand_id: Optional[int] = None,
    action_url: Optional[str] = None,
    image_url: Optional[str] = None,
    commit: bool = True
) -> Notification:
    """
    Create an in-app notification.

    Pass commit=False to add it to the current transaction instead, so it is
    written (or rolled back) together with related rows.
    """
    notification = Notification(
        user_id=user_id,
        brand_id=brand_id,
        type=type,
        title=title,
        message=message,
        action_url=action_url,
        image_url=image_url,
        is_read=False,
    )
    db.session.add(notification)
    if commit:
        db.session.commit()
    return notification


class NotificationService:
    """A user's notification inbox."""

    def __init__(self, user_id: int):
        self.user_id = user_id

    def get_notifications(self, limit: int = 50, unread_only: bool = False) -> List[Notification]:
        query = Notification.query.filter_by(user_id=self.user_id)
        if unread_only:
            query = query.filter_by(is_read=False)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    def unread_count(self) -> int:
        return Notification.query.filter_by(user_id=self.user_id, is_read=False).count()

    def mark_read(self, notification_id: int) -> Optional[Notification]:
        """Returns None when the notification doesn't belong to this user."""
        notification = Notification.query.filter_by(
            id=notification_id,
            user_id=self.user_id
        ).first()
        if not notification:
            return None

        notification.is_read = True
        db.session.commit()
        return notification

    def mark_all_read(self) -> Dict[str, int]:
        updated = Notification.query.filter_by(
            user_id=self.user_id,
            is_read=False
        ).update({'is_read': True}, synchronize_session=False)
        db.session.commit()

        current_app.logger.debug(f'Marked {updated} notifications read for user {self.user_id}')
        return {'updated': updated}
