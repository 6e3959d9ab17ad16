"""
Unlock Notifier.

Tells a user when a card tier becomes unlocked, exactly once per
(user, card template). A CardUnlockNotice row is written in the same
transaction as the notification; its unique constraint turns a concurrent
duplicate into an IntegrityError that rolls both back.
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional, Set
from flask import current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models import CardUnlockNotice, Notification
from .notification_service import create_notification
from .unlock_engine import newly_unlocked

logger = logging.getLogger(__name__)


CARD_UNLOCK_TYPE = 'card_unlock'

DEFAULT_TITLE = 'New Card Unlocked!'
DEFAULT_MESSAGE = "You've unlocked the {card_name} card. Congratulations!"


class UnlockNotifier:
    """
    Sends card-unlock notifications for one user and brand.

    Usage:
        notifier = UnlockNotifier(user_id, brand_id)
        sent = notifier.notify_new_unlocks(tier_progress, current_tier)
    """

    def __init__(self, user_id: int, brand_id: int):
        self.user_id = user_id
        self.brand_id = brand_id

    def pending_unlocks(
        self,
        tier_progress: Iterable[Mapping[str, Any]],
        current_tier: str,
        already_notified: Optional[Set[int]] = None
    ) -> List[Mapping[str, Any]]:
        """Unlocked tiers (other than the current one) not yet notified."""
        if already_notified is None:
            already_notified = CardUnlockNotice.notified_template_ids(self.user_id, self.brand_id)

        return [
            entry for entry in newly_unlocked(tier_progress, current_tier)
            if entry.get('id') is not None and entry['id'] not in already_notified
        ]

    def notify_new_unlocks(
        self,
        tier_progress: Iterable[Mapping[str, Any]],
        current_tier: str,
        already_notified: Optional[Set[int]] = None
    ) -> List[Notification]:
        """
        Notify every pending unlock.

        already_notified (card template IDs) is read from CardUnlockNotice
        when not given.

        Each tier is committed on its own, so a failure leaves earlier tiers
        recorded and the remaining ones are retried on the next evaluation.

        Returns:
            Notifications created by this call
        """
        sent = []
        for entry in self.pending_unlocks(tier_progress, current_tier, already_notified):
            notification = self._notify(entry)
            if notification is not None:
                sent.append(notification)

        if sent:
            logger.info(
                f'Sent {len(sent)} card unlock notification(s) to user {self.user_id} '
                f'for brand {self.brand_id}'
            )
        return sent

    def _notify(self, entry: Mapping[str, Any]) -> Optional[Notification]:
        card_name = entry.get('name') or entry.get('tier')
        try:
            notification = create_notification(
                user_id=self.user_id,
                brand_id=self.brand_id,
                type=CARD_UNLOCK_TYPE,
                title=DEFAULT_TITLE,
                message=DEFAULT_MESSAGE.format(card_name=card_name),
                action_url=current_app.config.get('CARD_UNLOCK_ACTION_URL', '/wallet'),
                image_url=entry.get('logo_url'),
                commit=False,
            )
            db.session.flush()

            db.session.add(CardUnlockNotice(
                user_id=self.user_id,
                brand_id=self.brand_id,
                card_template_id=entry['id'],
                notification_id=notification.id,
                tier=entry.get('tier'),
                card_name=entry.get('name'),
            ))
            db.session.commit()
            return notification

        except IntegrityError:
            # Another evaluation recorded this unlock first
            db.session.rollback()
            logger.debug(
                f'Card unlock already notified: user {self.user_id} template {entry.get("id")}'
            )
            return None

        except Exception:
            db.session.rollback()
            raise
