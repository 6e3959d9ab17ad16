"""
Card Progress Service.

Ties the unlock engine to storage: reads a member's card, the brand's
templates and one activity snapshot, aggregates progress for every tier and
optionally notifies newly unlocked tiers.

Notification is best effort. A failure there is logged and never changes the
progress returned to the caller.
"""
from typing import Any, Dict, Iterable, Optional
from flask import current_app
from ..models import WalletCard
from ..utils.exceptions import WalletCardNotFoundError
from .activity_service import ActivityService
from .card_template_service import CardTemplateService
from .unlock_engine import aggregate_progress
from .unlock_notifier import UnlockNotifier
from .wallet_service import WalletService


class CardProgressService:
    """
    Card progress for one brand's members.

    Usage:
        service = CardProgressService(brand_id)
        progress = service.get_member_progress(user_id, notify=True)
    """

    def __init__(self, brand_id: int):
        self.brand_id = brand_id
        self.activity = ActivityService(brand_id)
        self.templates = CardTemplateService(brand_id)
        self.wallet = WalletService(brand_id)

    def _notifications_enabled(self) -> bool:
        return current_app.config.get('CARD_UNLOCK_NOTIFICATIONS_ENABLED', True)

    def get_member_progress(self, user_id: int, notify: bool = False) -> Dict[str, Any]:
        """
        Progress toward every active card tier for a member.

        Args:
            user_id: The member
            notify: Send notifications for tiers unlocked since the last call

        Returns:
            Dict with card, templates (in display order), user_progress and
            notifications_sent

        Raises:
            WalletCardNotFoundError: The user has no card with this brand
        """
        card = self.wallet.get_card(user_id)
        if not card:
            raise WalletCardNotFoundError()
        return self._evaluate_card(card, notify=notify)

    def _evaluate_card(self, card: WalletCard, notify: bool = False, templates=None) -> Dict[str, Any]:
        if templates is None:
            templates = [template.to_dict() for template in self.templates.get_templates()]

        snapshot = self.activity.get_snapshot(card.user_id)
        tier_progress = aggregate_progress(templates, snapshot, card.tier)

        result = {
            'card': card.to_dict(),
            'templates': tier_progress,
            'user_progress': snapshot.to_dict(),
            'notifications_sent': 0,
        }

        if notify and self._notifications_enabled():
            try:
                sent = UnlockNotifier(card.user_id, self.brand_id).notify_new_unlocks(tier_progress, card.tier)
                result['notifications_sent'] = len(sent)
            except Exception as e:
                current_app.logger.warning(
                    f'Card unlock notification failed for user {card.user_id} brand {self.brand_id}: {e}'
                )

        return result

    def evaluate_brand(
        self,
        user_ids: Optional[Iterable[int]] = None,
        dry_run: bool = False
    ) -> Dict[str, Any]:
        """
        Evaluate every member of the brand (or just user_ids) and notify unlocks.

        With dry_run, nothing is written; 'pending' counts the notifications a
        real run would send.

        Returns:
            Dict with counts: checked, notified, pending, errors
        """
        query = WalletCard.query.filter_by(brand_id=self.brand_id)
        if user_ids is not None:
            query = query.filter(WalletCard.user_id.in_(list(user_ids)))
        cards = query.order_by(WalletCard.id.asc()).all()

        # Templates are shared by every member of the brand
        templates = [template.to_dict() for template in self.templates.get_templates()]

        results = {
            'brand_id': self.brand_id,
            'checked': 0,
            'notified': 0,
            'pending': 0,
            'errors': [],
        }

        for card in cards:
            results['checked'] += 1
            try:
                if dry_run:
                    progress = self._evaluate_card(card, notify=False, templates=templates)
                    notifier = UnlockNotifier(card.user_id, self.brand_id)
                    results['pending'] += len(notifier.pending_unlocks(progress['templates'], card.tier))
                else:
                    progress = self._evaluate_card(card, notify=True, templates=templates)
                    results['notified'] += progress['notifications_sent']
            except Exception as e:
                current_app.logger.error(f'Card evaluation failed for user {card.user_id}: {e}')
                results['errors'].append({'user_id': card.user_id, 'error': str(e)})

        current_app.logger.info(
            f'Card evaluation for brand {self.brand_id}: {results["checked"]} checked, '
            f'{results["notified"]} notified, {results["pending"]} pending'
        )
        return results
