"""
Wallet Service.

Wallet cards (the tier a user currently holds with a brand), manual tier
assignment from the brand console, and the wallet updates feed.

The unlock engine never changes a card's tier; only assign_card() does.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from flask import current_app
from ..extensions import db
from ..models import Activation, CardTemplate, User, WalletCard, WalletUpdate
from ..utils.errors import ErrorCode
from .activity_service import ActivityService


class WalletService:
    """
    Wallet cards for one brand.

    Usage:
        service = WalletService(brand_id)
        tier = service.get_current_tier(user_id)
    """

    def __init__(self, brand_id: int):
        self.brand_id = brand_id

    def get_card(self, user_id: int) -> Optional[WalletCard]:
        return WalletCard.query.filter_by(user_id=user_id, brand_id=self.brand_id).first()

    def get_current_tier(self, user_id: int) -> Optional[str]:
        """The card's tier, or None when the user has no card with this brand."""
        card = self.get_card(user_id)
        return card.tier if card else None

    def assign_card(
        self,
        user_id: int,
        template_id: int,
        assigned_by: Optional[int] = None,
        reason: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Brand admin assigns a card tier to a member.

        Manual assignment is the only way a card changes tier (including
        manual-only tiers and downgrades).

        Args:
            user_id: Member to assign
            template_id: Card template to assign
            assigned_by: User ID of the admin making the change
            reason: Shown in the member's wallet update

        Returns:
            Dict with success status and details
        """
        card = self.get_card(user_id)
        if not card:
            return {'success': False, 'error': 'Wallet card not found'}

        template = CardTemplate.query.filter_by(
            id=template_id,
            brand_id=self.brand_id,
            is_active=True
        ).first()
        if not template:
            return {'success': False, 'error': 'Card template not found or inactive'}

        previous_tier = card.tier
        if previous_tier == template.tier and card.card_template_id == template.id:
            return {
                'success': True,
                'changed': False,
                'card': card.to_dict(),
            }

        card.card_template_id = template.id
        card.tier = template.tier
        card.updated_at = datetime.utcnow()

        db.session.add(WalletUpdate(
            user_id=user_id,
            brand_id=self.brand_id,
            type='card_upgrade',
            title=f'Your card is now {template.name}',
            description=reason or f'Your membership card was updated to {template.name}.',
            action_url=current_app.config.get('CARD_UNLOCK_ACTION_URL', '/wallet'),
        ))

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Failed to assign card tier for user {user_id}: {e}')
            return {'success': False, 'error': 'Failed to assign card', 'code': ErrorCode.DATABASE_ERROR.value}

        current_app.logger.info(
            f'Card assigned: user {user_id} brand {self.brand_id} '
            f'{previous_tier} -> {template.tier} (by {assigned_by or "system"})'
        )

        return {
            'success': True,
            'changed': True,
            'previous_tier': previous_tier,
            'new_tier': template.tier,
            'card': card.to_dict(),
        }

    def list_members(self, limit: int = 100, offset: int = 0) -> List[Dict[str, Any]]:
        """Brand console member list with each member's activity counts."""
        cards = db.session.query(WalletCard, User).join(
            User, WalletCard.user_id == User.id
        ).filter(
            WalletCard.brand_id == self.brand_id
        ).order_by(WalletCard.created_at.desc(), WalletCard.id.desc()).offset(offset).limit(limit).all()

        activity = ActivityService(self.brand_id)
        members = []
        for card, user in cards:
            snapshot = activity.get_snapshot(user.id)
            members.append({
                'user': {
                    'id': user.id,
                    'name': user.name,
                    'email': user.email,
                    'city': user.city,
                },
                'card': {
                    **card.to_dict(),
                    'card_name': card.card_template.name if card.card_template else None,
                },
                'activations_count': snapshot.activations_count,
                'events_count': snapshot.events_attended,
            })
        return members

    def count_members(self) -> int:
        return WalletCard.query.filter_by(brand_id=self.brand_id).count()


def get_user_cards(user_id: int) -> List[WalletCard]:
    """All of a user's wallet cards, newest first."""
    return WalletCard.query.filter_by(user_id=user_id).order_by(
        WalletCard.created_at.desc(), WalletCard.id.desc()
    ).all()


def find_user_card(user_id: int, brand_id: Optional[int] = None) -> Optional[WalletCard]:
    """The card for brand_id, or the user's most recent card when no brand is given."""
    if brand_id is not None:
        return WalletService(brand_id).get_card(user_id)
    cards = get_user_cards(user_id)
    return cards[0] if cards else None


def get_card_activation(card: WalletCard) -> Optional[Activation]:
    if not card.activation_id:
        return None
    return db.session.get(Activation, card.activation_id)


def get_wallet_updates(user_id: int, limit: int = 20, offset: int = 0) -> List[WalletUpdate]:
    return WalletUpdate.query.filter_by(user_id=user_id).order_by(
        WalletUpdate.created_at.desc(), WalletUpdate.id.desc()
    ).offset(offset).limit(limit).all()


def mark_wallet_update_read(user_id: int, update_id: int) -> Optional[WalletUpdate]:
    """Returns None when the update doesn't belong to the user."""
    update = WalletUpdate.query.filter_by(id=update_id, user_id=user_id).first()
    if not update:
        return None
    update.is_read = True
    db.session.commit()
    return update
