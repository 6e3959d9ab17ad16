"""
Tests for WalletService: current tier, manual assignment and members.
"""
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brandwallet.models import WalletCard, WalletUpdate
from brandwallet.services.wallet_service import (
    WalletService,
    find_user_card,
    get_wallet_updates,
    mark_wallet_update_read,
)


class TestCurrentTier:

    def test_current_tier(self, sample_user, sample_brand, sample_card):
        assert WalletService(sample_brand.id).get_current_tier(sample_user.id) == 'member'

    def test_no_card(self, sample_user, sample_brand):
        assert WalletService(sample_brand.id).get_current_tier(sample_user.id) is None

    def test_member_id_format(self, sample_card, sample_user):
        assert sample_card.member_id == f'ACME-{sample_user.id:07d}'

    def test_find_user_card_without_brand(self, sample_user, sample_card):
        assert find_user_card(sample_user.id).id == sample_card.id


class TestAssignCard:
    """Tests for WalletService.assign_card()."""

    def test_assign_manual_only_tier(self, sample_user, sample_admin, sample_brand, sample_card, sample_templates):
        vip = sample_templates['vip']
        result = WalletService(sample_brand.id).assign_card(sample_user.id, vip.id, assigned_by=sample_admin.id)

        assert result['success'] is True
        assert result['changed'] is True
        assert result['previous_tier'] == 'member'
        assert result['new_tier'] == 'vip'

        card = WalletCard.query.filter_by(user_id=sample_user.id).one()
        assert card.tier == 'vip'
        assert card.card_template_id == vip.id

    def test_assign_creates_wallet_update(self, sample_user, sample_brand, sample_card, sample_templates):
        WalletService(sample_brand.id).assign_card(sample_user.id, sample_templates['gold'].id)

        update = WalletUpdate.query.filter_by(user_id=sample_user.id).one()
        assert update.type == 'card_upgrade'
        assert 'Gold Driver' in update.title

    def test_assign_same_tier_is_noop(self, sample_user, sample_brand, sample_card, sample_templates):
        result = WalletService(sample_brand.id).assign_card(sample_user.id, sample_templates['member'].id)

        assert result['success'] is True
        assert result['changed'] is False
        assert WalletUpdate.query.count() == 0

    def test_assign_without_card(self, sample_user, sample_brand, sample_templates):
        result = WalletService(sample_brand.id).assign_card(sample_user.id, sample_templates['gold'].id)
        assert result['success'] is False
        assert 'not found' in result['error']

    def test_assign_inactive_template(self, db_session, sample_user, sample_brand, sample_card, sample_templates):
        sample_templates['gold'].is_active = False
        db_session.commit()

        result = WalletService(sample_brand.id).assign_card(sample_user.id, sample_templates['gold'].id)
        assert result['success'] is False

    def test_assign_commit_failure_rolls_back(self, sample_user, sample_brand, sample_card, sample_templates):
        with patch.object(Session, 'commit', side_effect=SQLAlchemyError('connection lost')):
            result = WalletService(sample_brand.id).assign_card(sample_user.id, sample_templates['gold'].id)

        assert result == {'success': False, 'error': 'Failed to assign card', 'code': 'DATABASE_ERROR'}
        assert WalletCard.query.filter_by(user_id=sample_user.id).one().tier == 'member'
        assert WalletUpdate.query.count() == 0


class TestMembersAndUpdates:

    def test_list_members(self, sample_user, sample_brand, sample_card, add_activation, add_rsvp):
        add_activation(sample_user, sample_brand)
        add_rsvp(sample_user, sample_brand)

        members = WalletService(sample_brand.id).list_members()

        assert len(members) == 1
        assert members[0]['user']['email'] == 'driver@example.com'
        assert members[0]['card']['card_name'] == 'Member'
        assert members[0]['activations_count'] == 1
        assert members[0]['events_count'] == 1

    def test_mark_update_read(self, sample_user, sample_brand, sample_card, sample_templates):
        WalletService(sample_brand.id).assign_card(sample_user.id, sample_templates['silver'].id)
        update = get_wallet_updates(sample_user.id)[0]

        assert mark_wallet_update_read(sample_user.id, update.id).is_read is True
        assert mark_wallet_update_read(sample_user.id + 1, update.id) is None
