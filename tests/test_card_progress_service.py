"""
Tests for CardProgressService.

Tests cover:
- Member progress across all tiers from one snapshot
- Notifications on newly unlocked tiers (once)
- Notification failures never change the progress result
- Batch evaluation for the CLI
"""
from unittest.mock import patch

import pytest

from brandwallet.models import CardUnlockNotice, Notification, WalletCard
from brandwallet.services.card_progress_service import CardProgressService
from brandwallet.utils.exceptions import WalletCardNotFoundError


def by_tier(result):
    return {entry['tier']: entry for entry in result['templates']}


class TestGetMemberProgress:
    """Tests for CardProgressService.get_member_progress()."""

    def test_no_card(self, sample_user, sample_brand, sample_templates):
        with pytest.raises(WalletCardNotFoundError):
            CardProgressService(sample_brand.id).get_member_progress(sample_user.id)

    def test_new_member(self, sample_user, sample_brand, sample_card):
        result = CardProgressService(sample_brand.id).get_member_progress(sample_user.id)
        tiers = by_tier(result)

        assert [entry['tier'] for entry in result['templates']] == ['member', 'silver', 'gold', 'vip']
        assert tiers['member']['unlocked'] is True
        assert tiers['member']['progress'] is None
        assert tiers['silver']['unlocked'] is False
        assert tiers['vip']['progress'] is None
        assert result['user_progress']['activations'] == 0
        assert result['card']['tier'] == 'member'

    def test_progress_reflects_activity(self, sample_user, sample_brand, sample_card, add_activation, add_rsvp):
        add_activation(sample_user, sample_brand)
        add_rsvp(sample_user, sample_brand)

        tiers = by_tier(CardProgressService(sample_brand.id).get_member_progress(sample_user.id))

        assert tiers['silver']['unlocked'] is True
        assert tiers['gold']['unlocked'] is False
        assert [c['met'] for c in tiers['gold']['progress']] == [True, False]
        assert tiers['gold']['progress'][1]['current'] == 1

    def test_inactive_templates_excluded(self, db_session, sample_user, sample_brand, sample_card, sample_templates):
        sample_templates['vip'].is_active = False
        db_session.commit()

        result = CardProgressService(sample_brand.id).get_member_progress(sample_user.id)
        assert 'vip' not in by_tier(result)

    def test_evaluation_does_not_change_tier(self, sample_user, sample_brand, sample_card, add_activation, add_rsvp):
        add_activation(sample_user, sample_brand)
        add_rsvp(sample_user, sample_brand)
        add_rsvp(sample_user, sample_brand)

        CardProgressService(sample_brand.id).get_member_progress(sample_user.id, notify=True)

        card = WalletCard.query.filter_by(user_id=sample_user.id).one()
        assert card.tier == 'member'

    def test_no_notifications_without_notify(self, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        result = CardProgressService(sample_brand.id).get_member_progress(sample_user.id)

        assert result['notifications_sent'] == 0
        assert Notification.query.count() == 0


class TestProgressNotifications:
    """Notifications sent while evaluating progress."""

    def test_notifies_once(self, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        service = CardProgressService(sample_brand.id)

        first = service.get_member_progress(sample_user.id, notify=True)
        second = service.get_member_progress(sample_user.id, notify=True)

        assert first['notifications_sent'] == 1
        assert second['notifications_sent'] == 0
        assert Notification.query.filter_by(user_id=sample_user.id, type='card_unlock').count() == 1

    def test_new_unlock_later_is_notified(self, sample_user, sample_brand, sample_card, add_activation, add_rsvp):
        add_activation(sample_user, sample_brand)
        service = CardProgressService(sample_brand.id)
        service.get_member_progress(sample_user.id, notify=True)

        add_rsvp(sample_user, sample_brand)
        add_rsvp(sample_user, sample_brand)
        result = service.get_member_progress(sample_user.id, notify=True)

        assert result['notifications_sent'] == 1
        notified = {notice.tier for notice in CardUnlockNotice.query.all()}
        assert notified == {'silver', 'gold'}

    def test_manual_only_tier_never_notified(self, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        CardProgressService(sample_brand.id).get_member_progress(sample_user.id, notify=True)

        assert CardUnlockNotice.query.filter_by(tier='vip').count() == 0

    def test_disabled_by_config(self, app, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        app.config['CARD_UNLOCK_NOTIFICATIONS_ENABLED'] = False

        result = CardProgressService(sample_brand.id).get_member_progress(sample_user.id, notify=True)

        assert result['notifications_sent'] == 0
        assert Notification.query.count() == 0

    def test_notifier_failure_is_isolated(self, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        service = CardProgressService(sample_brand.id)
        expected = service.get_member_progress(sample_user.id)

        with patch(
            'brandwallet.services.card_progress_service.UnlockNotifier.notify_new_unlocks',
            side_effect=RuntimeError('notification sink unavailable')
        ):
            result = service.get_member_progress(sample_user.id, notify=True)

        assert result['templates'] == expected['templates']
        assert result['notifications_sent'] == 0
        assert Notification.query.count() == 0


class TestEvaluateBrand:
    """Tests for CardProgressService.evaluate_brand()."""

    def test_dry_run_writes_nothing(self, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)

        result = CardProgressService(sample_brand.id).evaluate_brand(dry_run=True)

        assert result['checked'] == 1
        assert result['pending'] == 1
        assert result['notified'] == 0
        assert Notification.query.count() == 0

    def test_run_notifies_and_is_rerunnable(self, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        service = CardProgressService(sample_brand.id)

        first = service.evaluate_brand()
        second = service.evaluate_brand()

        assert first['notified'] == 1
        assert second['notified'] == 0
        assert second['errors'] == []

    def test_filter_by_user(self, sample_user, sample_brand, sample_card):
        result = CardProgressService(sample_brand.id).evaluate_brand(user_ids=[sample_user.id + 100])
        assert result['checked'] == 0
