"""
Tests for the `flask cards` CLI commands.
"""
from brandwallet.models import Notification


class TestCardsEvaluate:

    def test_dry_run(self, app, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)

        result = app.test_cli_runner().invoke(args=['cards', 'evaluate', '--brand-id', str(sample_brand.id), '--dry-run'])

        assert result.exit_code == 0
        assert '[DRY RUN]' in result.output
        assert 'Pending: 1 notifications' in result.output
        assert Notification.query.count() == 0

    def test_evaluate_sends_notifications(self, app, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        runner = app.test_cli_runner()

        first = runner.invoke(args=['cards', 'evaluate', '--brand-id', str(sample_brand.id)])
        second = runner.invoke(args=['cards', 'evaluate', '--brand-id', str(sample_brand.id)])

        assert 'Notified: 1 unlocks' in first.output
        assert 'Notified: 0 unlocks' in second.output

    def test_unknown_brand(self, app):
        result = app.test_cli_runner().invoke(args=['cards', 'evaluate', '--brand-id', '9999'])
        assert 'Brand 9999 not found' in result.output


class TestCardsProgress:

    def test_progress(self, app, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)

        result = app.test_cli_runner().invoke(args=[
            'cards', 'progress', '--brand-id', str(sample_brand.id), '--user-id', str(sample_user.id)
        ])

        assert result.exit_code == 0
        assert 'Silver Driver [silver]: UNLOCKED' in result.output
        assert 'Gold Driver [gold]: locked' in result.output
        assert '[x] activation: 1/1' in result.output
        assert 'manual assignment only' in result.output

    def test_progress_without_card(self, app, sample_user, sample_brand):
        result = app.test_cli_runner().invoke(args=[
            'cards', 'progress', '--brand-id', str(sample_brand.id), '--user-id', str(sample_user.id)
        ])
        assert 'has no wallet card' in result.output
