"""
Tests for ActivityService snapshots and dashboard activity feeds.
"""
from brandwallet.extensions import db
from brandwallet.models import Brand, WalletUpdate
from brandwallet.services.activity_service import (
    ActivityService,
    get_recent_activity,
    get_upcoming_events,
)


class TestActivitySnapshot:
    """Tests for ActivityService.get_snapshot()."""

    def test_no_activity(self, sample_user, sample_brand):
        snapshot = ActivityService(sample_brand.id).get_snapshot(sample_user.id)
        assert snapshot.activations_count == 0
        assert snapshot.events_attended == 0
        assert dict(snapshot.events_by_type) == {}

    def test_counts_only_verified_activations(self, sample_user, sample_brand, add_activation):
        add_activation(sample_user, sample_brand, status='verified')
        add_activation(sample_user, sample_brand, status='pending')
        add_activation(sample_user, sample_brand, status='rejected')

        snapshot = ActivityService(sample_brand.id).get_snapshot(sample_user.id)
        assert snapshot.activations_count == 1

    def test_counts_going_rsvps_by_type(self, sample_user, sample_brand, add_rsvp):
        add_rsvp(sample_user, sample_brand, event_type='meetup')
        add_rsvp(sample_user, sample_brand, event_type='meetup')
        add_rsvp(sample_user, sample_brand, event_type='track_day')
        add_rsvp(sample_user, sample_brand, event_type='launch', status='interested')

        snapshot = ActivityService(sample_brand.id).get_snapshot(sample_user.id)
        assert snapshot.events_attended == 3
        assert snapshot.events_of_type('meetup') == 2
        assert snapshot.events_of_type('track_day') == 1
        assert snapshot.events_of_type('launch') == 0

    def test_scoped_to_brand(self, db_session, sample_user, sample_brand, add_activation, add_rsvp):
        other = Brand(name='Other Motors', slug='other')
        db_session.add(other)
        db_session.commit()

        add_activation(sample_user, other)
        add_rsvp(sample_user, other)

        snapshot = ActivityService(sample_brand.id).get_snapshot(sample_user.id)
        assert snapshot.activations_count == 0
        assert snapshot.events_attended == 0

    def test_purchases_not_tracked(self, sample_user, sample_brand):
        snapshot = ActivityService(sample_brand.id).get_snapshot(sample_user.id)
        assert snapshot.purchase_count == 0
        assert snapshot.total_spend == 0


class TestDashboardFeeds:
    """Tests for recent activity and upcoming events."""

    def test_recent_activity_mixes_sources(self, sample_user, sample_brand, add_activation, add_rsvp):
        add_activation(sample_user, sample_brand, model='Roadster')
        add_rsvp(sample_user, sample_brand)
        db.session.add(WalletUpdate(
            user_id=sample_user.id,
            brand_id=sample_brand.id,
            type='card_upgrade',
            title='Your card is now Gold Driver',
        ))
        db.session.commit()

        items = get_recent_activity(sample_user.id)
        assert {item['type'] for item in items} == {'activation', 'event', 'card_upgrade'}
        activation = next(item for item in items if item['type'] == 'activation')
        assert activation['description'] == 'You activated a Roadster'

    def test_recent_activity_limit(self, sample_user, sample_brand, add_activation):
        for _ in range(4):
            add_activation(sample_user, sample_brand)
        assert len(get_recent_activity(sample_user.id, limit=2)) == 2

    def test_upcoming_events_only_future(self, sample_user, sample_brand, add_rsvp):
        add_rsvp(sample_user, sample_brand, event_type='meetup', days_ahead=-3)
        future = add_rsvp(sample_user, sample_brand, event_type='track_day', days_ahead=5)

        events = get_upcoming_events(sample_user.id)
        assert [event.id for event in events] == [future.event_id]
