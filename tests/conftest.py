"""
Pytest configuration and fixtures for BrandWallet tests.
"""
from datetime import datetime, timedelta

import pytest

from brandwallet import create_app
from brandwallet.extensions import db
from brandwallet.models import (
    Activation,
    Brand,
    BrandAdmin,
    CardTemplate,
    Event,
    EventRSVP,
    User,
    WalletCard,
)


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    return db.session


# ==================== Sample Data ====================

@pytest.fixture
def sample_brand(db_session):
    brand = Brand(name='Acme Motors', slug='acme', industry='automotive', status='active')
    db_session.add(brand)
    db_session.commit()
    return brand


@pytest.fixture
def sample_user(db_session):
    user = User(email='driver@example.com', name='Test Driver', city='Madrid')
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def sample_admin(db_session, sample_brand):
    """A brand admin of sample_brand."""
    user = User(email='admin@acme.example.com', name='Brand Admin', role='brand_admin')
    db_session.add(user)
    db_session.commit()

    db_session.add(BrandAdmin(brand_id=sample_brand.id, user_id=user.id))
    db_session.commit()
    return user


@pytest.fixture
def sample_templates(db_session, sample_brand):
    """
    Four tiers in display order:
    - member: no conditions (manual-only)
    - silver: 1 activation
    - gold: 1 activation AND 2 events
    - vip: 1 activation, but autoAssign is off
    """
    templates = [
        CardTemplate(
            brand_id=sample_brand.id,
            name='Member',
            tier='member',
            unlock_conditions={'conditions': [], 'autoAssign': True},
            display_order=0,
        ),
        CardTemplate(
            brand_id=sample_brand.id,
            name='Silver Driver',
            tier='silver',
            unlock_conditions={
                'conditions': [
                    {'type': 'activation', 'operator': 'AND', 'params': {'minQuantity': 1}},
                ],
                'autoAssign': True,
            },
            display_order=1,
        ),
        CardTemplate(
            brand_id=sample_brand.id,
            name='Gold Driver',
            tier='gold',
            unlock_conditions={
                'conditions': [
                    {'type': 'activation', 'operator': 'AND', 'params': {'minQuantity': 1}},
                    {'type': 'event', 'operator': 'AND', 'params': {'minEvents': 2}},
                ],
                'autoAssign': True,
            },
            display_order=2,
        ),
        CardTemplate(
            brand_id=sample_brand.id,
            name='VIP',
            tier='vip',
            unlock_conditions={
                'conditions': [
                    {'type': 'activation', 'operator': 'AND', 'params': {'minQuantity': 1}},
                ],
                'autoAssign': False,
            },
            display_order=3,
        ),
    ]
    db_session.add_all(templates)
    db_session.commit()
    return {template.tier: template for template in templates}


@pytest.fixture
def sample_card(db_session, sample_user, sample_brand, sample_templates):
    """sample_user holds the member card."""
    card = WalletCard(
        user_id=sample_user.id,
        brand_id=sample_brand.id,
        card_template_id=sample_templates['member'].id,
        member_id=WalletCard.generate_member_id(sample_brand, sample_user.id),
        tier='member',
    )
    db_session.add(card)
    db_session.commit()
    return card


@pytest.fixture
def add_activation(db_session):
    """Factory: add_activation(user, brand, status='verified')."""
    def _add(user, brand, status='verified', model='Roadster'):
        activation = Activation(
            user_id=user.id,
            brand_id=brand.id,
            model=model,
            status=status,
            verified_at=datetime.utcnow() if status == 'verified' else None,
        )
        db_session.add(activation)
        db_session.commit()
        return activation
    return _add


@pytest.fixture
def add_rsvp(db_session):
    """Factory: add_rsvp(user, brand, event_type='meetup', status='going')."""
    def _add(user, brand, event_type='meetup', status='going', days_ahead=-7):
        event = Event(
            brand_id=brand.id,
            type=event_type,
            title=f'{brand.name} {event_type}',
            city='Madrid',
            start_at=datetime.utcnow() + timedelta(days=days_ahead),
        )
        db_session.add(event)
        db_session.commit()

        rsvp = EventRSVP(event_id=event.id, user_id=user.id, status=status)
        db_session.add(rsvp)
        db_session.commit()
        return rsvp
    return _add


# ==================== Headers ====================

@pytest.fixture
def user_headers(sample_user):
    return {'X-User-ID': str(sample_user.id), 'Content-Type': 'application/json'}


@pytest.fixture
def admin_headers(sample_admin, sample_brand):
    return {
        'X-User-ID': str(sample_admin.id),
        'X-Brand-ID': str(sample_brand.id),
        'Content-Type': 'application/json',
    }
