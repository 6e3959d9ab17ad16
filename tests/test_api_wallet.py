"""
Tests for the Wallet API endpoints.
"""
from brandwallet.models import Notification


class TestWalletAuth:

    def test_requires_user(self, client):
        response = client.get('/api/wallet/card')
        assert response.status_code == 401
        assert response.get_json()['error']['code'] == 'AUTH_REQUIRED'

    def test_unknown_user(self, client):
        response = client.get('/api/wallet/card', headers={'X-User-ID': '9999'})
        assert response.status_code == 401


class TestGetCard:
    """Tests for GET /api/wallet/card."""

    def test_no_card(self, client, user_headers):
        response = client.get('/api/wallet/card', headers=user_headers)
        assert response.status_code == 200
        assert response.get_json() == {'card': None}

    def test_card_with_brand(self, client, user_headers, sample_card):
        response = client.get('/api/wallet/card', headers=user_headers)
        data = response.get_json()['card']

        assert data['tier'] == 'member'
        assert data['brand']['slug'] == 'acme'
        assert data['card_template']['name'] == 'Member'
        assert data['activation'] is None


class TestGetTemplates:
    """Tests for GET /api/wallet/templates."""

    def test_no_card(self, client, user_headers):
        response = client.get('/api/wallet/templates', headers=user_headers)
        assert response.get_json() == {'templates': [], 'userProgress': None}

    def test_progress(self, client, user_headers, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)

        response = client.get('/api/wallet/templates', headers=user_headers)
        assert response.status_code == 200
        data = response.get_json()

        tiers = {t['tier']: t for t in data['templates']}
        assert tiers['silver']['unlocked'] is True
        assert tiers['silver']['progress'][0]['met'] is True
        assert tiers['gold']['unlocked'] is False
        assert tiers['vip']['progress'] is None
        assert data['userProgress']['activations'] == 1
        assert data['userProgress']['purchases'] == 0

    def test_notifies_once_across_requests(self, client, user_headers, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)

        client.get('/api/wallet/templates', headers=user_headers)
        client.get('/api/wallet/templates', headers=user_headers)

        assert Notification.query.filter_by(user_id=sample_user.id, type='card_unlock').count() == 1


class TestWalletUpdates:
    """Tests for wallet updates feed."""

    def test_updates_after_assignment(self, client, user_headers, admin_headers, sample_user, sample_card, sample_templates):
        client.post(
            f'/api/brand/wallet/members/{sample_user.id}/assign',
            json={'template_id': sample_templates['gold'].id},
            headers=admin_headers
        )

        response = client.get('/api/wallet/updates?limit=1', headers=user_headers)
        data = response.get_json()
        assert len(data['updates']) == 1
        assert data['updates'][0]['type'] == 'card_upgrade'
        assert data['hasMore'] is True

        update_id = data['updates'][0]['id']
        response = client.patch(f'/api/wallet/updates/{update_id}/read', headers=user_headers)
        assert response.status_code == 200

    def test_mark_missing_update(self, client, user_headers):
        response = client.patch('/api/wallet/updates/9999/read', headers=user_headers)
        assert response.status_code == 404
