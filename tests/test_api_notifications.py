"""
Tests for the Notifications API.
"""
from brandwallet.services.notification_service import create_notification


class TestNotificationsApi:

    def test_list_empty(self, client, user_headers):
        response = client.get('/api/notifications', headers=user_headers)
        assert response.status_code == 200
        assert response.get_json() == {'notifications': [], 'unreadCount': 0}

    def test_unlock_notification_listed(self, client, user_headers, sample_user, sample_brand, sample_card, add_activation):
        add_activation(sample_user, sample_brand)
        client.get('/api/wallet/templates', headers=user_headers)

        data = client.get('/api/notifications', headers=user_headers).get_json()
        assert data['unreadCount'] == 1
        notification = data['notifications'][0]
        assert notification['type'] == 'card_unlock'
        assert notification['actionUrl'] == '/wallet'
        assert notification['isRead'] is False

    def test_mark_read(self, client, user_headers, sample_user):
        notification = create_notification(sample_user.id, 'announcement', 'Hello', 'Welcome aboard')

        response = client.post(f'/api/notifications/{notification.id}/read', headers=user_headers)
        assert response.status_code == 200

        data = client.get('/api/notifications', headers=user_headers).get_json()
        assert data['notifications'][0]['isRead'] is True

    def test_mark_read_other_users_notification(self, client, user_headers, sample_user):
        notification = create_notification(sample_user.id + 1, 'announcement', 'Hi', 'Not yours')
        response = client.post(f'/api/notifications/{notification.id}/read', headers=user_headers)
        assert response.status_code == 404

    def test_mark_all_read(self, client, user_headers, sample_user):
        for index in range(3):
            create_notification(sample_user.id, 'announcement', f'News {index}', 'Body')

        response = client.post('/api/notifications/read-all', headers=user_headers)
        assert response.get_json()['updated'] == 3

        data = client.get('/api/notifications?unread=true', headers=user_headers).get_json()
        assert data['notifications'] == []
