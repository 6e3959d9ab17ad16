"""
Notifications API.
"""
from flask import Blueprint, request, jsonify, g
from ..middleware.identity import require_user
from ..services.notification_service import NotificationService
from ..utils.errors import ErrorCode, not_found


notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')


@notifications_bp.route('', methods=['GET'])
@require_user
def list_notifications():
    """
    Get the user's notifications, newest first.

    Query params:
        limit: Max notifications (default 50, max 200)
        unread: 'true' to return only unread ones
    """
    limit = max(1, min(request.args.get('limit', 50, type=int), 200))
    unread_only = request.args.get('unread', 'false').lower() == 'true'

    service = NotificationService(g.user_id)
    notifications = service.get_notifications(limit=limit, unread_only=unread_only)

    return jsonify({
        'notifications': [notification.to_dict() for notification in notifications],
        'unreadCount': service.unread_count(),
    })


@notifications_bp.route('/<int:notification_id>/read', methods=['POST'])
@require_user
def mark_read(notification_id):
    notification = NotificationService(g.user_id).mark_read(notification_id)
    if not notification:
        return not_found('Notification', ErrorCode.NOT_FOUND)
    return jsonify({'message': 'Marked as read'})


@notifications_bp.route('/read-all', methods=['POST'])
@require_user
def mark_all_read():
    result = NotificationService(g.user_id).mark_all_read()
    return jsonify({'message': 'All marked as read', 'updated': result['updated']})
