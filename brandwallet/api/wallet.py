"""
Wallet API.

The member's side of the loyalty wallet:
- Their wallet card
- Progress toward every card tier (sends unlock notifications)
- The wallet updates feed
"""
from flask import Blueprint, request, jsonify, g
from ..middleware.identity import require_user
from ..services.card_progress_service import CardProgressService
from ..services.wallet_service import (
    find_user_card,
    get_card_activation,
    get_wallet_updates,
    mark_wallet_update_read,
)
from ..utils.errors import ErrorCode, not_found


wallet_bp = Blueprint('wallet', __name__, url_prefix='/api/wallet')


@wallet_bp.route('/card', methods=['GET'])
@require_user
def get_card():
    """
    Get the user's wallet card with its brand.

    Query params:
        brand_id: Card for a specific brand (default: most recent card)
    """
    card = find_user_card(g.user_id, request.args.get('brand_id', type=int))
    if not card:
        return jsonify({'card': None})

    data = card.to_dict(include_brand=True)
    data['card_template'] = card.card_template.to_dict() if card.card_template else None

    activation = get_card_activation(card)
    data['activation'] = activation.to_dict() if activation else None

    return jsonify({'card': data})


@wallet_bp.route('/templates', methods=['GET'])
@require_user
def get_templates():
    """
    Get progress toward every card tier of the card's brand.

    Tiers that became unlocked since the last check trigger a one-time
    notification.

    Returns:
    {
        "templates": [{..., "progress": [...] | null, "unlocked": bool}],
        "userProgress": {"activations": 1, "events": 2, "purchases": 0, ...}
    }
    """
    card = find_user_card(g.user_id, request.args.get('brand_id', type=int))
    if not card:
        return jsonify({'templates': [], 'userProgress': None})

    result = CardProgressService(card.brand_id).get_member_progress(g.user_id, notify=True)

    return jsonify({
        'templates': result['templates'],
        'userProgress': result['user_progress'],
    })


@wallet_bp.route('/updates', methods=['GET'])
@require_user
def list_updates():
    """
    Wallet updates feed, newest first.

    Query params:
        limit: Page size (default 20, max 100)
        offset: Rows to skip
    """
    limit = max(1, min(request.args.get('limit', 20, type=int), 100))
    offset = max(0, request.args.get('offset', 0, type=int))

    updates = get_wallet_updates(g.user_id, limit=limit, offset=offset)

    return jsonify({
        'updates': [update.to_dict() for update in updates],
        'hasMore': len(updates) == limit,
    })


@wallet_bp.route('/updates/<int:update_id>/read', methods=['PATCH'])
@require_user
def mark_update_read(update_id):
    update = mark_wallet_update_read(g.user_id, update_id)
    if not update:
        return not_found('Wallet update', ErrorCode.NOT_FOUND)
    return jsonify({'message': 'Update marked as read'})
