"""
Brand Console Wallet API.

Endpoints for brand admins:
- Card template CRUD (design and unlock conditions)
- Wallet member list
- A member's card progress
- Manual card tier assignment
"""
from flask import Blueprint, request, jsonify, g
from ..middleware.identity import require_brand_admin
from ..services.card_progress_service import CardProgressService
from ..services.card_template_service import CardTemplateService
from ..services.wallet_service import WalletService
from ..utils.errors import ErrorCode, bad_request, error_response


brand_wallet_bp = Blueprint('brand_wallet', __name__, url_prefix='/api/brand')


# ==================== Card Templates ====================

@brand_wallet_bp.route('/card-templates', methods=['GET'])
@require_brand_admin
def list_card_templates():
    """
    List the brand's card templates in display order.

    Query params:
        include_inactive: 'true' to include deactivated templates
    """
    include_inactive = request.args.get('include_inactive', 'false').lower() == 'true'
    templates = CardTemplateService(g.brand_id).get_templates(include_inactive=include_inactive)
    return jsonify({'templates': [template.to_dict() for template in templates]})


@brand_wallet_bp.route('/card-templates', methods=['POST'])
@require_brand_admin
def create_card_template():
    """
    Create a card template.

    Request body:
    {
        "name": "Gold Driver",
        "tier": "gold",
        "backgroundGradient": "linear-gradient(...)",
        "benefits": ["Priority service"],
        "unlockConditions": {
            "conditions": [{"type": "activation", "operator": "AND", "params": {"minQuantity": 1}}],
            "autoAssign": true
        },
        "displayOrder": 2
    }
    """
    data = request.get_json(silent=True) or {}
    template = CardTemplateService(g.brand_id).create_template(data)
    return jsonify({'template': template.to_dict()}), 201


@brand_wallet_bp.route('/card-templates/<int:template_id>', methods=['PATCH'])
@require_brand_admin
def update_card_template(template_id):
    data = request.get_json(silent=True) or {}
    template = CardTemplateService(g.brand_id).update_template(template_id, data)
    return jsonify({'template': template.to_dict()})


@brand_wallet_bp.route('/card-templates/<int:template_id>', methods=['DELETE'])
@require_brand_admin
def delete_card_template(template_id):
    """Templates still used by wallet cards are deactivated instead."""
    result = CardTemplateService(g.brand_id).delete_template(template_id)
    return jsonify(result)


# ==================== Wallet Members ====================

@brand_wallet_bp.route('/wallet/members', methods=['GET'])
@require_brand_admin
def list_wallet_members():
    """
    List the brand's wallet members with activity counts.

    Query params:
        limit: Page size (default 100, max 500)
        offset: Rows to skip
    """
    limit = max(1, min(request.args.get('limit', 100, type=int), 500))
    offset = max(0, request.args.get('offset', 0, type=int))

    service = WalletService(g.brand_id)
    return jsonify({
        'members': service.list_members(limit=limit, offset=offset),
        'total': service.count_members(),
    })


@brand_wallet_bp.route('/wallet/members/<int:user_id>/progress', methods=['GET'])
@require_brand_admin
def get_member_progress(user_id):
    """A member's progress toward every tier. Never sends notifications."""
    result = CardProgressService(g.brand_id).get_member_progress(user_id, notify=False)
    return jsonify({
        'card': result['card'],
        'templates': result['templates'],
        'userProgress': result['user_progress'],
    })


@brand_wallet_bp.route('/wallet/members/<int:user_id>/assign', methods=['POST'])
@require_brand_admin
def assign_member_card(user_id):
    """
    Assign a card tier to a member.

    Request body:
    {
        "template_id": 3,
        "reason": "Track day winner"  # optional
    }
    """
    data = request.get_json(silent=True) or {}
    template_id = data.get('template_id')
    if not isinstance(template_id, int) or isinstance(template_id, bool):
        return bad_request('template_id is required', ErrorCode.MISSING_FIELD)

    result = WalletService(g.brand_id).assign_card(
        user_id=user_id,
        template_id=template_id,
        assigned_by=g.user_id,
        reason=data.get('reason'),
    )

    if not result['success']:
        if result.get('code') == ErrorCode.DATABASE_ERROR:
            return error_response(result['error'], ErrorCode.DATABASE_ERROR, 500)
        status = 404 if 'not found' in result['error'] else 400
        return jsonify(result), status
    return jsonify(result)
