"""
Dashboard API endpoints.
"""
from flask import Blueprint, request, jsonify, current_app, g
from ..models import Activation, EventRSVP
from ..middleware.identity import require_user
from ..services.activity_service import get_recent_activity, get_upcoming_events
from ..services.card_progress_service import CardProgressService
from ..services.wallet_service import find_user_card

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


@dashboard_bp.route('', methods=['GET'])
@require_user
def get_dashboard():
    """
    Member dashboard overview.

    Returns:
    - userStats: activations, eventsAttended, currentTier, memberSince
    - cardProgress: currentCard and nextCards (tiers not unlocked yet), or null
    - recentActivity, upcomingEvents
    """
    user_id = g.user_id
    card = find_user_card(user_id, request.args.get('brand_id', type=int))

    activations = Activation.query.filter_by(user_id=user_id, status='verified').count()
    events_attended = EventRSVP.query.filter_by(user_id=user_id, status='going').count()

    card_progress = None
    if card:
        result = CardProgressService(card.brand_id).get_member_progress(user_id)
        card_progress = {
            'currentCard': result['card'],
            'nextCards': [template for template in result['templates'] if not template['unlocked']],
        }

    return jsonify({
        'userStats': {
            'activations': activations,
            'eventsAttended': events_attended,
            'currentTier': card.tier if card else current_app.config.get('DEFAULT_CARD_TIER', 'member'),
            'memberSince': card.created_at.isoformat() if card and card.created_at else None,
        },
        'cardProgress': card_progress,
        'recentActivity': get_recent_activity(user_id),
        'upcomingEvents': [event.to_summary() for event in get_upcoming_events(user_id)],
    })
