"""
Activity Service.

Builds the ActivitySnapshot the unlock engine evaluates, and the activity
feeds shown on the user dashboard.
"""
from datetime import datetime
from typing import Any, Dict, List
from sqlalchemy import func
from ..extensions import db
from ..models import Activation, Event, EventRSVP, WalletUpdate
from .unlock_conditions import ActivitySnapshot


class ActivityService:
    """
    Reads a user's activity with one brand.

    Usage:
        service = ActivityService(brand_id)
        snapshot = service.get_snapshot(user_id)
    """

    def __init__(self, brand_id: int):
        self.brand_id = brand_id

    def get_snapshot(self, user_id: int) -> ActivitySnapshot:
        """
        Count verified activations and 'going' RSVPs for this brand.

        Missing rows simply count as zero. Purchases are not tracked yet, so
        purchase_count and total_spend are always 0.
        """
        activations_count = Activation.query.filter_by(
            user_id=user_id,
            brand_id=self.brand_id,
            status='verified'
        ).count()

        rows = db.session.query(
            Event.type,
            func.count(EventRSVP.id)
        ).join(
            Event, EventRSVP.event_id == Event.id
        ).filter(
            EventRSVP.user_id == user_id,
            EventRSVP.status == 'going',
            Event.brand_id == self.brand_id
        ).group_by(Event.type).all()

        events_by_type = {event_type: count for event_type, count in rows if event_type}
        events_attended = sum(count for _, count in rows)

        return ActivitySnapshot(
            activations_count=activations_count,
            events_attended=events_attended,
            events_by_type=events_by_type,
        )


def get_recent_activity(user_id: int, limit: int = 10) -> List[Dict[str, Any]]:
    """
    Latest verified activations, confirmed RSVPs and card upgrades, newest first.
    """
    activations = Activation.query.filter_by(
        user_id=user_id,
        status='verified'
    ).order_by(Activation.created_at.desc()).limit(limit).all()

    rsvps = EventRSVP.query.filter_by(
        user_id=user_id,
        status='going'
    ).order_by(EventRSVP.created_at.desc()).limit(limit).all()

    upgrades = WalletUpdate.query.filter_by(
        user_id=user_id,
        type='card_upgrade'
    ).order_by(WalletUpdate.created_at.desc()).limit(limit).all()

    items = []
    for activation in activations:
        items.append({
            'id': activation.id,
            'type': 'activation',
            'title': 'Vehicle activated',
            'description': f'You activated a {activation.model or "vehicle"}',
            'createdAt': activation.created_at,
        })
    for rsvp in rsvps:
        items.append({
            'id': rsvp.id,
            'type': 'event',
            'title': 'Event confirmed',
            'description': f'You registered for {rsvp.event.title}' if rsvp.event else 'You registered for an event',
            'createdAt': rsvp.created_at,
        })
    for update in upgrades:
        items.append({
            'id': update.id,
            'type': 'card_upgrade',
            'title': update.title,
            'description': update.description,
            'createdAt': update.created_at,
        })

    items.sort(key=lambda item: item['createdAt'] or datetime.min, reverse=True)
    for item in items:
        item['createdAt'] = item['createdAt'].isoformat() if item['createdAt'] else None
    return items[:limit]


def get_upcoming_events(user_id: int, limit: int = 5) -> List[Event]:
    """Events the user is going to that have not started yet, soonest first."""
    return Event.query.join(
        EventRSVP, EventRSVP.event_id == Event.id
    ).filter(
        EventRSVP.user_id == user_id,
        EventRSVP.status == 'going',
        Event.start_at > datetime.utcnow()
    ).order_by(Event.start_at.asc()).limit(limit).all()
