"""
CardTemplate, WalletCard and WalletUpdate models.
"""
from datetime import datetime
from ..extensions import db


class CardTemplate(db.Model):
    """
    Brand-authored membership tier.

    unlock_conditions holds the condition tree evaluated by the unlock engine:
    {"conditions": [{"type": "activation", "operator": "AND", "params": {...}}],
     "autoAssign": true}
    """
    __tablename__ = 'card_templates'

    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'), nullable=False, index=True)

    name = db.Column(db.String(100), nullable=False)  # 'Gold Driver'
    tier = db.Column(db.String(50), nullable=False)   # 'member', 'silver', 'gold'

    # Design attributes (opaque to the engine)
    design_config = db.Column(db.JSON, default=dict)
    logo_url = db.Column(db.String(500))
    background_gradient = db.Column(db.String(255))
    text_color = db.Column(db.String(20))
    benefits = db.Column(db.JSON, default=list)

    unlock_conditions = db.Column(db.JSON)

    display_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('brand_id', 'tier', name='uq_card_template_brand_tier'),
    )

    def __repr__(self):
        return f'<CardTemplate {self.tier}>'

    def to_dict(self):
        return {
            'id': self.id,
            'brand_id': self.brand_id,
            'name': self.name,
            'tier': self.tier,
            'design_config': self.design_config or {},
            'logo_url': self.logo_url,
            'background_gradient': self.background_gradient,
            'text_color': self.text_color,
            'benefits': self.benefits or [],
            'unlock_conditions': self.unlock_conditions,
            'display_order': self.display_order,
            'is_active': self.is_active,
        }


class WalletCard(db.Model):
    """
    A user's current membership card with a brand.
    One card per (user, brand); tier only changes through explicit assignment.
    """
    __tablename__ = 'wallet_cards'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'), nullable=False, index=True)
    card_template_id = db.Column(db.Integer, db.ForeignKey('card_templates.id'))
    activation_id = db.Column(db.Integer, db.ForeignKey('activations.id'))

    member_id = db.Column(db.String(50), nullable=False)  # ACME-0000042
    tier = db.Column(db.String(50), nullable=False, default='member')

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', backref=db.backref('wallet_cards', lazy='dynamic'))
    card_template = db.relationship('CardTemplate')

    __table_args__ = (
        db.UniqueConstraint('user_id', 'brand_id', name='uq_wallet_card_user_brand'),
    )

    def __repr__(self):
        return f'<WalletCard {self.member_id} {self.tier}>'

    def to_dict(self, include_brand=False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'brand_id': self.brand_id,
            'card_template_id': self.card_template_id,
            'activation_id': self.activation_id,
            'member_id': self.member_id,
            'tier': self.tier,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_brand:
            data['brand'] = self.brand.to_dict() if self.brand else None
        return data

    @staticmethod
    def generate_member_id(brand, user_id: int) -> str:
        """Member IDs are the brand slug plus the zero-padded user id."""
        return f'{brand.slug.upper()}-{user_id:07d}'


class WalletUpdate(db.Model):
    """Feed entry shown in the user's wallet (card upgrades, benefits)."""
    __tablename__ = 'wallet_updates'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'), nullable=False)

    type = db.Column(db.String(30), nullable=False)  # card_upgrade, benefit, announcement
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    action_url = db.Column(db.String(500))
    is_read = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<WalletUpdate {self.type} user={self.user_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'brandId': self.brand_id,
            'type': self.type,
            'title': self.title,
            'description': self.description,
            'actionUrl': self.action_url,
            'isRead': bool(self.is_read),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
