"""
User, Brand and BrandAdmin models.

Accounts and brands are owned by the surrounding platform; these tables hold
only the columns the wallet engine and brand console read.
"""
from datetime import datetime
from ..extensions import db


class User(db.Model):
    """Platform user (vehicle owner or brand staff)."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(255))
    city = db.Column(db.String(100))
    role = db.Column(db.String(20), default='user')  # user, brand_admin, admin

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<User {self.email}>'

    @property
    def is_platform_admin(self) -> bool:
        return self.role == 'admin'

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'city': self.city,
            'role': self.role,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Brand(db.Model):
    """A brand running a loyalty program."""
    __tablename__ = 'brands'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False)
    logo_url = db.Column(db.String(500))
    website_url = db.Column(db.String(500))
    industry = db.Column(db.String(100))
    status = db.Column(db.String(20), default='pending')  # pending, active, suspended

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    card_templates = db.relationship('CardTemplate', backref='brand', lazy='dynamic')
    wallet_cards = db.relationship('WalletCard', backref='brand', lazy='dynamic')

    def __repr__(self):
        return f'<Brand {self.slug}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'logo_url': self.logo_url,
            'website_url': self.website_url,
            'industry': self.industry,
            'status': self.status,
        }


class BrandAdmin(db.Model):
    """Grants a user access to a brand's console."""
    __tablename__ = 'brand_admins'

    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    role = db.Column(db.String(20), default='admin')  # admin, editor
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('brand_id', 'user_id', name='uq_brand_admin_brand_user'),
    )

    def __repr__(self):
        return f'<BrandAdmin brand={self.brand_id} user={self.user_id}>'
