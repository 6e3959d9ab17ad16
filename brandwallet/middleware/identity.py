"""
Caller Identity Middleware.

The API gateway authenticates the caller and forwards their identity in
headers:

    X-User-ID   the authenticated user
    X-Brand-ID  the brand a console request acts on

These decorators load the rows and put them on flask.g.
"""
from functools import wraps
from typing import Optional
from flask import request, g
from ..extensions import db
from ..models import Brand, BrandAdmin, User
from ..utils.errors import ErrorCode, bad_request, forbidden, not_found, unauthorized


def _header_id(name: str) -> Optional[int]:
    value = request.headers.get(name)
    if not value:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def get_user_from_request() -> Optional[User]:
    """Load the user named by X-User-ID, or None."""
    user_id = _header_id('X-User-ID')
    if user_id is None:
        return None
    return db.session.get(User, user_id)


def require_user(f):
    """
    Require an authenticated user.

    Sets g.user and g.user_id.

    Usage:
        @require_user
        def my_endpoint():
            user_id = g.user_id
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_user_from_request()
        if not user:
            return unauthorized()

        g.user = user
        g.user_id = user.id
        return f(*args, **kwargs)

    return decorated_function


def require_brand_admin(f):
    """
    Require a brand admin (or platform admin) acting on X-Brand-ID.

    Sets g.user, g.user_id, g.brand and g.brand_id.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_user_from_request()
        if not user:
            return unauthorized()

        brand_id = _header_id('X-Brand-ID')
        if brand_id is None:
            return bad_request('X-Brand-ID header is required', ErrorCode.MISSING_FIELD)

        brand = db.session.get(Brand, brand_id)
        if not brand:
            return not_found('Brand', ErrorCode.BRAND_NOT_FOUND)

        if not user.is_platform_admin:
            membership = BrandAdmin.query.filter_by(brand_id=brand.id, user_id=user.id).first()
            if not membership:
                return forbidden('You are not an admin of this brand')

        g.user = user
        g.user_id = user.id
        g.brand = brand
        g.brand_id = brand.id
        return f(*args, **kwargs)

    return decorated_function
