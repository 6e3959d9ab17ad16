"""
Middleware package for BrandWallet.
"""
from .identity import require_user, require_brand_admin, get_user_from_request
