"""
Utility modules for BrandWallet.
"""
from .logging_config import setup_logging
from .errors import (
    ErrorCode,
    error_response,
    bad_request,
    unauthorized,
    forbidden,
    not_found,
)
from .exceptions import (
    BrandWalletError,
    NotFoundError,
    CardTemplateNotFoundError,
    WalletCardNotFoundError,
    ValidationError,
    DuplicateError,
)
