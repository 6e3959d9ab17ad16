"""
Custom exceptions for BrandWallet business logic.

These exceptions provide more specific error handling than generic Exception,
allowing for better error messages and appropriate HTTP status codes.
"""


class BrandWalletError(Exception):
    """Base exception for all BrandWallet business logic errors."""

    status_code = 400

    def __init__(self, message: str, code: str = "BRANDWALLET_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(BrandWalletError):
    """Resource not found."""

    status_code = 404

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with ID {identifier} not found"
        code = resource.upper().replace(' ', '_')
        super().__init__(message, f"{code}_NOT_FOUND")


class CardTemplateNotFoundError(NotFoundError):
    """Card template not found (or belongs to another brand)."""

    def __init__(self, identifier=None):
        super().__init__("Card template", identifier)


class WalletCardNotFoundError(NotFoundError):
    """User holds no wallet card with the brand."""

    def __init__(self, identifier=None):
        super().__init__("Wallet card", identifier)


class ValidationError(BrandWalletError):
    """Invalid input data."""

    def __init__(self, message: str, field: str = None, errors: list = None):
        self.field = field
        self.errors = errors or []
        code = f"INVALID_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)


class DuplicateError(BrandWalletError):
    """Resource already exists."""

    status_code = 409

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} already exists"
        if identifier:
            message = f"{resource} with {identifier} already exists"
        super().__init__(message, "DUPLICATE_ENTRY")

