"""
CLI Commands for BrandWallet.

Usage:
    flask cards evaluate --brand-id 1              # Notify pending unlocks for a brand
    flask cards evaluate --brand-id 1 --dry-run    # Preview without notifying
    flask cards progress --brand-id 1 --user-id 42 # Show a member's tier progress
"""
from .cards import init_app as init_card_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_card_commands(app)
