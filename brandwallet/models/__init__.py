"""
Database models for BrandWallet.
Brand loyalty wallet cards, unlock conditions and the activity behind them.
"""
from .brand import User, Brand, BrandAdmin
from .activity import Activation, Event, EventRSVP
from .wallet import CardTemplate, WalletCard, WalletUpdate
from .notification import Notification, CardUnlockNotice

__all__ = [
    'User',
    'Brand',
    'BrandAdmin',
    # Activity
    'Activation',
    'Event',
    'EventRSVP',
    # Wallet
    'CardTemplate',
    'WalletCard',
    'WalletUpdate',
    # Notifications
    'Notification',
    'CardUnlockNotice',
]
