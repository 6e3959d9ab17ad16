"""
Business logic services for BrandWallet.
"""
from .activity_service import ActivityService
from .card_template_service import CardTemplateService
from .wallet_service import WalletService
from .notification_service import NotificationService, create_notification
from .unlock_notifier import UnlockNotifier
from .card_progress_service import CardProgressService

__all__ = [
    'ActivityService',
    'CardTemplateService',
    'WalletService',
    'NotificationService',
    'create_notification',
    'UnlockNotifier',
    'CardProgressService',
]
