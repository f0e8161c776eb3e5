"""External service configurations."""

from .admin import AdminConfig
from .notifications import NotificationConfig, verify_notification_auth
from .storage import AssetStorageConfig

__all__ = [
    'AdminConfig',
    'NotificationConfig',
    'verify_notification_auth',
    'AssetStorageConfig',
]
