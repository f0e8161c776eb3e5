"""Notification service configuration."""

import os
from typing import Dict
from dataclasses import dataclass


@dataclass
class NotificationConfig:
    """Notification dispatcher configuration settings."""

    # Endpoint receiving NotificationRequest JSON
    url: str = ""
    api_key: str = ""
    timeout: float = 10.0
    enabled: bool = True

    def __post_init__(self):
        """Load settings from environment if not provided."""
        if not self.url:
            self.url = os.environ.get('NOTIFICATION_URL', '')
        if not self.api_key:
            self.api_key = os.environ.get('NOTIFICATION_API_KEY', '')
        if os.environ.get('NOTIFICATION_TIMEOUT'):
            self.timeout = float(os.environ['NOTIFICATION_TIMEOUT'])
        if os.environ.get('NOTIFICATIONS_ENABLED', '').lower() == 'false':
            self.enabled = False

    def validate(self) -> bool:
        """Validate the configuration."""
        if self.enabled and not self.url:
            raise ValueError("NOTIFICATION_URL environment variable is required when notifications are enabled")
        return True

    def headers(self) -> Dict[str, str]:
        """Request headers for the notification endpoint."""
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f"Bearer {self.api_key}"
        return headers


def verify_notification_auth(auth_header: str) -> bool:
    """Verify the authorization header on the notification sink."""
    config = NotificationConfig()
    if not config.api_key:
        return True
    return bool(auth_header and auth_header == f"Bearer {config.api_key}")
