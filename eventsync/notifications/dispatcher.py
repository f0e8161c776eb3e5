"""Best-effort delivery of lifecycle notifications.

The dispatcher runs after a transition has committed. Whatever happens on
the wire is logged and swallowed: a failed notification never reaches the
actor and never undoes the transition.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..config.external_services import NotificationConfig
from ..errors import DispatchError
from ..lifecycle.state import NotificationAction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationRequest:
    """
    A notification about one event transition.

    Fields:
        event_id: Id of the event that changed
        action: 'approved', 'rejected' or 'suggested'
        recipient_email: Contact address of the counterpart
        event_title: Title of the event
        message: Free text from the approver (optional)
    """
    event_id: str
    action: NotificationAction
    recipient_email: str
    event_title: str
    message: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON body understood by the notification endpoint."""
        payload = {
            'eventId': self.event_id,
            'action': NotificationAction(self.action).value,
            'recipientEmail': self.recipient_email,
            'eventTitle': self.event_title,
        }
        if self.message:
            payload['hodMessage'] = self.message
        return payload


class NotificationDispatcher:
    """Fire-and-forget HTTP client for the notification endpoint."""

    def __init__(self, config: Optional[NotificationConfig] = None, http: Optional[requests.Session] = None):
        self.config = config or NotificationConfig()
        self.http = http or requests.Session()

    def dispatch(self, request: NotificationRequest) -> bool:
        """
        Send one notification.

        Returns:
            bool: True if the endpoint accepted it, False otherwise. Never raises.
        """
        action = NotificationAction(request.action).value
        if not self.config.enabled:
            logger.debug(f"Notifications disabled, dropping {action} for event {request.event_id}")
            return False

        try:
            self.config.validate()
            response = self.http.post(
                self.config.url,
                json=request.to_payload(),
                headers=self.config.headers(),
                timeout=self.config.timeout
            )
            if not 200 <= response.status_code < 300:
                raise DispatchError(
                    f"Notification endpoint returned {response.status_code}: {response.text[:200]}"
                )
        except (requests.RequestException, ValueError, DispatchError) as e:
            logger.error(f"Failed to send {action} notification for event {request.event_id}: {e}")
            return False

        logger.info(f"Sent {action} notification for event {request.event_id} to {request.recipient_email}")
        return True
