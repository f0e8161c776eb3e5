"""Notification sink.

Receives lifecycle notifications from the dispatcher. Mail delivery is an
external concern; this endpoint validates and logs the request.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from ...config.external_services import verify_notification_auth
from ...lifecycle.state import NotificationAction
from ..schemas import NotificationPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("")
async def receive_notification(
    body: NotificationPayload,
    authorization: Optional[str] = Header(None)
):
    """Accept one notification and hand it to the mail log."""
    if not verify_notification_auth(authorization):
        raise HTTPException(status_code=401, detail="Invalid authorization")

    try:
        action = NotificationAction(body.action)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown action: {body.action}")

    logger.info(f"Sending {action.value} notification for event \"{body.eventTitle}\" to {body.recipientEmail}")
    if body.hodMessage:
        logger.info(f"HOD message: {body.hodMessage}")

    return {
        "success": True,
        "message": f"{action.value} notification sent successfully"
    }
