"""Handler for event submission and lifecycle commands.

This is the trusted boundary between actors and the event store: every
command is checked by the lifecycle engine here before anything is written,
and notifications are only built once the write has committed.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .auth.identity import IdentityProvider
from .config.categories import Category
from .db.event_store import EventDraft, EventStore
from .errors import PermissionDeniedError
from .lifecycle import (
    AcceptSuggestion,
    Actor,
    Approve,
    EventSnapshot,
    EventStatus,
    MarkPending,
    ProposeNewTime,
    Reject,
    Role,
    apply,
)
from .notifications.dispatcher import NotificationDispatcher, NotificationRequest
from .storage.assets import AssetStore, AssetUploadError, poster_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PosterUpload:
    """A poster file sent along with a new event."""

    filename: str
    content: bytes


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a committed lifecycle command.

    Fields:
        event: The event as committed
        notification: Notification to dispatch, if the transition has one
    """
    event: EventSnapshot
    notification: Optional[NotificationRequest] = None


class EventService:
    """Event submission and the five lifecycle commands."""

    def __init__(
        self,
        store: EventStore,
        identity: IdentityProvider,
        dispatcher: Optional[NotificationDispatcher] = None,
        assets: Optional[AssetStore] = None
    ):
        self.store = store
        self.identity = identity
        self.dispatcher = dispatcher
        self.assets = assets

    def list_events(self, community: Optional[str] = None, status: Optional[EventStatus] = None) -> List[EventSnapshot]:
        return self.store.list_events(community=community, status=status)

    def get_event(self, event_id: str) -> EventSnapshot:
        return self.store.get_by_id(event_id)

    def submit_event(
        self,
        actor: Actor,
        title: str,
        community: Category,
        event_type: Category,
        description: str,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        poster: Optional[PosterUpload] = None
    ) -> EventSnapshot:
        """
        Create a new pending event on behalf of a submitter.

        A poster that fails to upload is dropped; the event is still created.

        Raises:
            PermissionDeniedError: If the actor is not a submitter
            ValidationError: If the event breaks a record invariant
        """
        if actor.role != Role.SUBMITTER:
            raise PermissionDeniedError("Only submitters can create events")

        draft = EventDraft(
            title=(title or '').strip(),
            community=community.label,
            event_type=event_type.label,
            description=description or '',
            start_time=start_time,
            end_time=end_time,
            created_by=actor.user_id,
            poster_url=self._upload_poster(actor, poster),
        )
        return self.store.insert(draft)

    def approve(self, actor: Actor, event_id: str) -> CommandResult:
        return self.execute(actor, event_id, Approve())

    def reject(self, actor: Actor, event_id: str) -> CommandResult:
        return self.execute(actor, event_id, Reject())

    def mark_pending(self, actor: Actor, event_id: str) -> CommandResult:
        return self.execute(actor, event_id, MarkPending())

    def propose_new_time(
        self,
        actor: Actor,
        event_id: str,
        start_time: Optional[datetime],
        reason: str,
        end_time: Optional[datetime] = None
    ) -> CommandResult:
        return self.execute(actor, event_id, ProposeNewTime(start_time=start_time, reason=reason, end_time=end_time))

    def accept_suggestion(self, actor: Actor, event_id: str) -> CommandResult:
        return self.execute(actor, event_id, AcceptSuggestion())

    def execute(self, actor: Actor, event_id: str, command, snapshot: Optional[EventSnapshot] = None) -> CommandResult:
        """
        Validate ``command`` and write its changes.

        The engine evaluates against ``snapshot`` when the caller supplies
        its own copy, otherwise against the current stored record. Two
        concurrent commands on the same event are not arbitrated: the later
        write wins.

        Raises:
            NotFoundError: If the event does not exist
            PermissionDeniedError: If the actor may not issue the command
            ValidationError: If the command is rejected by the engine
            TransientStoreError: If the database fails
        """
        current = snapshot if snapshot is not None else self.store.get_by_id(event_id)
        transition = apply(current, command, actor)
        committed = self.store.update_fields(event_id, transition.changes)
        logger.info(f"{command.name} committed on event {event_id} by {actor.user_id}")

        notification = None
        if transition.notify is not None:
            notification = self._build_notification(committed, transition.notify, transition.message)
        return CommandResult(event=committed, notification=notification)

    def notify(self, notification: Optional[NotificationRequest]) -> None:
        """Dispatch a notification; failures are logged and never raised."""
        if notification is None or self.dispatcher is None:
            return
        try:
            self.dispatcher.dispatch(notification)
        except Exception as e:
            logger.error(f"Notification dispatch crashed for event {notification.event_id}: {e}")

    def _build_notification(self, event: EventSnapshot, action, message: Optional[str]) -> Optional[NotificationRequest]:
        profile = self.identity.get_profile(event.created_by)
        if profile is None or not profile.email:
            logger.warning(f"No contact address for creator of event {event.id}, skipping notification")
            return None
        return NotificationRequest(
            event_id=event.id,
            action=action,
            recipient_email=profile.email,
            event_title=event.title,
            message=message,
        )

    def _upload_poster(self, actor: Actor, poster: Optional[PosterUpload]) -> Optional[str]:
        if poster is None or self.assets is None:
            return None
        try:
            return self.assets.upload(poster_path(actor.user_id, poster.filename), poster.content)
        except AssetUploadError as e:
            logger.error(f"Error uploading poster: {e}")
            return None
