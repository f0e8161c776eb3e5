"""Builders shared by the test modules."""

from datetime import datetime, timezone

from eventsync.config.categories import PredefinedCategory
from eventsync.db import EventDraft
from eventsync.lifecycle import Role

PASSWORD = "secret-password"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class RecordingDispatcher:
    """Stands in for NotificationDispatcher and keeps what it was asked to send."""

    def __init__(self):
        self.sent = []

    def dispatch(self, request) -> bool:
        self.sent.append(request)
        return True


def register(identity, email: str, name: str, role: Role = Role.SUBMITTER):
    identity.sign_up(email, PASSWORD, name)
    user_id = identity.sign_in(email, PASSWORD).user_id
    if role != Role.SUBMITTER:
        identity.set_role(user_id, role)
    return identity.get_profile(user_id)


def draft(created_by: str, start: datetime, end: datetime = None, title: str = "Robotics Workshop") -> EventDraft:
    return EventDraft(
        title=title,
        community="IEEE",
        event_type="Workshop",
        description="Hands-on session",
        start_time=start,
        end_time=end,
        created_by=created_by,
    )


def submit(service, profile, start: datetime, end: datetime = None, title: str = "Robotics Workshop"):
    return service.submit_event(
        profile.to_actor(),
        title=title,
        community=PredefinedCategory("IEEE"),
        event_type=PredefinedCategory("Workshop"),
        description="Hands-on session",
        start_time=start,
        end_time=end,
    )
