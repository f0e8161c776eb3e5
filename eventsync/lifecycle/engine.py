"""Event lifecycle engine.

Pure functions deciding which status transitions are legal and what a
command writes. Nothing here touches the database: given the same snapshot,
command and actor the result is always the same ``Transition``.

Transition table:

    Approve / Reject / MarkPending   approver, from any state
    ProposeNewTime                   approver, only without an open suggestion
    AcceptSuggestion                 original submitter, only with an open suggestion
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..errors import (
    NoActiveSuggestionError,
    PermissionDeniedError,
    SuggestionPendingError,
    ValidationError,
)
from ..utils.time_utils import ensure_utc
from .commands import AcceptSuggestion, Approve, MarkPending, ProposeNewTime, Reject
from .state import Actor, EventSnapshot, EventStatus, NotificationAction, Role

logger = logging.getLogger(__name__)

SUGGESTION_FIELDS = ('suggested_start_time', 'suggested_end_time', 'suggestion_reason')


@dataclass(frozen=True)
class Transition:
    """
    Result of applying a command to an event.

    Fields:
        changes: Partial record to hand to the store's update_fields
        notify: Notification to send once the write has committed (optional)
        message: Free text forwarded with the notification (optional)
    """
    changes: Dict[str, Any] = field(default_factory=dict)
    notify: Optional[NotificationAction] = None
    message: Optional[str] = None

    def apply_to(self, event: EventSnapshot) -> EventSnapshot:
        """Return the snapshot the store will hold after writing ``changes``."""
        return replace(event, **self.changes)


def validate_time_range(start: Optional[datetime], end: Optional[datetime], label: str = 'event') -> None:
    """
    Check that ``start`` is set and ``end``, when given, is strictly after it.

    Raises:
        ValidationError: If the start is missing or the range is inverted
    """
    if start is None:
        raise ValidationError(f"A start time is required for the {label}")
    if end is not None and ensure_utc(end) <= ensure_utc(start):
        raise ValidationError(f"End date/time must be after start date/time for the {label}")


def _require_role(actor: Actor, role: Role, command_name: str) -> None:
    if actor.role != role:
        raise PermissionDeniedError(
            f"Role '{actor.role.value}' may not {command_name.replace('_', ' ')}"
        )


def _set_status(status: EventStatus, notify: Optional[NotificationAction]):
    def handler(event: EventSnapshot, command, actor: Actor) -> Transition:
        _require_role(actor, Role.APPROVER, command.name)
        return Transition(changes={'status': status}, notify=notify)
    return handler


def _propose_new_time(event: EventSnapshot, command: ProposeNewTime, actor: Actor) -> Transition:
    _require_role(actor, Role.APPROVER, command.name)
    if event.has_suggestion:
        raise SuggestionPendingError(
            f"Event {event.id} already has a pending suggestion"
        )

    reason = (command.reason or '').strip()
    if not reason:
        raise ValidationError("Please provide a reason for the suggestion")
    validate_time_range(command.start_time, command.end_time, label='suggestion')

    changes = {
        'suggested_start_time': ensure_utc(command.start_time),
        'suggested_end_time': ensure_utc(command.end_time),
        'suggestion_reason': reason,
    }
    return Transition(changes=changes, notify=NotificationAction.SUGGESTED, message=reason)


def _accept_suggestion(event: EventSnapshot, command: AcceptSuggestion, actor: Actor) -> Transition:
    _require_role(actor, Role.SUBMITTER, command.name)
    if actor.user_id != event.created_by:
        raise PermissionDeniedError("Only the event's creator may accept a suggestion")
    if not event.has_suggestion:
        raise NoActiveSuggestionError(f"Event {event.id} has no active suggestion")

    new_start = event.suggested_start_time
    if event.suggested_end_time is not None:
        new_end = event.suggested_end_time
    elif event.end_time is not None and event.end_time > new_start:
        new_end = event.end_time
    else:
        # The old end would precede the new start
        new_end = None

    changes = {
        'start_time': new_start,
        'end_time': new_end,
        'status': EventStatus.PENDING,
    }
    changes.update({name: None for name in SUGGESTION_FIELDS})
    return Transition(changes=changes)


_HANDLERS: Dict[type, Callable[..., Transition]] = {
    Approve: _set_status(EventStatus.APPROVED, NotificationAction.APPROVED),
    Reject: _set_status(EventStatus.REJECTED, NotificationAction.REJECTED),
    MarkPending: _set_status(EventStatus.PENDING, None),
    ProposeNewTime: _propose_new_time,
    AcceptSuggestion: _accept_suggestion,
}


def apply(event: EventSnapshot, command, actor: Actor) -> Transition:
    """
    Compute the transition ``command`` causes on ``event`` for ``actor``.

    Args:
        event: The caller's current copy of the event
        command: One of the lifecycle commands
        actor: Who is issuing the command

    Returns:
        Transition: The fields to write and the notification to send

    Raises:
        PermissionDeniedError: If the actor's role may not issue the command
        ValidationError: If the command's input is malformed or its
            precondition on the suggestion fields does not hold
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise ValidationError(f"Unknown lifecycle command: {command!r}")
    transition = handler(event, command, actor)
    logger.debug(f"{command.name} on event {event.id} by {actor.user_id}: {sorted(transition.changes)}")
    return transition


def check_invariants(event: EventSnapshot) -> None:
    """
    Verify the record-level rules every persisted event must satisfy.

    Raises:
        ValidationError: If the time ranges are inverted or the suggestion
            fields are only partially set
    """
    if not (event.title or '').strip():
        raise ValidationError("Event title is required")
    validate_time_range(event.start_time, event.end_time, label='event')

    has_start = event.suggested_start_time is not None
    has_reason = bool((event.suggestion_reason or '').strip())
    if has_start != has_reason:
        raise ValidationError("A suggestion needs both a start time and a reason")
    if event.suggested_end_time is not None:
        if not has_start:
            raise ValidationError("A suggested end time needs a suggested start time")
        validate_time_range(event.suggested_start_time, event.suggested_end_time, label='suggestion')
