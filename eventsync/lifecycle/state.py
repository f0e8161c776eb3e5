"""Value types the lifecycle engine operates on."""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class EventStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class Role(str, Enum):
    """Actor roles. ``hod`` and ``rep`` are the legacy labels."""

    APPROVER = 'approver'
    SUBMITTER = 'submitter'

    @classmethod
    def parse(cls, value: str) -> 'Role':
        aliases = {'hod': cls.APPROVER, 'rep': cls.SUBMITTER}
        normalized = value.strip().lower()
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class NotificationAction(str, Enum):
    """Transitions that notify the event's submitter."""

    APPROVED = 'approved'
    REJECTED = 'rejected'
    SUGGESTED = 'suggested'


@dataclass(frozen=True)
class Actor:
    """A signed-in user acting under exactly one role."""

    user_id: str
    role: Role


@dataclass(frozen=True)
class EventSnapshot:
    """
    Immutable copy of an event record as held by a caller.

    Fields:
        id: Opaque unique identifier
        title: Event title
        community: Organizing community label
        event_type: Event type label
        description: Free-text description
        status: Lifecycle state
        start_time: When the event starts (aware UTC)
        end_time: When the event ends, strictly after start_time (optional)
        poster_url: Public URL of the uploaded poster (optional)
        created_by: User id of the submitter
        suggested_start_time: Start proposed by an approver (optional)
        suggested_end_time: End proposed by an approver (optional)
        suggestion_reason: Justification, present iff a suggestion is open
        created_at: When the record was inserted
        updated_at: When the record was last written
    """
    id: str
    title: str
    community: str
    event_type: str
    description: str
    status: EventStatus
    start_time: datetime
    created_by: str
    end_time: Optional[datetime] = None
    poster_url: Optional[str] = None
    suggested_start_time: Optional[datetime] = None
    suggested_end_time: Optional[datetime] = None
    suggestion_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_suggestion(self) -> bool:
        return self.suggested_start_time is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Enum):
                value = value.value
            data[f.name] = value
        return data
