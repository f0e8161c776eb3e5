"""Lifecycle commands an actor can issue against a single event."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Approve:
    name = 'approve'


@dataclass(frozen=True)
class Reject:
    name = 'reject'


@dataclass(frozen=True)
class MarkPending:
    name = 'mark_pending'


@dataclass(frozen=True)
class ProposeNewTime:
    """An approver's proposal to move the event, with a justification."""

    start_time: Optional[datetime]
    reason: str
    end_time: Optional[datetime] = None

    name = 'propose_new_time'


@dataclass(frozen=True)
class AcceptSuggestion:
    name = 'accept_suggestion'
