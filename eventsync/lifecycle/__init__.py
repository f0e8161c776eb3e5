"""Event lifecycle package.

Exposes the pure transition engine and the value types it works on.
"""

from .commands import AcceptSuggestion, Approve, MarkPending, ProposeNewTime, Reject
from .engine import SUGGESTION_FIELDS, Transition, apply, check_invariants, validate_time_range
from .state import Actor, EventSnapshot, EventStatus, NotificationAction, Role

__all__ = [
    # Commands
    'Approve',
    'Reject',
    'MarkPending',
    'ProposeNewTime',
    'AcceptSuggestion',

    # Engine
    'apply',
    'Transition',
    'validate_time_range',
    'check_invariants',
    'SUGGESTION_FIELDS',

    # Value types
    'Actor',
    'EventSnapshot',
    'EventStatus',
    'NotificationAction',
    'Role',
]
