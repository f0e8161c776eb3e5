"""Routes package initialization."""

from . import (
    admin,
    auth,
    changes,
    events,
    exports,
    health,
    notifications
)

__all__ = [
    'admin',
    'auth',
    'changes',
    'events',
    'exports',
    'health',
    'notifications'
]
