"""Database package initialization.

This module exposes the public interface of the database package.
"""

from .db_core import (
    Database,
    DatabaseConfig,
    DatabaseError,
    DatabaseConnectionError,
    SessionError,
    get_database
)
from .event_store import EventDraft, EventStore

__all__ = [
    # Core database classes
    'Database',
    'DatabaseConfig',

    # Exceptions
    'DatabaseError',
    'DatabaseConnectionError',
    'SessionError',

    # Global instance
    'get_database',

    # Event store
    'EventStore',
    'EventDraft',
]
