"""Models package initialization."""

from .base import Base
from .event import Event
from .profile import Account, AuthSessionRecord, Profile

__all__ = ['Base', 'Event', 'Account', 'Profile', 'AuthSessionRecord']
