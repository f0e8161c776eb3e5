"""Error taxonomy shared by the lifecycle engine, the store and the API."""


class EventSyncError(Exception):
    """Base exception for all EventSync errors."""
    pass


class ValidationError(EventSyncError):
    """Raised when input to a lifecycle command or store write is malformed."""
    pass


class NoActiveSuggestionError(ValidationError):
    """Raised when accepting a suggestion on an event that has none."""
    pass


class SuggestionPendingError(ValidationError):
    """Raised when proposing a new time while another suggestion is open."""
    pass


class NotFoundError(EventSyncError):
    """Raised when an operation targets an id that does not exist."""
    pass


class TransientStoreError(EventSyncError):
    """Raised when the backing database fails during a read or write."""
    pass


class AuthError(EventSyncError):
    """Raised when an identity operation fails or no session is present."""
    pass


class PermissionDeniedError(AuthError):
    """Raised when the actor's role does not allow the requested command."""
    pass


class DispatchError(EventSyncError):
    """Notification delivery failure. Logged, never propagated to the actor."""
    pass


__all__ = [
    'EventSyncError',
    'ValidationError',
    'NoActiveSuggestionError',
    'SuggestionPendingError',
    'NotFoundError',
    'TransientStoreError',
    'AuthError',
    'PermissionDeniedError',
    'DispatchError',
]
