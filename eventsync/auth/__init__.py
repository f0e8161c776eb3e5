"""Identity and profile collaborators."""

from .identity import (
    AuthSession,
    DatabaseIdentityProvider,
    IdentityProvider,
    UserProfile,
)

__all__ = ['AuthSession', 'DatabaseIdentityProvider', 'IdentityProvider', 'UserProfile']
