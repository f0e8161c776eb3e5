"""Service wiring and request-scoped dependencies."""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from ..auth.identity import AuthSession, DatabaseIdentityProvider, UserProfile
from ..change_feed import ChangeFeed
from ..config.external_services import NotificationConfig
from ..db.db_core import Database, get_database
from ..db.event_store import EventStore
from ..errors import AuthError, PermissionDeniedError
from ..event_service import EventService
from ..lifecycle.state import Actor, Role
from ..notifications.dispatcher import NotificationDispatcher
from ..storage.assets import AssetStore, LocalAssetStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything the routes need, built once per application."""

    database: Database
    feed: ChangeFeed
    store: EventStore
    identity: DatabaseIdentityProvider
    events: EventService


def build_services(
    database: Optional[Database] = None,
    feed: Optional[ChangeFeed] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    assets: Optional[AssetStore] = None,
    identity: Optional[DatabaseIdentityProvider] = None
) -> ServiceContainer:
    """Assemble the default services, replacing any part that is passed in."""
    database = database or get_database()
    feed = feed or ChangeFeed()

    if dispatcher is None:
        config = NotificationConfig()
        if config.enabled and not config.url:
            logger.warning("NOTIFICATION_URL not set, notifications are disabled")
            config.enabled = False
        dispatcher = NotificationDispatcher(config)

    store = EventStore(database, feed)
    identity = identity or DatabaseIdentityProvider(database, feed)
    events = EventService(
        store,
        identity,
        dispatcher=dispatcher,
        assets=assets if assets is not None else LocalAssetStore(),
    )
    return ServiceContainer(database=database, feed=feed, store=store, identity=identity, events=events)


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_event_service(services: ServiceContainer = Depends(get_services)) -> EventService:
    return services.events


def get_identity(services: ServiceContainer = Depends(get_services)) -> DatabaseIdentityProvider:
    return services.identity


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def get_current_session(
    authorization: Optional[str] = Header(None),
    identity: DatabaseIdentityProvider = Depends(get_identity)
) -> AuthSession:
    """
    Resolve the caller's session.

    Raises:
        AuthError: If no valid session token was sent
    """
    session = identity.get_session(bearer_token(authorization))
    if session is None:
        raise AuthError("Not signed in")
    return session


def get_current_profile(
    session: AuthSession = Depends(get_current_session),
    identity: DatabaseIdentityProvider = Depends(get_identity)
) -> UserProfile:
    profile = identity.get_profile(session.user_id)
    if profile is None:
        # Fresh identities may not have a profile yet
        raise AuthError("Profile not found, please complete sign-up")
    return profile


def get_actor(profile: UserProfile = Depends(get_current_profile)) -> Actor:
    return profile.to_actor()


def require_approver(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role != Role.APPROVER:
        raise PermissionDeniedError("Only approvers can access this resource")
    return actor
