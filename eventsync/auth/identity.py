"""Identity provider and profile lookup.

Sessions are explicit ``AuthSession`` objects identified by an opaque bearer
token. Nothing here keeps ambient "current user" state; callers resolve the
session from the token they hold and may subscribe to sign-in/sign-out
changes through ``on_session_change``.
"""

import hashlib
import hmac
import logging
import secrets
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from ..change_feed import ChangeFeed, Subscription
from ..db.db_core import Database, SessionError
from ..errors import AuthError, NotFoundError
from ..lifecycle.state import Actor, Role
from ..models.profile import Account, AuthSessionRecord, Profile
from ..utils.time_utils import ensure_utc

logger = logging.getLogger(__name__)

SESSION_TOPIC = 'auth'
MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 260_000


@dataclass(frozen=True)
class AuthSession:
    """A signed-in user, identified by the token handed out at sign-in."""

    token: str
    user_id: str
    email: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserProfile:
    """Public profile of a user."""

    id: str
    name: str
    email: str
    role: Role

    def to_actor(self) -> Actor:
        return Actor(user_id=self.id, role=self.role)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'email': self.email, 'role': self.role.value}


class IdentityProvider(ABC):
    """
    Interface of the identity collaborator.

    Each implementation is responsible for:
    1. Registering users and verifying their credentials
    2. Issuing and revoking sessions
    3. Looking up the profile (and so the role) of a user
    """

    @abstractmethod
    def sign_up(self, email: str, password: str, display_name: str) -> None:
        pass

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession:
        pass

    @abstractmethod
    def sign_out(self, token: str) -> None:
        pass

    @abstractmethod
    def get_session(self, token: str) -> Optional[AuthSession]:
        pass

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    def on_session_change(self, callback) -> Subscription:
        pass


def hash_password(password: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> str:
    """PBKDF2-SHA256 hash of ``password``, hex encoded."""
    return hashlib.pbkdf2_hmac('sha256', password.encode(), salt, iterations).hex()


class DatabaseIdentityProvider(IdentityProvider):
    """Identity provider storing accounts, profiles and sessions in the database."""

    def __init__(self, database: Database, feed: Optional[ChangeFeed] = None, iterations: int = PBKDF2_ITERATIONS):
        self.database = database
        self.feed = feed or ChangeFeed()
        self.iterations = iterations

    def sign_up(self, email: str, password: str, display_name: str) -> None:
        """
        Register a new user with a submitter profile.

        Raises:
            AuthError: If the input is invalid or the email is already registered
        """
        email = (email or '').strip().lower()
        display_name = (display_name or '').strip()
        if '@' not in email:
            raise AuthError("Invalid email address")
        if len(password or '') < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")
        if not display_name:
            raise AuthError("Name is required")

        user_id = str(uuid.uuid4())
        salt = secrets.token_bytes(16)
        try:
            with self.database.session() as session:
                if session.query(Account).filter(Account.email == email).first():
                    raise AuthError("User already registered")
                session.add(Account(
                    id=user_id,
                    email=email,
                    password_hash=hash_password(password, salt, self.iterations),
                    salt=salt.hex(),
                ))
                session.flush()
                session.add(Profile(id=user_id, name=display_name, email=email, role=Role.SUBMITTER))
        except SessionError as e:
            # Concurrent sign-up with the same email
            if isinstance(e.__cause__, IntegrityError):
                raise AuthError("User already registered") from e
            raise

        logger.info(f"Registered user {user_id}")

    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Verify credentials and issue a session.

        Raises:
            AuthError: If the credentials are wrong
        """
        email = (email or '').strip().lower()
        with self.database.session() as session:
            account = session.query(Account).filter(Account.email == email).first()
            if account is None or not self._password_matches(account, password or ''):
                raise AuthError("Invalid login credentials")
            record = AuthSessionRecord(token=secrets.token_urlsafe(32), user_id=account.id)
            session.add(record)
            session.flush()
            auth_session = AuthSession(
                token=record.token,
                user_id=account.id,
                email=account.email,
                created_at=ensure_utc(record.created_at),
            )

        logger.info(f"User {auth_session.user_id} signed in")
        self.feed.publish(SESSION_TOPIC, 'signed_in', auth_session.user_id)
        return auth_session

    def sign_out(self, token: str) -> None:
        """
        Revoke a session.

        Raises:
            AuthError: If the token does not belong to an active session
        """
        with self.database.session() as session:
            record = session.query(AuthSessionRecord).filter(AuthSessionRecord.token == token).first()
            if record is None:
                raise AuthError("Session not found")
            user_id = record.user_id
            session.delete(record)

        logger.info(f"User {user_id} signed out")
        self.feed.publish(SESSION_TOPIC, 'signed_out', user_id)

    def get_session(self, token: str) -> Optional[AuthSession]:
        """Resolve a token to its session, or None."""
        if not token:
            return None
        with self.database.session() as session:
            row = (
                session.query(AuthSessionRecord, Account)
                .join(Account, Account.id == AuthSessionRecord.user_id)
                .filter(AuthSessionRecord.token == token)
                .first()
            )
            if row is None:
                return None
            record, account = row
            return AuthSession(
                token=record.token,
                user_id=account.id,
                email=account.email,
                created_at=ensure_utc(record.created_at),
            )

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Profile of ``user_id``, or None if it does not exist yet."""
        with self.database.session() as session:
            profile = session.query(Profile).filter(Profile.id == user_id).first()
            if profile is None:
                return None
            return UserProfile(id=profile.id, name=profile.name, email=profile.email, role=Role(profile.role))

    def set_role(self, user_id: str, role: Role) -> UserProfile:
        """
        Change the role of a user.

        Raises:
            NotFoundError: If the user has no profile
        """
        with self.database.session() as session:
            profile = session.query(Profile).filter(Profile.id == user_id).first()
            if profile is None:
                raise NotFoundError(f"No profile for user {user_id}")
            profile.role = role
            updated = UserProfile(id=profile.id, name=profile.name, email=profile.email, role=role)

        logger.info(f"User {user_id} is now {role.value}")
        return updated

    def on_session_change(self, callback) -> Subscription:
        """Subscribe to sign-in/sign-out notices ('signed_in' / 'signed_out')."""
        return self.feed.subscribe(SESSION_TOPIC, callback)

    def _password_matches(self, account: Account, password: str) -> bool:
        expected = hash_password(password, bytes.fromhex(account.salt), self.iterations)
        return hmac.compare_digest(expected, account.password_hash)
