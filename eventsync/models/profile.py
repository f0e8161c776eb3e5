"""Identity models: accounts, profiles and sign-in sessions."""

from sqlalchemy import Column, DateTime, Enum as SAEnum, ForeignKey, String

from .base import Base
from ..lifecycle.state import Role
from ..utils.time_utils import now_utc


class Account(Base):
    """
    Credentials of a user.

    Fields:
        id: User id (UUID string), shared with the profile
        email: Login email, unique
        password_hash: PBKDF2 hash, hex encoded
        salt: Per-account salt, hex encoded
        created_at: When the account was created
    """
    __tablename__ = 'accounts'

    id = Column(String(36), primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    salt = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class Profile(Base):
    """Display name, contact address and role of a user."""
    __tablename__ = 'profiles'

    id = Column(String(36), ForeignKey('accounts.id'), primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    role = Column(
        SAEnum(Role, name='user_role', values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.SUBMITTER
    )


class AuthSessionRecord(Base):
    """A bearer token issued at sign-in, removed at sign-out."""
    __tablename__ = 'auth_sessions'

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey('accounts.id'), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
