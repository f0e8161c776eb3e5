"""Core database functionality and configuration.

This module provides engine configuration, connection pooling and session
handling for the event store and the identity tables.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Generator
import os

from sqlalchemy import create_engine, Engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..errors import EventSyncError, TransientStoreError
from ..models import Base
from ..config.environment import IS_PRODUCTION_ENVIRONMENT

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        postgres_url: Optional[str] = None,
        echo: bool = False,
        pool_size: int = 3,
        max_overflow: int = 4,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True
    ):
        """
        Initialize database configuration.

        In production environment, DATABASE_URL must be set in environment variables
        or provided explicitly via postgres_url parameter.

        Args:
            url: Explicit SQLAlchemy URL, overriding the environment rules
                 (e.g. 'sqlite://' for an in-memory database)
            sqlite_path: Path to SQLite database file (for development)
            postgres_url: PostgreSQL connection URL (for production)
                        If not provided, will use DATABASE_URL env variable
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them

        Raises:
            ValueError: If in production environment and no database URL is provided
                      either via postgres_url parameter or DATABASE_URL env variable
        """
        self.postgres_url = None
        self.sqlite_path = None
        if url:
            self._url = url
        elif IS_PRODUCTION_ENVIRONMENT:
            self.postgres_url = postgres_url or os.environ.get('DATABASE_URL')
            if not self.postgres_url:
                raise ValueError(
                    "Database URL must be provided either via postgres_url parameter "
                    "or DATABASE_URL environment variable when in production environment"
                )
            self._url = self.postgres_url
        else:
            self.sqlite_path = sqlite_path or Path(__file__).parent.parent.parent / 'data' / 'events.db'
            self._url = f"sqlite:///{self.sqlite_path}"

        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping

    @property
    def connection_url(self) -> str:
        """Get the database connection URL."""
        return self._url

    @property
    def is_sqlite(self) -> bool:
        return self._url.startswith('sqlite')

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args = {"echo": self.echo}

        # SQLite-specific configuration
        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            # In-memory databases live as long as their single connection
            if self._url in ('sqlite://', 'sqlite:///:memory:'):
                args["poolclass"] = StaticPool

        # PostgreSQL-specific configuration
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping
            })

        return args


class DatabaseError(TransientStoreError):
    """Base exception for database-related errors."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when there are issues connecting to the database."""
    pass


class SessionError(DatabaseError):
    """Raised when a database session fails to read or commit."""
    pass


class Database:
    """Engine and session management for one database."""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig()
        self.engine: Optional[Engine] = None
        self._session_factory = sessionmaker(expire_on_commit=False)
        self._tables_checked = False
        self._setup_engine()

    def _setup_engine(self) -> None:
        """Set up the SQLAlchemy engine."""
        if self.config.sqlite_path:
            self.config.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.engine = create_engine(
                self.config.connection_url,
                **self.config.get_engine_args()
            )
            self._session_factory.configure(bind=self.engine)
        except Exception as e:
            raise DatabaseConnectionError(f"Failed to create database engine: {e}") from e

    def init_db(self) -> None:
        """Create all tables."""
        if not self.engine:
            raise DatabaseConnectionError("Database engine not initialized")

        try:
            with self.engine.begin() as conn:
                Base.metadata.create_all(conn)
            self._tables_checked = True
            logger.info("Database schema initialized successfully")
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to initialize database schema: {e}") from e

    def ensure_tables_exist(self) -> None:
        """Ensure all required database tables exist."""
        if self._tables_checked:
            return
        if not self.engine:
            raise DatabaseConnectionError("Database engine not initialized")

        try:
            existing_tables = set(inspect(self.engine).get_table_names())
            required_tables = set(Base.metadata.tables)

            if not required_tables <= existing_tables:
                logger.info("Some tables missing, initializing database schema")
                self.init_db()

            self._tables_checked = True
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to verify/create database schema: {e}") from e

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Commits when the block exits normally and rolls back otherwise.
        EventSync errors raised inside the block propagate unchanged;
        SQLAlchemy failures are wrapped in SessionError.

        Example:
            with db.session() as session:
                event = session.query(Event).filter(Event.id == event_id).first()
                event.title = "New Title"
                # No need to call commit - it's handled automatically

        Raises:
            SessionError: If the database fails during the block or the commit
            DatabaseError: If database schema verification fails
        """
        self.ensure_tables_exist()

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except EventSyncError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            raise SessionError(f"Database session error: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close every pooled connection."""
        if self.engine:
            self.engine.dispose()


_database: Optional[Database] = None


def get_database() -> Database:
    """Return the process-wide database built from the environment."""
    global _database
    if _database is None:
        _database = Database()
    return _database
