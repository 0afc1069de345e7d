"""
Database connection and session management.

Provides utilities for creating database engine, sessions, and table initialization.
"""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config.settings import settings
from .db_models import Base

logger = logging.getLogger(__name__)


def _is_memory_url(database_url: str) -> bool:
    return ':memory:' in database_url or database_url == 'sqlite://'


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite engines get foreign key enforcement so closure rows cascade
    with their nodes; in-memory SQLite shares one connection across sessions.
    """
    if not database_url.startswith('sqlite'):
        return create_engine(database_url, echo=echo)

    if _is_memory_url(database_url):
        engine = create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={'check_same_thread': False}
        )
    else:
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={'check_same_thread': False}
        )

    @event.listens_for(engine, 'connect')
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()

    return engine


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self, database_url: str = None, echo: bool = None):
        """
        Initialize database manager.

        Args:
            database_url: SQLAlchemy database URL. If None, uses the
                          DATABASE_URL setting.
            echo: Log emitted SQL. If None, uses the DATABASE_ECHO setting.
        """
        self.database_url = database_url or settings.database_url
        self.engine = build_engine(
            self.database_url,
            echo=settings.database_echo if echo is None else echo
        )

        # Create session factory
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def create_tables(self):
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created at: %s", self.database_url)

    def drop_tables(self):
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("Database tables dropped from: %s", self.database_url)

    def get_session(self) -> Session:
        """
        Get a new database session.

        Remember to close the session when done, or use the session
        context manager instead.
        """
        return self.SessionLocal()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions.

        Automatically commits on success and rolls back on exception.

        Usage:
            with db_manager.session() as session:
                repo = ClosureTreeRepository(session, Category, config)
                roots = repo.get_root_nodes()
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global database manager instance
_db_manager = None


def get_db_manager(database_url: str = None) -> DatabaseManager:
    """
    Get or create global database manager instance.

    Args:
        database_url: Optional database URL. Only used on first call.

    Returns:
        DatabaseManager instance
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(database_url)
    return _db_manager


def init_database(database_url: str = None):
    """
    Initialize database by creating all tables.

    Args:
        database_url: Optional database URL
    """
    db_manager = get_db_manager(database_url)
    db_manager.create_tables()


def get_session() -> Session:
    """Get a new database session from global manager."""
    return get_db_manager().get_session()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Context manager for database sessions using global manager.

    Usage:
        from data.database import session_scope

        with session_scope() as session:
            root = session.query(Category).filter(Category.parent_id.is_(None)).first()
    """
    with get_db_manager().session() as session:
        yield session
