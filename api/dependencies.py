"""
API Dependencies - Dependency injection for tree endpoints.

Provides reusable dependencies for database sessions and tree repositories.
"""
from typing import Generator

from sqlalchemy.orm import Session

from core.models import TreeConfig
from data.database import get_db_manager
from data.repositories import ClosureTreeRepository
from config.settings import settings


def get_db() -> Generator:
    """
    Dependency for database session.

    Yields:
        SQLAlchemy session
    """
    db_manager = get_db_manager()
    db = db_manager.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_tree_repository(node_class: type, closure: type, session: Session) -> ClosureTreeRepository:
    """
    Dependency for a closure tree repository.

    Args:
        node_class: Mapped node class
        closure: Closure class of node_class
        session: SQLAlchemy session

    Returns:
        ClosureTreeRepository configured from settings
    """
    return ClosureTreeRepository(
        session,
        node_class,
        TreeConfig.from_settings(closure, settings)
    )
