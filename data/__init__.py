"""Data access layer - Database models and connections."""

from .db_models import Base, ClosureMixin, Category, CategoryClosure, Section, SectionClosure
from .database import (
    DatabaseManager,
    build_engine,
    get_db_manager,
    session_scope,
    init_database
)

__all__ = [
    # Models
    'Base',
    'ClosureMixin',
    'Category',
    'CategoryClosure',
    'Section',
    'SectionClosure',

    # Database
    'DatabaseManager',
    'build_engine',
    'get_db_manager',
    'session_scope',
    'init_database'
]
