"""Core package - Domain models, constants and exceptions."""

from .models import TreeConfig, HierarchyRow, TreeRecord
from .constants import (
    SUBQUERY_LEVEL,
    PARENT_ID,
    CHILDREN_KEY,
    SORT_DIRECTIONS,
    DEFAULT_PARENT_FIELD,
    ROOT_LEVEL
)
from .exceptions import (
    ClosureTreeError,
    InvalidArgumentError,
    TreeRuntimeError,
    SessionInvalidatedError,
    AssemblyError
)

__all__ = [
    'TreeConfig',
    'HierarchyRow',
    'TreeRecord',
    'SUBQUERY_LEVEL',
    'PARENT_ID',
    'CHILDREN_KEY',
    'SORT_DIRECTIONS',
    'DEFAULT_PARENT_FIELD',
    'ROOT_LEVEL',
    'ClosureTreeError',
    'InvalidArgumentError',
    'TreeRuntimeError',
    'SessionInvalidatedError',
    'AssemblyError'
]
