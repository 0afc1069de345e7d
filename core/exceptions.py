"""
Exception hierarchy for closure tree operations.
"""
from typing import Any, Optional


class ClosureTreeError(Exception):
    """Base class for all closure tree errors."""


class InvalidArgumentError(ClosureTreeError, ValueError):
    """Caller passed a foreign or untracked node, or invalid sort options."""


class TreeRuntimeError(ClosureTreeError, RuntimeError):
    """A transactional tree mutation failed and was rolled back."""


class SessionInvalidatedError(TreeRuntimeError):
    """The session was invalidated by an earlier failed transaction."""


class AssemblyError(ClosureTreeError):
    """Hierarchy rows were not ordered parent-before-child."""

    def __init__(self, message: str, node_id: Any = None, parent_id: Optional[Any] = None):
        super().__init__(message)
        self.node_id = node_id
        self.parent_id = parent_id
