"""
Core domain models for closure tree operations.

These are pure data structures without database access.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_PARENT_FIELD


@dataclass
class TreeConfig:
    """Per node type configuration of the closure tree."""
    closure: type
    parent: str = DEFAULT_PARENT_FIELD
    level: Optional[str] = None

    @property
    def has_level_field(self) -> bool:
        return bool(self.level)

    @classmethod
    def from_settings(cls, closure: type, settings=None) -> 'TreeConfig':
        """Build a config using field names from application settings."""
        if settings is None:
            from config.settings import settings
        return cls(
            closure=closure,
            parent=settings.tree_parent_field,
            level=settings.tree_level_field or None
        )


@dataclass
class HierarchyRow:
    """One row of the nodes hierarchy query."""
    edge: Dict[str, Any]
    node: Dict[str, Any]
    parent_id: Any
    level: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'edge': dict(self.edge),
            'node': dict(self.node),
            'parent_id': self.parent_id,
            'level': self.level
        }


@dataclass
class TreeRecord:
    """Arena slot used while assembling a nested tree."""
    node: Dict[str, Any]
    children: List[int] = field(default_factory=list)
