"""
Explicit field access for managed tree nodes.

A NodeAccessor is built once per node type from its SQLAlchemy mapping and
answers every identifier, parent and field question the tree operations ask.
"""
from typing import Any, Dict, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from core.exceptions import InvalidArgumentError
from core.models import TreeConfig


class NodeAccessor:
    """Reads and writes identifier, parent and named fields of one node type."""

    def __init__(self, node_class: type, config: TreeConfig):
        self.node_class = node_class
        self.config = config

        mapper = inspect(node_class)
        if len(mapper.primary_key) != 1:
            raise InvalidArgumentError(
                f"{node_class.__name__} must have a single column identifier"
            )
        self.id_field = mapper.get_property_by_column(mapper.primary_key[0]).key
        self.table = mapper.local_table
        self._columns = mapper.columns
        self.fields = tuple(mapper.column_attrs.keys())
        self.field_names = frozenset(self.fields)

        if config.parent not in mapper.relationships:
            raise InvalidArgumentError(
                f"{node_class.__name__} has no parent relationship '{config.parent}'"
            )
        parent_rel = mapper.relationships[config.parent]
        parent_column = next(iter(parent_rel.local_columns))
        self.parent_id_field = mapper.get_property_by_column(parent_column).key

        if config.has_level_field and config.level not in self.field_names:
            raise InvalidArgumentError(
                f"{node_class.__name__} has no level field '{config.level}'"
            )

    @property
    def closure(self) -> type:
        return self.config.closure

    # ORM attributes used to build statements

    @property
    def id_column(self):
        return getattr(self.node_class, self.id_field)

    @property
    def parent_id_column(self):
        return getattr(self.node_class, self.parent_id_field)

    @property
    def parent_relationship(self):
        return getattr(self.node_class, self.config.parent)

    @property
    def level_column(self):
        if not self.config.has_level_field:
            return None
        return getattr(self.node_class, self.config.level)

    def column(self, field_name: str):
        if not self.has_field(field_name):
            raise InvalidArgumentError(
                f"{self.node_class.__name__} has no field '{field_name}'"
            )
        return getattr(self.node_class, field_name)

    # Instance checks

    def is_instance(self, node: Any) -> bool:
        return isinstance(node, self.node_class)

    def is_tracked(self, session: Session, node: Any) -> bool:
        """True when node is persistent and held by this session."""
        state = inspect(node)
        return state.persistent and node in session

    def has_valid_identifier(self, node: Any) -> bool:
        state = inspect(node)
        return state.identity is not None and self.get_identifier(node) is not None

    # Field access

    def has_field(self, field_name: str) -> bool:
        return field_name in self.field_names

    def get_identifier(self, node: Any) -> Any:
        return getattr(node, self.id_field)

    def get_parent(self, node: Any) -> Optional[Any]:
        return getattr(node, self.config.parent)

    def get_parent_id(self, node: Any) -> Any:
        parent = self.get_parent(node)
        return None if parent is None else self.get_identifier(parent)

    def set_parent(self, node: Any, parent: Optional[Any]):
        """Set the parent reference and let the session track the change."""
        setattr(node, self.config.parent, parent)

    def sync_parent(self, node: Any, parent: Optional[Any]):
        """
        Set the parent reference as already persisted.

        Used after the parent column was written by a statement, so the
        next flush does not see a pending change.
        """
        parent_id = None if parent is None else self.get_identifier(parent)
        set_committed_value(node, self.config.parent, parent)
        set_committed_value(node, self.parent_id_field, parent_id)

    def get_field(self, node: Any, field_name: str) -> Any:
        if not self.has_field(field_name):
            raise InvalidArgumentError(
                f"{self.node_class.__name__} has no field '{field_name}'"
            )
        return getattr(node, field_name)

    def to_dict(self, node: Any) -> Dict[str, Any]:
        """Column values of node keyed by attribute name."""
        return {name: getattr(node, name) for name in self.fields}

    def table_column(self, field_name: str):
        """Core table column mapped to field_name, for statements on the table."""
        return self._columns[field_name]
