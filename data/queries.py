"""
Query construction against the node relation and its closure relation.

Builders only construct statements; executing them and shaping the
results is left to the repository.
"""
import logging
from typing import Any, Mapping, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased
from sqlalchemy.sql import Select

from core.constants import PARENT_ID, SORT_DIRECTIONS, SUBQUERY_LEVEL
from core.exceptions import InvalidArgumentError
from .accessors import NodeAccessor

logger = logging.getLogger(__name__)


class NodeQueryBuilder:
    """Shared node validation for the query builders."""

    def __init__(self, session: Session, accessor: NodeAccessor):
        self.session = session
        self.accessor = accessor

    @property
    def node_class(self) -> type:
        return self.accessor.node_class

    @property
    def closure(self) -> type:
        return self.accessor.closure

    def validate_node(self, node: Any) -> Any:
        """
        Check that node belongs to this tree and is tracked by the session.

        Returns:
            The node identifier
        """
        if not self.accessor.is_instance(node):
            raise InvalidArgumentError("Node is not related to this repository")
        if not self.accessor.is_tracked(self.session, node):
            raise InvalidArgumentError("Node is not managed by the session")
        return self.accessor.get_identifier(node)

    def order_clause(self, field_name: str, direction: str):
        direction = str(direction).lower()
        if not self.accessor.has_field(field_name) or direction not in SORT_DIRECTIONS:
            raise InvalidArgumentError(
                f"Invalid sort options specified: field - {field_name}, direction - {direction}"
            )
        column = self.accessor.column(field_name)
        return column.asc() if direction == 'asc' else column.desc()


class EdgeQueryBuilder(NodeQueryBuilder):
    """Builds root, count, children and path queries."""

    def root_nodes_query(self) -> Select:
        """Select all nodes without a parent."""
        return select(self.node_class).where(self.accessor.parent_id_column.is_(None))

    def child_count_query(self, node: Any = None, direct: bool = False) -> Select:
        """
        Select the number of children of node.

        Args:
            node: Subtree root, or None to count over the whole tree
            direct: Count only direct children (or only roots when node is None)
        """
        if node is None:
            stmt = select(func.count()).select_from(self.node_class)
            if direct:
                stmt = stmt.where(self.accessor.parent_id_column.is_(None))
            return stmt

        node_id = self.validate_node(node)
        if direct:
            return (
                select(func.count())
                .select_from(self.node_class)
                .where(self.accessor.parent_id_column == node_id)
            )
        return (
            select(func.count())
            .select_from(self.closure)
            .where(self.closure.ancestor_id == node_id)
            .where(self.closure.descendant_id != node_id)
        )

    def children_query(
        self,
        node: Any = None,
        direct: bool = False,
        sort_by_field: Optional[str] = None,
        direction: str = 'ASC'
    ) -> Select:
        """
        Select the children of node.

        With a node the statement yields ``(edge, descendant)`` rows,
        otherwise it yields nodes.

        Args:
            node: Subtree root, or None to take all tree nodes
            direct: Only direct children (only roots when node is None)
            sort_by_field: Node field to sort by
            direction: "ASC" or "DESC"
        """
        if node is not None:
            node_id = self.validate_node(node)
            stmt = (
                select(self.closure, self.node_class)
                .join(self.node_class, self.closure.descendant_id == self.accessor.id_column)
                .where(self.closure.ancestor_id == node_id)
            )
            if direct:
                stmt = stmt.where(self.closure.depth == 1)
            else:
                stmt = stmt.where(self.closure.descendant_id != node_id)
        else:
            stmt = select(self.node_class)
            if direct:
                stmt = stmt.where(self.accessor.parent_id_column.is_(None))

        if sort_by_field:
            stmt = stmt.order_by(self.order_clause(sort_by_field, direction))
        return stmt

    def path_query(self, node: Any) -> Select:
        """Select ``(edge, ancestor)`` rows of node ordered root first."""
        node_id = self.validate_node(node)
        return (
            select(self.closure, self.node_class)
            .join(self.node_class, self.closure.ancestor_id == self.accessor.id_column)
            .where(self.closure.descendant_id == node_id)
            .order_by(self.closure.depth.desc())
        )


def child_sort_from_options(options: Any) -> Optional[Tuple[str, str]]:
    """
    Extract the (field, dir) child sort from hierarchy options.

    Accepts a mapping shaped like ``{'childSort': {'field': ..., 'dir': ...}}``
    (``child_sort`` is accepted as key too) or an object with a
    ``child_sort`` attribute carrying ``field`` and ``dir``.
    """
    if not options:
        return None

    if isinstance(options, Mapping):
        child_sort = options.get('childSort', options.get('child_sort'))
    else:
        child_sort = getattr(options, 'child_sort', None)
    if not child_sort:
        return None

    if isinstance(child_sort, Mapping):
        field_name, direction = child_sort.get('field'), child_sort.get('dir')
    else:
        field_name = getattr(child_sort, 'field', None)
        direction = getattr(child_sort, 'dir', None)
    if not field_name or not direction:
        return None
    return field_name, direction


class HierarchyQueryBuilder(NodeQueryBuilder):
    """Builds the single query feeding hierarchy assembly."""

    def level_expression(self, stmt: Select) -> Tuple[Select, Any]:
        """
        Attach the level source to stmt.

        A stored level field is used as is. Otherwise one grouped subquery
        computes ``MAX(depth) + 1`` per descendant and is joined in.
        """
        if self.accessor.config.has_level_field:
            return stmt, self.accessor.level_column

        edge = aliased(self.closure, name='c2')
        levels = (
            select(
                edge.descendant_id.label('descendant_id'),
                (func.max(edge.depth) + 1).label(SUBQUERY_LEVEL)
            )
            .group_by(edge.descendant_id)
            .subquery('levels')
        )
        stmt = stmt.join(levels, levels.c.descendant_id == self.closure.descendant_id)
        return stmt, levels.c[SUBQUERY_LEVEL]

    def nodes_hierarchy_query(self, node: Any, direct: bool = False, options: Any = None) -> Select:
        """
        Select every descendant edge of node with its parent id and level.

        Rows are ``(edge, descendant, parent_id, level)`` ordered by level,
        then by the optional child sort, then by node identifier.

        Args:
            node: Subtree root (included as its own depth 0 descendant)
            direct: Only the root and its direct children
            options: Hierarchy options carrying an optional child sort
        """
        node_id = self.validate_node(node)
        parent = aliased(self.node_class, name='p')

        stmt = (
            select(self.closure, self.node_class)
            .select_from(self.closure)
            .join(self.node_class, self.closure.descendant_id == self.accessor.id_column)
            .outerjoin(parent, getattr(parent, self.accessor.id_field) == self.accessor.parent_id_column)
        )
        stmt, level = self.level_expression(stmt)
        stmt = stmt.add_columns(
            getattr(parent, self.accessor.id_field).label(PARENT_ID),
            level.label(SUBQUERY_LEVEL)
        ).where(self.closure.ancestor_id == node_id)

        if direct:
            stmt = stmt.where(self.closure.depth <= 1)

        stmt = stmt.order_by(level.asc())

        child_sort = child_sort_from_options(options)
        if child_sort:
            field_name, direction = child_sort
            column = self.accessor.column(field_name)
            stmt = stmt.order_by(
                column.asc() if str(direction).lower() == 'asc' else column.desc()
            )

        stmt = stmt.order_by(self.accessor.id_column.asc())
        logger.debug("Built nodes hierarchy query for node %s (direct=%s)", node_id, direct)
        return stmt
