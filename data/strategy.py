"""
Closure table maintenance strategy.

Keeps the closure rows of a node type consistent with its parent references:

    Tree: root → a → b

    Closure Table:
    ancestor | descendant | depth
    ---------|------------|------
    root     | root       | 0
    root     | a          | 1
    root     | b          | 2
    a        | a          | 0
    a        | b          | 1
    b        | b          | 0

The strategy never commits; callers own the transaction.
"""
import logging
from typing import Any, List, Optional

from sqlalchemy import delete, func, insert, literal, select, true, update
from sqlalchemy.orm import Session

from core.constants import ROOT_LEVEL
from core.exceptions import InvalidArgumentError
from .accessors import NodeAccessor

logger = logging.getLogger(__name__)

EDGE_COLUMNS = ['ancestor_id', 'descendant_id', 'depth']


class ClosureStrategy:
    """Writes closure edges when a node is inserted or its parent changes."""

    name = 'closure'

    def __init__(self, accessor: NodeAccessor):
        self.accessor = accessor
        self.edges = accessor.closure.__table__

    def _require_identifier(self, node: Any) -> Any:
        node_id = self.accessor.get_identifier(node)
        if node_id is None:
            raise InvalidArgumentError(
                f"Node {node!r} has no identifier, flush it before writing closure edges"
            )
        return node_id

    def _subtree_ids(self, node_id: Any):
        subtree = self.edges.alias('subtree')
        return select(subtree.c.descendant_id).where(subtree.c.ancestor_id == node_id)

    def insert_node(self, session: Session, node: Any):
        """
        Write the closure edges of a freshly flushed node.

        Args:
            session: Session holding the open transaction
            node: Node with an identifier and its final parent reference
        """
        node_id = self._require_identifier(node)
        parent_id = self.accessor.get_parent_id(node)

        session.execute(
            insert(self.edges).values(ancestor_id=node_id, descendant_id=node_id, depth=0)
        )
        if parent_id is not None:
            inherited = select(
                self.edges.c.ancestor_id,
                literal(node_id),
                self.edges.c.depth + 1
            ).where(self.edges.c.descendant_id == parent_id)
            session.execute(insert(self.edges).from_select(EDGE_COLUMNS, inherited))

        self._update_levels(session, node_id)
        logger.debug("Inserted closure edges for node %s under %s", node_id, parent_id)

    def update_node(self, session: Session, node: Any, former_parent: Optional[Any] = None):
        """
        Re-link the subtree of node under its current parent.

        Edges from ancestors outside the subtree are dropped, then every
        ancestor of the new parent gets an edge to every subtree member with
        depth ``supertree.depth + subtree.depth + 1``.

        Args:
            session: Session holding the open transaction
            node: Node whose parent reference was already changed
            former_parent: Parent before the change, for logging only
        """
        node_id = self._require_identifier(node)
        parent_id = self.accessor.get_parent_id(node)

        session.execute(
            delete(self.edges)
            .where(self.edges.c.descendant_id.in_(self._subtree_ids(node_id)))
            .where(self.edges.c.ancestor_id.not_in(self._subtree_ids(node_id)))
        )

        if parent_id is not None:
            supertree = self.edges.alias('supertree')
            subtree = self.edges.alias('subtree')
            relinked = (
                select(
                    supertree.c.ancestor_id,
                    subtree.c.descendant_id,
                    supertree.c.depth + subtree.c.depth + 1
                )
                .select_from(supertree)
                .join(subtree, true())
                .where(supertree.c.descendant_id == parent_id)
                .where(subtree.c.ancestor_id == node_id)
            )
            session.execute(insert(self.edges).from_select(EDGE_COLUMNS, relinked))

        self._update_levels(session, node_id)

        former_id = None if former_parent is None else self.accessor.get_identifier(former_parent)
        logger.debug(
            "Updated closure edges for node %s: parent %s -> %s",
            node_id, former_id, parent_id
        )

    def _update_levels(self, session: Session, node_id: Any):
        """Recompute the stored level of node and its descendants."""
        if not self.accessor.config.has_level_field:
            return

        subtree_ids: List[Any] = list(session.execute(self._subtree_ids(node_id)).scalars())
        if not subtree_ids:
            return

        id_column = self.accessor.table_column(self.accessor.id_field)
        level_column = self.accessor.table_column(self.accessor.config.level)
        deepest = self.edges.alias('deepest')
        level_expr = (
            select(func.coalesce(func.max(deepest.c.depth), 0) + ROOT_LEVEL)
            .where(deepest.c.descendant_id == id_column)
            .scalar_subquery()
        )
        session.execute(
            update(self.accessor.table)
            .where(id_column.in_(subtree_ids))
            .values({level_column.name: level_expr})
        )

        # Loaded instances still carry the old level
        for obj in list(session.identity_map.values()):
            if self.accessor.is_instance(obj) and self.accessor.get_identifier(obj) in subtree_ids:
                session.expire(obj, [self.accessor.config.level])
