"""
Repository pattern for closure tree access.

Provides clean separation between tree queries, tree mutations and the
code presenting trees.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from core.exceptions import InvalidArgumentError, TreeRuntimeError
from core.models import HierarchyRow, TreeConfig
from services.hierarchy_assembler import HierarchyAssembler
from services.reparenting import ReparentingCoordinator, ensure_usable
from .accessors import NodeAccessor
from .queries import EdgeQueryBuilder, HierarchyQueryBuilder
from .strategy import ClosureStrategy

logger = logging.getLogger(__name__)


def resolve_path(rows) -> List[Any]:
    """Ancestor nodes of ``(edge, ancestor)`` path rows, in row order."""
    return [ancestor for _edge, ancestor in rows]


class ClosureTreeRepository:
    """Repository for closure tree operations on one node type."""

    def __init__(
        self,
        session: Session,
        node_class: type,
        config: TreeConfig,
        strategy=None
    ):
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy database session
            node_class: Mapped node class
            config: Tree field names and closure class for node_class
            strategy: Closure maintenance strategy, defaults to ClosureStrategy
        """
        self.session = session
        self.accessor = NodeAccessor(node_class, config)
        self.strategy = strategy or ClosureStrategy(self.accessor)
        self.edge_queries = EdgeQueryBuilder(session, self.accessor)
        self.hierarchy_queries = HierarchyQueryBuilder(session, self.accessor)
        self.assembler = HierarchyAssembler(id_field=self.accessor.id_field)
        self.coordinator = ReparentingCoordinator(session, self.accessor, self.strategy)

    @property
    def node_class(self) -> type:
        return self.accessor.node_class

    # Reads

    def get_root_nodes_query(self) -> Select:
        ensure_usable(self.session)
        return self.edge_queries.root_nodes_query()

    def get_root_nodes(self) -> List[Any]:
        """Get all root nodes."""
        return list(self.session.execute(self.get_root_nodes_query()).scalars())

    def child_count(self, node: Any = None, direct: bool = False) -> int:
        """
        Count the children of node.

        Args:
            node: Subtree root, or None to count all tree nodes
            direct: Count only direct children (only roots when node is None)
        """
        ensure_usable(self.session)
        stmt = self.edge_queries.child_count_query(node, direct)
        return int(self.session.execute(stmt).scalar_one())

    def get_path_query(self, node: Any) -> Select:
        ensure_usable(self.session)
        return self.edge_queries.path_query(node)

    def get_path(self, node: Any) -> List[Any]:
        """Get the nodes from the root down to node, node last."""
        return resolve_path(self.session.execute(self.get_path_query(node)))

    def children_query(
        self,
        node: Any = None,
        direct: bool = False,
        sort_by_field: Optional[str] = None,
        direction: str = 'ASC'
    ) -> Select:
        ensure_usable(self.session)
        return self.edge_queries.children_query(node, direct, sort_by_field, direction)

    def children(
        self,
        node: Any = None,
        direct: bool = False,
        sort_by_field: Optional[str] = None,
        direction: str = 'ASC'
    ) -> List[Any]:
        """
        Get children of node.

        Args:
            node: Subtree root, or None to take all tree nodes
            direct: Only direct children (only roots when node is None)
            sort_by_field: Node field to sort by
            direction: "ASC" or "DESC"
        """
        stmt = self.children_query(node, direct, sort_by_field, direction)
        if node is None:
            return list(self.session.execute(stmt).scalars())
        return [descendant for _edge, descendant in self.session.execute(stmt)]

    def get_nodes_hierarchy_query(self, node: Any, direct: bool = False, options: Any = None) -> Select:
        ensure_usable(self.session)
        return self.hierarchy_queries.nodes_hierarchy_query(node, direct, options)

    def get_nodes_hierarchy(self, node: Any, direct: bool = False, options: Any = None) -> List[HierarchyRow]:
        """Get the level-ordered hierarchy rows below node, node included."""
        stmt = self.get_nodes_hierarchy_query(node, direct, options)
        return [
            HierarchyRow(
                edge=edge.to_dict(),
                node=self.accessor.to_dict(descendant),
                parent_id=parent_id,
                level=level
            )
            for edge, descendant, parent_id, level in self.session.execute(stmt)
        ]

    def build_tree_array(self, rows) -> List[Dict[str, Any]]:
        """Nest level-ordered hierarchy rows into node dicts with children."""
        return self.assembler.build_tree_array(rows)

    def children_hierarchy(self, node: Any, direct: bool = False, options: Any = None) -> List[Dict[str, Any]]:
        """Get the subtree of node as nested node dicts."""
        return self.build_tree_array(self.get_nodes_hierarchy(node, direct, options))

    # Writes

    def persist(self, node: Any) -> Any:
        """
        Add a new node and write its closure edges.

        The parent reference must be set before the call. The caller commits.
        """
        ensure_usable(self.session)
        if not self.accessor.is_instance(node):
            raise InvalidArgumentError("Node is not related to this repository")
        parent = self.accessor.get_parent(node)
        if parent is not None and not self.accessor.is_tracked(self.session, parent):
            raise InvalidArgumentError("Parent node is not managed by the session")

        self.session.add(node)
        self.session.flush()
        self.strategy.insert_node(self.session, node)
        return node

    def move(self, node: Any, new_parent: Optional[Any]):
        """
        Attach node and its subtree under new_parent (None makes it a root).

        Raises:
            InvalidArgumentError: If a node is untracked or new_parent lies
                                  inside the subtree of node
            TreeRuntimeError: If the transaction failed; it was rolled back
        """
        ensure_usable(self.session)
        node_id = self.edge_queries.validate_node(node)
        new_parent_id = None
        if new_parent is not None:
            new_parent_id = self.edge_queries.validate_node(new_parent)
            subtree_ids = {
                self.accessor.get_identifier(descendant)
                for descendant in self.children(node)
            }
            if new_parent_id == node_id or new_parent_id in subtree_ids:
                raise InvalidArgumentError("Cannot move a node under itself or its descendant")

        former_parent = self.accessor.get_parent(node)
        if former_parent is new_parent:
            return

        try:
            self.accessor.set_parent(node, new_parent)
            self.session.flush()
            self.strategy.update_node(self.session, node, former_parent)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error("Moving node %s failed, rolled back", node_id, exc_info=True)
            raise TreeRuntimeError(f"Transaction failed: {e}") from e

        logger.info("Moved node %s under %s", node_id, new_parent_id)

    def remove_from_tree(self, node: Any):
        """Remove node, reattaching its direct children to its parent."""
        self.coordinator.remove_from_tree(node)
