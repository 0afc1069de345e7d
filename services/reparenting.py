"""
Reparenting Service

Removes a node from a closure tree while keeping its descendants: the
node's direct children are attached to the node's parent, their closure
edges are rewritten, and the node is deleted, all in one transaction.
"""
import logging
from typing import Any

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from core.exceptions import InvalidArgumentError, SessionInvalidatedError, TreeRuntimeError
from data.accessors import NodeAccessor

logger = logging.getLogger(__name__)

# Key in Session.info marking a session ruined by a failed tree transaction
INVALIDATED_KEY = 'closure_tree_invalidated'


def is_invalidated(session: Session) -> bool:
    return bool(session.info.get(INVALIDATED_KEY))


def ensure_usable(session: Session):
    """Raise if a failed tree transaction invalidated session."""
    if is_invalidated(session):
        raise SessionInvalidatedError(
            "Session was invalidated by a failed tree transaction, open a new one"
        )


class ReparentingCoordinator:
    """Detaches nodes from a closure tree transactionally."""

    def __init__(self, session: Session, accessor: NodeAccessor, strategy):
        """
        Initialize the coordinator.

        Args:
            session: SQLAlchemy session owning the transaction
            accessor: Field access for the managed node type
            strategy: Closure maintenance strategy providing
                      ``update_node(session, node, former_parent)``
        """
        self.session = session
        self.accessor = accessor
        self.strategy = strategy

    def _validate(self, node: Any):
        if not self.accessor.is_instance(node):
            raise InvalidArgumentError("Node is not related to this repository")
        if not self.accessor.is_tracked(self.session, node) \
                or not self.accessor.has_valid_identifier(node):
            raise InvalidArgumentError("Node is not managed by the session")

    def remove_from_tree(self, node: Any):
        """
        Remove node and reattach its direct children to its parent.

        On success the node is expunged from the session and must not be
        used afterwards.

        Raises:
            InvalidArgumentError: If node is foreign or untracked, before any write
            TreeRuntimeError: If the transaction failed; it was rolled back
                              and the session is invalidated
        """
        ensure_usable(self.session)
        self._validate(node)

        accessor = self.accessor
        node_id = accessor.get_identifier(node)
        parent = accessor.get_parent(node)
        parent_id = None if parent is None else accessor.get_identifier(parent)

        id_column = accessor.table_column(accessor.id_field)
        parent_column = accessor.table_column(accessor.parent_id_field)
        edges = accessor.closure.__table__

        try:
            children = self.session.execute(
                select(accessor.node_class).where(accessor.parent_id_column == node_id)
            ).scalars().all()

            for child in children:
                child_id = accessor.get_identifier(child)
                # Set without history so the next flush sees no parent change
                accessor.sync_parent(child, parent)
                self.session.execute(
                    update(accessor.table)
                    .where(id_column == child_id)
                    .values({parent_column.name: parent_id})
                )
                self.strategy.update_node(self.session, child, node)
                logger.debug("Reparented node %s from %s to %s", child_id, node_id, parent_id)

            self.session.execute(
                delete(edges).where(
                    or_(edges.c.ancestor_id == node_id, edges.c.descendant_id == node_id)
                )
            )
            self.session.execute(delete(accessor.table).where(id_column == node_id))
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            self._invalidate()
            logger.error("Removing node %s from tree failed, rolled back", node_id, exc_info=True)
            raise TreeRuntimeError(f"Transaction failed: {e}") from e

        if node in self.session:
            self.session.expunge(node)
        logger.info(
            "Removed node %s from tree, %d children moved to %s",
            node_id, len(children), parent_id
        )

    def _invalidate(self):
        self.session.close()
        self.session.info[INVALIDATED_KEY] = True
