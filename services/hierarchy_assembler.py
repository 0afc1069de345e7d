"""
Hierarchy Assembler

Turns the flat, level-ordered rows of a nodes hierarchy query into nested
node dictionaries with a ``children`` list each.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from core.constants import CHILDREN_KEY, PARENT_ID, SUBQUERY_LEVEL
from core.exceptions import AssemblyError
from core.models import HierarchyRow, TreeRecord

logger = logging.getLogger(__name__)


class HierarchyAssembler:
    """Single pass tree assembly over an arena of records."""

    def __init__(self, id_field: str = 'id', children_key: str = CHILDREN_KEY):
        self.id_field = id_field
        self.children_key = children_key

    def _unpack(self, row: Any) -> Tuple[Dict[str, Any], Any, int]:
        if isinstance(row, HierarchyRow):
            return row.node, row.parent_id, row.level
        if isinstance(row, Mapping):
            node = row.get('node', row.get('descendant'))
            if node is None:
                raise AssemblyError(f"Row has no node: {row!r}")
            return node, row.get(PARENT_ID), row[SUBQUERY_LEVEL]
        raise AssemblyError(f"Unsupported hierarchy row: {row!r}")

    def build_tree_array(self, rows: Iterable[Any]) -> List[Dict[str, Any]]:
        """
        Build the nested tree.

        Rows must be ordered by ascending level so that every parent row
        comes before its children. Rows at the level of the first row are
        the top of the returned tree.

        Args:
            rows: HierarchyRow instances or mappings with node, parent_id
                  and level keys

        Returns:
            List of top-level node dicts, each with nested children

        Raises:
            AssemblyError: If a row's parent was not seen before it
        """
        records: List[TreeRecord] = []
        positions: Dict[Any, int] = {}
        top: List[int] = []
        base_level = None

        for row in rows:
            node, parent_id, level = self._unpack(row)
            node_id = node[self.id_field]

            if base_level is None:
                base_level = level
            elif level < base_level:
                raise AssemblyError(
                    f"Node {node_id} at level {level} comes after level {base_level} rows",
                    node_id=node_id,
                    parent_id=parent_id
                )

            records.append(TreeRecord(node=dict(node)))
            position = len(records) - 1

            if level == base_level:
                top.append(position)
            else:
                parent_position = positions.get(parent_id)
                if parent_position is None:
                    raise AssemblyError(
                        f"Parent {parent_id} of node {node_id} was not assembled before it",
                        node_id=node_id,
                        parent_id=parent_id
                    )
                records[parent_position].children.append(position)

            positions[node_id] = position

        logger.debug("Assembled %d nodes into %d top-level trees", len(records), len(top))
        return self._materialize(records, top)

    def _materialize(self, records: List[TreeRecord], top: List[int]) -> List[Dict[str, Any]]:
        nested = [dict(record.node) for record in records]
        for record, node in zip(records, nested):
            node[self.children_key] = [nested[child] for child in record.children]
        return [nested[position] for position in top]
