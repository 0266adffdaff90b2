from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free; they never touch a tree instance and can be
used on any node sequence.
"""

from copy import copy
from dataclasses import is_dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Set

from flat_tree.core.models import NodeT, TreeIndices

__all__ = [
    "build_indices",
    "with_parent_id",
    "reduce_trace_list",
]


def build_indices(nodes: Sequence[NodeT]) -> TreeIndices[NodeT]:
    """Return fresh id->node and id->children lookups for *nodes*.

    Later duplicates win in the id->node map. Every node gets a children entry,
    leaves included; children keep store order. Nodes whose parent is not in
    *nodes* are indexed by id but appear in no children list.
    """
    nodes_by_id: Dict[str, NodeT] = {}
    children_by_id: Dict[str, List[NodeT]] = {}

    for node in nodes:
        nodes_by_id[node.id] = node
        children_by_id[node.id] = []

    for node in nodes:
        if node.parent_id and node.parent_id in children_by_id:
            children_by_id[node.parent_id].append(node)

    return TreeIndices(nodes_by_id=nodes_by_id, children_by_id=children_by_id)


def with_parent_id(node: NodeT, parent_id: Optional[str]) -> NodeT:
    """Return a copy of *node* whose ``parent_id`` is replaced.

    Dataclasses (frozen ones included) are copied with ``dataclasses.replace``
    and named tuples with ``_replace``; any other object is shallow-copied and
    the attribute is set on the copy.
    """
    if is_dataclass(node) and not isinstance(node, type):
        return replace(node, parent_id=parent_id)
    if isinstance(node, tuple) and hasattr(node, "_replace"):
        return node._replace(parent_id=parent_id)
    clone = copy(node)
    clone.parent_id = parent_id
    return clone


def reduce_trace_list(trace_lists: Iterable[Iterable[NodeT]]) -> List[NodeT]:
    """Merge traces into one list, keeping the first occurrence of each id.

    Examples:
        >>> from flat_tree.core.models import FlatNode
        >>> a, b, c = FlatNode("a"), FlatNode("b", "a"), FlatNode("c", "b")
        >>> [n.id for n in reduce_trace_list([[a, b], [b, c]])]
        ['a', 'b', 'c']
    """
    seen: Set[str] = set()
    merged: List[NodeT] = []
    for trace in trace_lists:
        for node in trace:
            if node.id in seen:
                continue
            merged.append(node)
            seen.add(node.id)
    return merged
