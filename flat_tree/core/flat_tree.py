from __future__ import annotations

"""Flat-list tree engine.

A :class:`FlatTree` keeps every node in one ordered list (the store). Each node
knows only its own ``id`` and its ``parent_id``; hierarchy is derived by two
lookup tables, id->node and id->children, that are rebuilt from scratch after
every mutation. No pointer-based tree is ever built.

Scope and guarantees:
- Insertion order of the store is preserved across mutations, except where a
  move explicitly repositions a node.
- Mutations are all-or-nothing: validation happens before the store is
  touched, and the indices are swapped in only after a full rebuild.
- Lookups of unknown ids return empty results instead of raising.

Examples
--------
Basic usage:

    tree = FlatTree([FlatNode("root"), FlatNode("a", "root"), FlatNode("b", "a")])
    tree.get_all_trace_list("root")   # [[root, a, b]]
    tree.move("b", "root", before="a")
    tree.remove("a")

"""

from collections import Counter
import logging
from typing import Callable, Generic, Iterable, Iterator, List, Optional, Set

from flat_tree.core.exceptions import (
    CyclicMoveError,
    DuplicateNodeError,
    InvalidMoveError,
    NodeNotFoundError,
)
from flat_tree.core.models import NodeT, TreeIndices, WalkStep
from flat_tree.core.utils import build_indices, reduce_trace_list, with_parent_id

__all__ = ["FlatTree", "Visitor"]

logger = logging.getLogger(__name__)

Visitor = Callable[[NodeT, WalkStep[NodeT]], None]


class FlatTree(Generic[NodeT]):
    """Tree stored as a flat ordered list of nodes with derived lookup caches.

    Parameters
    ----------
    nodes : Iterable[NodeT]
        Initial store content, kept verbatim and in order. Ids are not checked
        for uniqueness here; later duplicates win in the id lookup.
    detect_cycles : bool, default=True
        Reject moves that would put a node under itself or one of its
        descendants. When False, such moves are applied as requested.

    Notes
    -----
    - Not thread-safe; a tree is expected to have a single owner.
    - Every mutation costs one O(n) index rebuild.
    """

    def __init__(self, nodes: Iterable[NodeT] = (), *, detect_cycles: bool = True) -> None:
        self._nodes: List[NodeT] = list(nodes)
        self._detect_cycles = detect_cycles
        self._indices: TreeIndices[NodeT] = build_indices(self._nodes)

    reduce_trace_list = staticmethod(reduce_trace_list)

    # -------------------------------------------------------------------------
    # Store & indices
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> List[NodeT]:
        """Return the store in order (a copy; mutate through the tree API)."""
        return list(self._nodes)

    @property
    def detect_cycles(self) -> bool:
        return self._detect_cycles

    def build_cache(self) -> None:
        """Rebuild both indices from the current store and swap them in."""
        self._indices = build_indices(self._nodes)

    def reset(self, nodes: Iterable[NodeT]) -> None:
        """Replace the whole store with *nodes* and rebuild the indices."""
        self._nodes = list(nodes)
        self.build_cache()
        logger.debug("Tree reset: %d nodes", len(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[NodeT]:
        return iter(list(self._nodes))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._indices.nodes_by_id

    def __repr__(self) -> str:
        return f"FlatTree(nodes={len(self._nodes)}, roots={len(self.find_all_root())})"

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def walk(self, start_id: str, visitor: Visitor) -> None:
        """Depth-first pre-order walk of the subtree rooted at *start_id*.

        The visitor is called as ``visitor(node, step)`` where ``step`` is a
        :class:`WalkStep` carrying the trace from *start_id* to ``node``, the
        leaf flag and a ``done`` callable. Calling ``done()`` ends the whole
        walk once the visitor returns. Unknown start ids are a no-op.

        A child that already appears on the current trace (only possible with
        cyclic parent references) is skipped.
        """
        indices = self._indices
        start = indices.nodes_by_id.get(start_id)
        if start is None:
            return

        stop_requested = False

        def done() -> None:
            nonlocal stop_requested
            stop_requested = True

        # Children are pushed in reverse so they pop in store order.
        stack: List[tuple[NodeT, List[NodeT]]] = [(start, [])]
        while stack:
            node, parent_trace = stack.pop()
            trace = [*parent_trace, node]
            children = indices.children_by_id.get(node.id)
            is_leaf = not children

            visitor(node, WalkStep(trace=trace, is_leaf=is_leaf, done=done))

            if stop_requested:
                return
            if is_leaf:
                continue

            on_trace = {n.id for n in trace}
            for child in reversed(children):
                if child.id in on_trace:
                    logger.warning("Walk: cycle detected, skipping node=%s under parent=%s", child.id, node.id)
                    continue
                stack.append((child, trace))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, nodes: Iterable[NodeT]) -> None:
        """Append *nodes* to the end of the store, in order.

        Raises
        ------
        DuplicateNodeError
            If any id already exists in the store or repeats within *nodes*.
            Nothing is added in that case.
        """
        new_nodes = list(nodes)
        counts = Counter(n.id for n in new_nodes)
        duplicates = [
            node_id
            for node_id in counts
            if node_id in self._indices.nodes_by_id or counts[node_id] > 1
        ]
        if duplicates:
            raise DuplicateNodeError(duplicates)

        self._nodes = [*self._nodes, *new_nodes]
        self.build_cache()
        logger.debug("Tree add: count=%d total=%d", len(new_nodes), len(self._nodes))

    def remove(self, start_id: str) -> List[NodeT]:
        """Remove *start_id* and all of its descendants.

        Returns the removed nodes in store order. Unknown ids remove nothing.
        """
        doomed: Set[str] = set()
        self.walk(start_id, lambda node, _step: doomed.add(node.id))
        if not doomed:
            return []

        removed = [n for n in self._nodes if n.id in doomed]
        self._nodes = [n for n in self._nodes if n.id not in doomed]
        self.build_cache()
        logger.debug("Tree remove: start=%s removed=%d", start_id, len(removed))
        return removed

    def move(
        self,
        node_id: str,
        parent_id: Optional[str] = None,
        *,
        before: Optional[str] = None,
        after: Optional[str] = None,
    ) -> NodeT:
        """Re-parent *node_id* and optionally reposition it in the store.

        The node is replaced by a copy carrying *parent_id* (None makes it a
        root). Without a hint it keeps its position; with ``before``/``after``
        it is taken out and reinserted right before/after the node holding
        that id.

        Returns the moved (copied) node.

        Raises
        ------
        InvalidMoveError
            If both ``before`` and ``after`` are given, or a hint names the
            moved node itself.
        NodeNotFoundError
            If *node_id* or the hinted id is not in the store.
        CyclicMoveError
            If cycle detection is on and *parent_id* is the node or one of
            its descendants.
        """
        if before and after:
            raise InvalidMoveError("before and after cannot both be set", node_id)

        target_index = self._index_of(node_id)
        if target_index < 0:
            raise NodeNotFoundError("Node not found", node_id)

        anchor_id = before or after
        if anchor_id:
            if anchor_id == node_id:
                raise InvalidMoveError("Cannot position a node relative to itself", node_id)
            if anchor_id not in self._indices.nodes_by_id:
                raise NodeNotFoundError("Positioning anchor not found", anchor_id)

        if self._detect_cycles and parent_id and self._is_in_subtree(parent_id, node_id):
            raise CyclicMoveError(node_id, parent_id)

        moved = with_parent_id(self._nodes[target_index], parent_id)
        nodes = list(self._nodes)
        if anchor_id:
            del nodes[target_index]
            anchor_index = next(i for i, n in enumerate(nodes) if n.id == anchor_id)
            nodes.insert(anchor_index if before else anchor_index + 1, moved)
        else:
            nodes[target_index] = moved

        self._nodes = nodes
        self.build_cache()
        logger.debug(
            "Tree move: node=%s parent=%s before=%s after=%s", node_id, parent_id, before, after
        )
        return moved

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_all_parent(self, start_id: str) -> List[NodeT]:
        """Return the ancestors of *start_id*, root-most first, excluding itself.

        Unknown ids yield an empty list. Climbing stops at a missing parent or
        at an id already seen.
        """
        nodes_by_id = self._indices.nodes_by_id
        chain: List[NodeT] = []
        seen: Set[str] = set()

        current = nodes_by_id.get(start_id)
        while current is not None and current.id not in seen:
            seen.add(current.id)
            chain.append(current)
            current = nodes_by_id.get(current.parent_id) if current.parent_id else None

        chain.reverse()
        # Drop the start node itself
        return chain[:-1]

    def find_all_root(self) -> List[NodeT]:
        return [n for n in self._nodes if not n.parent_id]

    def is_leaf(self, node_id: str) -> bool:
        return not self._indices.children_by_id.get(node_id)

    def get_by_id(self, node_id: str) -> Optional[NodeT]:
        return self._indices.nodes_by_id.get(node_id)

    def get_flat_children(self, node_id: str) -> List[NodeT]:
        return list(self._indices.children_by_id.get(node_id, []))

    def get_all_trace_list(self, start_id: str) -> List[List[NodeT]]:
        """Return one trace per leaf reachable from *start_id*, in walk order."""
        traces: List[List[NodeT]] = []

        def collect(_node: NodeT, step: WalkStep[NodeT]) -> None:
            if step.is_leaf:
                traces.append(step.trace)

        self.walk(start_id, collect)
        return traces

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _index_of(self, node_id: str) -> int:
        for i, node in enumerate(self._nodes):
            if node.id == node_id:
                return i
        return -1

    def _is_in_subtree(self, candidate_id: str, root_id: str) -> bool:
        """Return True if *candidate_id* is *root_id* or one of its descendants."""
        found = False

        def check(node: NodeT, step: WalkStep[NodeT]) -> None:
            nonlocal found
            if node.id == candidate_id:
                found = True
                step.done()

        self.walk(root_id, check)
        return found
