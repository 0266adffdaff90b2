from __future__ import annotations

"""Undo/redo snapshot management for FlatTree.

This service performs pure in-memory history tracking of a tree's store.
Snapshots are immutable tuples of nodes; restoring one replaces the store of
the provided tree and rebuilds its indices.

Design principles
-----------------
- No I/O.
- Snapshots are immutable once stored.
- Redo stack is cleared on every new snapshot push (standard undo/redo behavior).
- Memory usage controlled by a max_history policy (trim oldest).

Notes
-----
Nodes themselves are not copied: the tree never mutates a node in place (a
move stores a copy), so holding references is enough to capture a state.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from flat_tree.config import ConfigManager
from flat_tree.core.flat_tree import FlatTree


@dataclass(frozen=True)
class _Snapshot:
    """Immutable in-memory snapshot of a FlatTree store.

    Attributes
    ----------
    nodes :
        The store content, in order.
    """

    nodes: Tuple[Any, ...]


class UndoService:
    """Manage undo/redo stacks for :class:`FlatTree`.

    Parameters
    ----------
    max_history : int, optional
        Maximum number of undoable steps to keep. The undo stack holds one more
        snapshot than that (the baseline); oldest entries are discarded when the
        capacity is exceeded. Values below 1 are coerced to 1. When omitted,
        ``undo.max_history`` from the flat tree configuration is used (50 if
        unset).

    Notes
    -----
    - Push operations clear the redo stack.
    - Undo is baseline-oriented: callers push a snapshot before the first
      mutation and after each mutation, so undo needs at least two entries.

    Examples
    --------
    >>> from flat_tree.core.models import FlatNode
    >>> tree = FlatTree([FlatNode("a")])
    >>> svc = UndoService(max_history=10)
    >>> svc.push_snapshot(tree)
    >>> tree.add([FlatNode("b", "a")])
    >>> svc.push_snapshot(tree)
    >>> svc.undo(tree)
    True
    """

    def __init__(self, max_history: Optional[int] = None) -> None:
        if max_history is None:
            max_history = _configured_max_history()
        self._max_history: int = max(1, int(max_history))
        self._undo_stack: List[_Snapshot] = []
        self._redo_stack: List[_Snapshot] = []

    @property
    def max_history(self) -> int:
        return self._max_history

    # --------------------------------------------------------------------- API

    def push_snapshot(self, tree: FlatTree) -> None:
        """Capture the current store and push it onto the undo stack.

        The redo stack is cleared. If the undo stack holds more than max_history
        steps past its baseline, the oldest snapshot is dropped.
        """
        self._undo_stack.append(_Snapshot(nodes=tuple(tree.nodes)))
        self._redo_stack.clear()
        self._trim(self._undo_stack, self._max_history + 1)

    def undo(self, tree: FlatTree) -> bool:
        """Restore the previous state into *tree*.

        Given undo_stack = [..., baseline, post] and tree == post:
        - Pop 'post' and push it onto redo_stack.
        - Restore 'baseline' from the new top of undo_stack.
        """
        if len(self._undo_stack) < 2:
            return False

        post_snap = self._undo_stack.pop()
        self._restore(tree, self._undo_stack[-1])

        self._redo_stack.append(post_snap)
        self._trim(self._redo_stack, self._max_history)
        return True

    def redo(self, tree: FlatTree) -> bool:
        """Re-apply a state that was previously undone."""
        if not self._redo_stack:
            return False

        post_snap = self._redo_stack.pop()
        self._restore(tree, post_snap)

        self._undo_stack.append(post_snap)
        self._trim(self._undo_stack, self._max_history + 1)
        return True

    def can_undo(self) -> bool:
        """Return True if an undo operation is currently possible."""
        return len(self._undo_stack) > 1

    def can_redo(self) -> bool:
        """Return True if a redo operation is currently possible."""
        return len(self._redo_stack) > 0

    def has_history(self) -> bool:
        """Return True if any snapshot (undo or redo) is held."""
        return bool(self._undo_stack or self._redo_stack)

    def clear(self) -> None:
        """Clear both undo and redo histories."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    # --------------------------------------------------------------- Internals

    @staticmethod
    def _trim(stack: List[_Snapshot], limit: int) -> None:
        overflow = len(stack) - limit
        if overflow > 0:
            del stack[0:overflow]

    @staticmethod
    def _restore(tree: FlatTree, snap: _Snapshot) -> None:
        tree.reset(snap.nodes)


def _configured_max_history() -> int:
    undo_cfg = ConfigManager().get_flat_tree_config().get("undo") or {}
    return undo_cfg.get("max_history", 50)
