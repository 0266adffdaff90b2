from __future__ import annotations

"""Edit journaling model for structural edits.

This module defines a minimal in-memory journal for structural editing
operations that can be recorded during a session and later replayed against
another FlatTree (for example one rebuilt from the same initial nodes).

Scope:
- Pure core model (no I/O).
- Conservative and robust: failures during replay are collected, not raised.

Supported operations:
- "add":    {"nodes": List[TreeNode]}
- "remove": {"node_id": str}
- "move":   {"node_id": str, "parent_id": Optional[str],
             "before": Optional[str], "after": Optional[str]}

Dispatch is delegated to StructureEditingService methods:
- add     -> StructureEditingService.add_nodes
- remove  -> StructureEditingService.remove_node
- move    -> StructureEditingService.move_node
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, TypedDict
from typing import TYPE_CHECKING

import time

from flat_tree.core.flat_tree import FlatTree

if TYPE_CHECKING:
    # Import only for type checking to avoid runtime circular import
    from flat_tree.core.services.structure_editing_service import StructureEditingService

__all__ = ["AddEntry", "RemoveEntry", "MoveEntry", "JournalEntry", "EditJournal"]


class AddEntry(TypedDict):
    nodes: List[Any]


class RemoveEntry(TypedDict):
    node_id: str


class MoveEntry(TypedDict):
    node_id: str
    parent_id: Optional[str]
    before: Optional[str]
    after: Optional[str]


@dataclass
class JournalEntry:
    """Single journal entry representing one structural edit.

    Attributes
    ----------
    operation
        Operation kind, one of: "add", "remove", "move".
    details
        Operation-specific payload.
    timestamp
        Unix epoch seconds when the entry was recorded.
    """
    operation: str
    details: Dict[str, Any]
    timestamp: float


class EditJournal:
    """In-memory journal of structural edits with record/replay capabilities.

    Notes
    -----
    - No persistence. Entries hold node objects as given.
    - Replay is resilient: routine errors are collected in a report.
    - Entries follow undo/redo: ``undo_last`` sets the newest entry aside so
      it is no longer replayed, ``redo_last`` restores it, and recording a new
      edit discards whatever was set aside.
    """

    def __init__(self) -> None:
        self._entries: List[JournalEntry] = []
        self._undone: List[JournalEntry] = []

    @property
    def entries(self) -> List[JournalEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def record_edit(self, operation: str, details: Mapping[str, Any]) -> None:
        """Record a new edit entry with current timestamp.

        The payload shape is not validated here; validation happens during
        replay when dispatching to the service.
        """
        entry = JournalEntry(operation=operation, details=dict(details), timestamp=time.time())
        self._entries.append(entry)
        self._undone.clear()

    def undo_last(self) -> Optional[JournalEntry]:
        """Set the newest entry aside after its edit was undone."""
        if not self._entries:
            return None
        entry = self._entries.pop()
        self._undone.append(entry)
        return entry

    def redo_last(self) -> Optional[JournalEntry]:
        """Restore the entry most recently set aside by :meth:`undo_last`."""
        if not self._undone:
            return None
        entry = self._undone.pop()
        self._entries.append(entry)
        return entry

    def replay_edits(self, tree: FlatTree, editing_service: "StructureEditingService") -> Dict[str, Any]:
        """Replay all recorded edits against *tree*.

        Returns
        -------
        dict
            Structured report:
            {
              "applied": int,   # number of edits successfully applied
              "skipped": int,   # number of edits that were skipped or failed
              "errors": List[str],  # collected error messages
            }

        Behavior
        --------
        - Iterates entries in order and dispatches to the service.
        - Counts as applied only if the service returns success=True.
        - Entries recorded while replaying are not re-recorded: the service
          is expected to be built without this journal attached.
        """
        applied = 0
        skipped = 0
        errors: List[str] = []

        for idx, entry in enumerate(self._entries):
            op = entry.operation
            details = entry.details

            if op == "add":
                nodes = details.get("nodes")
                if not isinstance(nodes, list):
                    skipped += 1
                    errors.append(f"[{idx}] add: invalid payload {details!r}")
                    continue
                result = editing_service.add_nodes(tree, nodes)

            elif op == "remove":
                node_id = _safe_str(details.get("node_id"))
                if not node_id:
                    skipped += 1
                    errors.append(f"[{idx}] remove: invalid payload {details!r}")
                    continue
                result = editing_service.remove_node(tree, node_id)

            elif op == "move":
                node_id = _safe_str(details.get("node_id"))
                if not node_id:
                    skipped += 1
                    errors.append(f"[{idx}] move: invalid payload {details!r}")
                    continue
                result = editing_service.move_node(
                    tree,
                    node_id,
                    details.get("parent_id"),
                    before=details.get("before"),
                    after=details.get("after"),
                )

            else:
                skipped += 1
                errors.append(f"[{idx}] unsupported operation '{op}'")
                continue

            if result.success:
                applied += 1
            else:
                skipped += 1
                errors.append(f"[{idx}] {op} failed: {result.message}")

        return {"applied": applied, "skipped": skipped, "errors": errors}

    def clear_journal(self) -> None:
        """Remove all entries, including those set aside by undo."""
        self._entries.clear()
        self._undone.clear()


def _safe_str(value: Any) -> str:
    """Return the value if it's a string; otherwise empty string."""
    return value if isinstance(value, str) else ""
