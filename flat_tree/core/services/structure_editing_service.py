from __future__ import annotations

"""Service layer for structural edits on a FlatTree.

This module wraps the raising mutation API of :class:`FlatTree` in a
result-returning facade suited to interactive callers.

Scope and guarantees:
- Operates purely in-memory on a FlatTree, no file I/O.
- Invalid operations return OperationResult(success=False, ...) with clear
  messaging and leave the tree unchanged; tree errors are never re-raised.
- Successful edits are recorded in the optional EditJournal and captured by the
  optional UndoService.

Examples
--------
Basic usage:

    service = StructureEditingService(undo_service=UndoService())
    tree = service.create_tree(nodes)
    result = service.move_node(tree, "c", "parent", before="a")
    if not result.success:
        print(result.message)

"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from flat_tree.config import ConfigManager
from flat_tree.core.exceptions import FlatTreeError
from flat_tree.core.flat_tree import FlatTree
from flat_tree.core.models.edit_journal import AddEntry, EditJournal, MoveEntry, RemoveEntry
from flat_tree.core.services.undo_service import UndoService


__all__ = ["OperationResult", "StructureEditingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or display.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class StructureEditingService:
    """Encapsulates structural edit operations on a FlatTree.

    Design principles:
    - No exceptions for expected invalid actions; return OperationResult.
    - Every successful edit is journaled and snapshotted when the matching
      collaborator was given.
    - The first snapshot pushed for a tree is its baseline, taken before the
      first edit so that edit can be undone.
    - Undo and redo move the journal along with the tree, so a replay always
      reproduces the current state.
    """

    def __init__(
        self,
        undo_service: Optional[UndoService] = None,
        journal: Optional[EditJournal] = None,
    ) -> None:
        """Initialize structure editing service.

        Args:
            undo_service: Optional undo/redo history fed after each edit
            journal: Optional journal recording each successful edit
        """
        self._undo_service = undo_service
        self._journal = journal

    @property
    def undo_service(self) -> Optional[UndoService]:
        return self._undo_service

    @property
    def journal(self) -> Optional[EditJournal]:
        return self._journal

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def create_tree(self, nodes: Iterable[Any] = ()) -> FlatTree:
        """Build a FlatTree honoring the configured cycle detection setting."""
        detect_cycles = bool(ConfigManager().get_flat_tree_config().get("detect_cycles", True))
        tree: FlatTree = FlatTree(nodes, detect_cycles=detect_cycles)
        logger.info("Tree created: nodes=%d detect_cycles=%s", len(tree), detect_cycles)
        return tree

    def add_nodes(self, tree: FlatTree, nodes: Iterable[Any]) -> OperationResult:
        """Append nodes to the tree; all-or-nothing on id collisions."""
        new_nodes = list(nodes)
        logger.info("Edit: add_nodes count=%d", len(new_nodes))
        if not new_nodes:
            logger.info("Edit noop: add_nodes empty")
            return OperationResult(False, "No nodes to add.", {"count": 0})

        self._ensure_baseline(tree)
        try:
            tree.add(new_nodes)
        except FlatTreeError as exc:
            logger.warning("Edit FAIL: add_nodes error=%s", exc)
            return OperationResult(False, str(exc), {"duplicate_ids": getattr(exc, "duplicate_ids", [])})

        self._after_edit(tree, "add", AddEntry(nodes=new_nodes))
        logger.info("Edit OK: add_nodes count=%d", len(new_nodes))
        return OperationResult(True, f"Added {len(new_nodes)} node(s).", {"count": len(new_nodes)})

    def remove_node(self, tree: FlatTree, node_id: str) -> OperationResult:
        """Remove a node and all of its descendants."""
        logger.info("Edit: remove_node node=%s", node_id)
        if node_id not in tree:
            logger.info("Edit noop: remove_node node_not_found node=%s", node_id)
            return OperationResult(False, f"Node not found for id '{node_id}'.", {"node_id": node_id})

        self._ensure_baseline(tree)
        removed = tree.remove(node_id)
        removed_ids = [n.id for n in removed]

        self._after_edit(tree, "remove", RemoveEntry(node_id=node_id))
        logger.info("Edit OK: remove_node node=%s removed=%d", node_id, len(removed_ids))
        return OperationResult(
            True,
            f"Removed {len(removed_ids)} node(s).",
            {"node_id": node_id, "removed_ids": removed_ids},
        )

    def move_node(
        self,
        tree: FlatTree,
        node_id: str,
        parent_id: Optional[str] = None,
        before: Optional[str] = None,
        after: Optional[str] = None,
    ) -> OperationResult:
        """Re-parent a node and optionally place it before/after a sibling."""
        logger.info("Edit: move_node node=%s parent=%s before=%s after=%s", node_id, parent_id, before, after)
        details = MoveEntry(node_id=node_id, parent_id=parent_id, before=before, after=after)

        self._ensure_baseline(tree)
        try:
            tree.move(node_id, parent_id, before=before, after=after)
        except FlatTreeError as exc:
            logger.warning("Edit FAIL: move_node node=%s error=%s", node_id, exc)
            return OperationResult(False, str(exc), {**details, "error": type(exc).__name__})

        self._after_edit(tree, "move", details)
        logger.info("Edit OK: move_node node=%s parent=%s", node_id, parent_id)
        return OperationResult(True, "Moved node.", details)

    def undo(self, tree: FlatTree) -> OperationResult:
        """Restore the state before the last edit, if history allows."""
        if self._undo_service is None or not self._undo_service.undo(tree):
            return OperationResult(False, "Nothing to undo.")
        if self._journal is not None:
            self._journal.undo_last()
        logger.info("Edit OK: undo nodes=%d", len(tree))
        return OperationResult(True, "Undone.")

    def redo(self, tree: FlatTree) -> OperationResult:
        """Re-apply the last undone edit, if any."""
        if self._undo_service is None or not self._undo_service.redo(tree):
            return OperationResult(False, "Nothing to redo.")
        if self._journal is not None:
            self._journal.redo_last()
        logger.info("Edit OK: redo nodes=%d", len(tree))
        return OperationResult(True, "Redone.")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _ensure_baseline(self, tree: FlatTree) -> None:
        undo = self._undo_service
        if undo is not None and not undo.has_history():
            undo.push_snapshot(tree)

    def _after_edit(self, tree: FlatTree, operation: str, details: Mapping[str, Any]) -> None:
        if self._journal is not None:
            self._journal.record_edit(operation, details)
        if self._undo_service is not None:
            self._undo_service.push_snapshot(tree)
