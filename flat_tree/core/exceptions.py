from __future__ import annotations

"""Flat tree exception classes.

Mutations on a :class:`~flat_tree.core.flat_tree.FlatTree` either apply fully
or raise one of these before touching the store. Lookups of unknown ids are
not errors and never raise.
"""

from typing import Iterable, Optional


class FlatTreeError(Exception):
    """Base exception for all flat tree errors.

    All tree exceptions inherit from this base class so callers (and the
    editing service) can handle them in one place.
    """

    def __init__(self, message: str, node_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.node_id = node_id

    def __str__(self) -> str:
        if self.node_id:
            return f"[Node: {self.node_id}] {super().__str__()}"
        return super().__str__()


class InvalidMoveError(FlatTreeError):
    """Raised when a move is configured inconsistently.

    Supplying both ``before`` and ``after`` positioning hints is rejected.
    """
    pass


class NodeNotFoundError(FlatTreeError):
    """Raised when a move refers to an id that is not in the store."""
    pass


class DuplicateNodeError(FlatTreeError):
    """Raised when ``add`` is given ids that already exist in the store."""

    def __init__(self, duplicate_ids: Iterable[str]) -> None:
        self.duplicate_ids = list(duplicate_ids)
        ids_str = ", ".join(self.duplicate_ids)
        super().__init__(f"Node id already exists: {ids_str}")


class CyclicMoveError(FlatTreeError):
    """Raised when a move would place a node underneath itself or one of its descendants."""

    def __init__(self, node_id: str, parent_id: str) -> None:
        self.parent_id = parent_id
        super().__init__(
            f"Cannot move under '{parent_id}': it is the node itself or one of its descendants",
            node_id,
        )
