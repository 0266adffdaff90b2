from __future__ import annotations

"""Shared data structures used across the flat tree core.

This package exposes the node contract, a ready-made node dataclass and the
small value objects handed around by the traversal engine. It is intentionally
free of I/O so the contained objects can be reused in any context (unit-tests,
services, scripts, etc.).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, TypeVar

__all__ = ["TreeNode", "FlatNode", "WalkStep", "TreeIndices", "NodeT"]


class TreeNode(Protocol):
    """Minimal node contract: a unique ``id`` and an optional ``parent_id``.

    Any other attribute is opaque to the tree and passes through untouched.
    """

    id: str
    parent_id: Optional[str]


NodeT = TypeVar("NodeT", bound=TreeNode)


@dataclass(frozen=True)
class FlatNode:
    """Default node record for callers without their own node class.

    Attributes
    ----------
    id
        Unique identifier within a store.
    parent_id
        Id of the parent node, or None for a root.
    data
        Arbitrary payload carried along with the node.
    """

    id: str
    parent_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def is_root(self) -> bool:
        """Return True if this node carries no parent reference."""
        return not self.parent_id


@dataclass(frozen=True)
class WalkStep(Generic[NodeT]):
    """Per-visit information handed to a walk visitor.

    Attributes
    ----------
    trace
        Nodes from the walk start down to and including the visited node.
    is_leaf
        True if the visited node has no children in the children index.
    done
        Call to stop the whole walk after the current visit.
    """

    trace: List[NodeT]
    is_leaf: bool
    done: Callable[[], None]


@dataclass(frozen=True)
class TreeIndices(Generic[NodeT]):
    """Derived lookup tables rebuilt from the store after every mutation."""

    nodes_by_id: Dict[str, NodeT]
    children_by_id: Dict[str, List[NodeT]]
