"""Top-level package for the flat tree toolkit.

Callers should only depend on the public API exposed here rather than
importing internal modules directly.
"""

from .core.exceptions import (
    CyclicMoveError,
    DuplicateNodeError,
    FlatTreeError,
    InvalidMoveError,
    NodeNotFoundError,
)
from .core.flat_tree import FlatTree
from .core.models import FlatNode, TreeNode, WalkStep

__version__ = "0.1.0"

__all__: list[str] = [
    "FlatTree",
    "FlatNode",
    "TreeNode",
    "WalkStep",
    "FlatTreeError",
    "InvalidMoveError",
    "NodeNotFoundError",
    "DuplicateNodeError",
    "CyclicMoveError",
]
