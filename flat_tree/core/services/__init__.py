from __future__ import annotations

"""High-level services built on top of the flat tree engine.

Public API: structure editing with result objects, and undo/redo history.
"""

from .undo_service import UndoService  # noqa: F401
from .structure_editing_service import OperationResult, StructureEditingService  # noqa: F401

__all__: list[str] = [
    "OperationResult",
    "StructureEditingService",
    "UndoService",
]
