import pytest

from flat_tree.core.models.edit_journal import EditJournal
from flat_tree.core.services.structure_editing_service import StructureEditingService
from flat_tree.core.services.undo_service import UndoService


@pytest.fixture
def undo_service():
    return UndoService(max_history=50)


@pytest.fixture
def edit_journal():
    return EditJournal()


@pytest.fixture
def structure_editing_service(undo_service, edit_journal):
    return StructureEditingService(undo_service=undo_service, journal=edit_journal)


@pytest.fixture
def bare_service():
    # No history, no journal: pure result-returning facade
    return StructureEditingService()
