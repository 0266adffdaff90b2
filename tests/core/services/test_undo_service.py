import pytest

from flat_tree.core.flat_tree import FlatTree
from flat_tree.core.services.undo_service import UndoService


@pytest.fixture
def tree(node):
    return FlatTree([node("root"), node("a", "root"), node("b", "root")])


@pytest.fixture
def service():
    return UndoService(max_history=3)


def _ids(tree):
    return [n.id for n in tree.nodes]


def test_push_snapshot_clears_redo_and_enforces_max_history(tree, service, node):
    service.push_snapshot(tree)  # 1
    tree.add([node("c", "a")])
    service.push_snapshot(tree)  # 2
    tree.add([node("d", "b")])
    service.push_snapshot(tree)  # 3
    tree.remove("a")
    service.push_snapshot(tree)  # 4
    tree.add([node("e")])
    service.push_snapshot(tree)  # 5 -> trimmed to 4 (baseline + 3 steps)

    assert service.can_undo() is True
    assert service.can_redo() is False

    # Three undoable steps remain; the first baseline was dropped
    assert service.undo(tree) is True
    assert service.undo(tree) is True
    assert service.undo(tree) is True
    assert service.undo(tree) is False
    assert _ids(tree) == ["root", "a", "b", "c"]


def test_undo_redo_roundtrip_restores_state_in_place(tree, service, node):
    service.push_snapshot(tree)
    baseline = _ids(tree)

    tree.move("b", "a")
    tree.add([node("e", "b")])
    service.push_snapshot(tree)
    mutated = _ids(tree)

    assert service.undo(tree) is True
    assert _ids(tree) == baseline
    assert tree.get_by_id("b").parent_id == "root"
    assert tree.get_flat_children("b") == []

    assert service.redo(tree) is True
    assert _ids(tree) == mutated
    assert tree.get_by_id("b").parent_id == "a"


def test_can_undo_can_redo_transitions(tree, service, node):
    assert service.can_undo() is False
    assert service.can_redo() is False

    service.push_snapshot(tree)
    assert service.can_undo() is False  # a lone baseline cannot be undone

    tree.add([node("x")])
    service.push_snapshot(tree)
    assert service.can_undo() is True
    assert service.can_redo() is False

    assert service.undo(tree) is True
    assert service.can_redo() is True

    assert service.redo(tree) is True
    assert service.can_redo() is False

    # Pushing a new snapshot clears redo
    service.undo(tree)
    tree.add([node("y")])
    service.push_snapshot(tree)
    assert service.can_redo() is False


def test_undo_on_empty_stack_returns_false(tree, service):
    assert service.undo(tree) is False


def test_redo_on_empty_stack_returns_false(tree, service):
    assert service.redo(tree) is False


def test_snapshots_are_isolated_from_later_mutations(tree, service, node):
    service.push_snapshot(tree)
    tree.add([node("late")])
    service.push_snapshot(tree)
    tree.remove("late")

    # Redo/undo operate on captured stores, not on the live list
    assert service.undo(tree) is True
    assert "late" not in tree
    assert service.redo(tree) is True
    assert "late" in tree


def test_clear_and_has_history(tree, service):
    assert service.has_history() is False
    service.push_snapshot(tree)
    assert service.has_history() is True
    service.clear()
    assert service.has_history() is False


def test_max_history_coerced_to_one():
    assert UndoService(max_history=0).max_history == 1


def test_single_step_history_keeps_its_baseline(tree, node):
    service = UndoService(max_history=1)
    service.push_snapshot(tree)
    tree.add([node("x")])
    service.push_snapshot(tree)
    tree.add([node("y")])
    service.push_snapshot(tree)

    assert service.undo(tree) is True
    assert _ids(tree) == ["root", "a", "b", "x"]
    assert service.undo(tree) is False
    assert service.redo(tree) is True
    assert _ids(tree) == ["root", "a", "b", "x", "y"]


def test_max_history_defaults_from_config():
    assert UndoService().max_history == 50


def test_max_history_user_override(isolated_config):
    (isolated_config / "flat_tree.yml").write_text("undo:\n  max_history: 7\n", encoding="utf-8")
    assert UndoService().max_history == 7
