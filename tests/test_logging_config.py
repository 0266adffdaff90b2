import logging
import logging.handlers
import os

import pytest

from flat_tree.logging_config import setup_logging


def _is_pytest_handler(handler):
    return type(handler).__module__.startswith("_pytest")


@pytest.fixture
def restore_logging():
    """Keep global logging state from leaking between tests."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    watched = [
        logging.getLogger("flat_tree.core.flat_tree"),
        logging.getLogger("flat_tree.core.services.structure_editing_service"),
        logging.getLogger("flat_tree.config.manager"),
    ]
    saved_levels = [(lg, lg.level, list(lg.handlers)) for lg in watched]
    yield
    # pytest swaps its own capture handlers per phase; leave those alone
    for h in list(root.handlers):
        if h not in saved_handlers and not _is_pytest_handler(h):
            root.removeHandler(h)
            h.close()
    for h in saved_handlers:
        if h not in root.handlers and not _is_pytest_handler(h):
            root.addHandler(h)
    root.setLevel(saved_level)
    for lg, level, handlers in saved_levels:
        lg.setLevel(level)
        lg.handlers[:] = handlers


def test_setup_logging_writes_to_log_dir(tmp_path, monkeypatch, restore_logging):
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("FLAT_TREE_LOG_DIR", str(log_dir))

    setup_logging()

    file_handlers = [
        h for h in logging.getLogger().handlers
        if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(file_handlers) == 1
    assert file_handlers[0].baseFilename == os.path.abspath(str(log_dir / "app.log"))
    assert (log_dir / "app.log").exists()


def test_invalid_logging_config_falls_back_to_console(tmp_path, monkeypatch, isolated_config, restore_logging):
    monkeypatch.setenv("FLAT_TREE_LOG_DIR", str(tmp_path / "logs"))
    (isolated_config / "logging.yml").write_text(
        "handlers:\n  bad:\n    class: no.such.Handler\n", encoding="utf-8"
    )

    setup_logging()

    handlers = logging.getLogger().handlers
    assert any(type(h) is logging.StreamHandler for h in handlers)
    assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in handlers)


def test_debug_edits_override(tmp_path, monkeypatch, restore_logging):
    monkeypatch.setenv("FLAT_TREE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("FLAT_TREE_DEBUG_EDITS", "true")
    monkeypatch.setenv("FLAT_TREE_DEBUG_MODULES", "flat_tree.config.manager")

    setup_logging()

    assert logging.getLogger("flat_tree.core.flat_tree").level == logging.DEBUG
    assert logging.getLogger("flat_tree.core.services.structure_editing_service").level == logging.DEBUG
    assert logging.getLogger("flat_tree.config.manager").level == logging.DEBUG
