import logging

from flat_tree.config import ConfigManager


def test_packaged_defaults_are_loaded():
    cfg = ConfigManager()

    assert cfg.get_flat_tree_config()["detect_cycles"] is True
    assert cfg.get_flat_tree_config()["undo"]["max_history"] == 50
    assert cfg.get_logging_config()["version"] == 1
    assert "file" in cfg.get_logging_config()["handlers"]


def test_config_manager_is_a_singleton():
    assert ConfigManager() is ConfigManager()


def test_reset_forces_reload(isolated_config):
    first = ConfigManager()
    (isolated_config / "flat_tree.yml").write_text("detect_cycles: false\n", encoding="utf-8")
    assert first.get_flat_tree_config()["detect_cycles"] is True

    ConfigManager.reset()
    assert ConfigManager().get_flat_tree_config()["detect_cycles"] is False


def test_user_overrides_merge_top_level_keys(isolated_config):
    (isolated_config / "flat_tree.yml").write_text("extra: 1\n", encoding="utf-8")
    cfg = ConfigManager().get_flat_tree_config()

    assert cfg["extra"] == 1
    assert cfg["detect_cycles"] is True


def test_invalid_user_override_is_logged_and_ignored(isolated_config, caplog):
    (isolated_config / "flat_tree.yml").write_text("undo: [unclosed\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="flat_tree.config.manager"):
        cfg = ConfigManager().get_flat_tree_config()

    assert cfg["undo"]["max_history"] == 50
    assert any("Could not parse user config" in r.getMessage() for r in caplog.records)
