"""Shared fixtures for the flat tree test-suite.

Every test runs against the packaged configuration only: user overrides are
redirected to a temporary directory and the config singleton is reset.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from flat_tree.config import ConfigManager
from flat_tree.core.flat_tree import FlatTree
from flat_tree.core.models import FlatNode

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user config overrides at an empty temp dir and reload config."""
    config_dir = tmp_path / "user_config"
    config_dir.mkdir()
    monkeypatch.setenv("FLAT_TREE_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def node():
    """Factory: node("b", "a") -> FlatNode(id="b", parent_id="a")."""
    def factory(node_id, parent_id=None, **data):
        return FlatNode(node_id, parent_id, dict(data))
    return factory


@pytest.fixture
def sample_nodes(node):
    """Two roots; r1 has children a (with a1, a2) and b; r2 has c.

        r1
        ├── a
        │   ├── a1
        │   └── a2
        └── b
        r2
        └── c
    """
    return [
        node("r1"),
        node("a", "r1"),
        node("a1", "a"),
        node("b", "r1"),
        node("r2"),
        node("a2", "a"),
        node("c", "r2"),
    ]


@pytest.fixture
def sample_tree(sample_nodes):
    return FlatTree(sample_nodes)


@pytest.fixture
def ids():
    """Map a node sequence (or list of sequences) to ids for terse assertions."""
    def to_ids(seq):
        return [n.id for n in seq]
    return to_ids
