"""Pytest configuration for collection-filter tests."""

import logging

import pytest

from collection_filter.schema import registry


@pytest.fixture(autouse=True)
def fresh_registry():
    """Reload the built-in registry for every test."""
    registry.reset_cache()
    yield
    registry.reset_cache()


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point global/project settings scopes at a temporary directory."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    return tmp_path


@pytest.fixture
def restore_root_logger():
    """Remove handlers added to the root logger during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
