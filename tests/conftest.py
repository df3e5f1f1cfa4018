"""Pytest configuration for supermemory-claude tests."""

import pytest

from supermemory_claude.constants import ENV_API_KEY, ENV_API_URL, ENV_DEBUG, ENV_HOME, ENV_LOG_LEVEL
from supermemory_claude.logging_config import setup_logging

setup_logging("DEBUG")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the per-user state directory at a temp dir and clear env overrides."""
    home = tmp_path / "supermemory-home"
    monkeypatch.setenv(ENV_HOME, str(home))
    for name in (ENV_API_KEY, ENV_API_URL, ENV_DEBUG):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv(ENV_LOG_LEVEL, "DEBUG")
    return home


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))
