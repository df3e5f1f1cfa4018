from __future__ import annotations

import os
from pathlib import Path

from supermemory_claude.constants import ENV_HOME

PROJECT_SETTINGS_RELPATH = Path(".claude") / ".supermemory-claude" / "settings.json"


def state_dir() -> Path:
    override = os.environ.get(ENV_HOME)
    if override:
        return Path(override).expanduser()
    return Path("~/.supermemory-claude").expanduser()


def settings_file() -> Path:
    return state_dir() / "settings.json"


def credentials_file() -> Path:
    return state_dir() / "credentials.json"


def trackers_dir() -> Path:
    return state_dir() / "trackers"
