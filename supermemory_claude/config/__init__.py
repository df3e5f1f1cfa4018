"""Settings for supermemory-claude.

Global settings live in ~/.supermemory-claude/settings.json, project overrides in
<project>/.claude/.supermemory-claude/settings.json. Environment variables win
over both for the API key, debug switch and API URL.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from structlog import get_logger

from supermemory_claude.config.loader import load_global_settings, load_project_settings
from supermemory_claude.config.schema import GlobalSettings, ProjectSettings
from supermemory_claude.constants import DEFAULT_API_URL, ENV_API_KEY, ENV_API_URL, ENV_DEBUG
from supermemory_claude.errors import MissingApiKeyError
from supermemory_claude.paths import credentials_file
from supermemory_claude.project import get_project_root

logger = get_logger(__name__)

__all__ = [
    "CaptureSettings",
    "GlobalSettings",
    "ProjectSettings",
    "get_api_key",
    "get_api_url",
    "load_project_settings_for",
    "load_settings",
    "resolve_capture_settings",
]


@dataclass(frozen=True)
class CaptureSettings:
    """Effective transcript-capture configuration after merging global and project settings."""

    include_tools: tuple[str, ...] = ()
    signal_extraction: bool = False
    signal_keywords: tuple[str, ...] = ()
    signal_turns_before: int = 3


def _merge_lower(*lists: list[str]) -> tuple[str, ...]:
    merged: dict[str, None] = {}
    for values in lists:
        for value in values:
            lowered = value.strip().lower()
            if lowered:
                merged.setdefault(lowered, None)
    return tuple(merged)


def load_settings(path: Optional[Path] = None) -> GlobalSettings:
    """Load global settings and apply environment overrides."""
    settings = load_global_settings(path)
    updates: dict[str, object] = {}
    env_key = os.environ.get(ENV_API_KEY)
    if env_key:
        updates["api_key"] = env_key
    if os.environ.get(ENV_DEBUG) == "true":
        updates["debug"] = True
    return settings.model_copy(update=updates) if updates else settings


def load_project_settings_for(cwd: Optional[str]) -> ProjectSettings:
    return load_project_settings(get_project_root(cwd or os.getcwd()))


def resolve_capture_settings(settings: GlobalSettings, project: Optional[ProjectSettings] = None) -> CaptureSettings:
    project = project or ProjectSettings()

    signal_extraction = (
        project.signal_extraction if project.signal_extraction is not None else settings.signal_extraction
    )
    turns_before = project.signal_turns_before or settings.signal_turns_before

    return CaptureSettings(
        include_tools=_merge_lower(settings.include_tools, project.include_tools),
        signal_extraction=signal_extraction,
        signal_keywords=_merge_lower(settings.signal_keywords, project.signal_keywords),
        signal_turns_before=turns_before,
    )


def _load_credentials_api_key() -> Optional[str]:
    path = credentials_file()
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Failed to read credentials %s: %s", path, exc)
        return None
    api_key = data.get("apiKey") if isinstance(data, dict) else None
    return api_key if isinstance(api_key, str) and api_key else None


def get_api_key(settings: GlobalSettings, project: Optional[ProjectSettings] = None) -> str:
    """Resolve the API key: env, global settings, project settings, stored credentials."""
    for candidate in (
        os.environ.get(ENV_API_KEY),
        settings.api_key,
        project.api_key if project else None,
        _load_credentials_api_key(),
    ):
        if candidate:
            return candidate
    raise MissingApiKeyError("No Supermemory API key configured")


def get_api_url() -> str:
    return os.environ.get(ENV_API_URL) or DEFAULT_API_URL
