from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from supermemory_claude.constants import (
    DEFAULT_MAX_PROFILE_ITEMS,
    DEFAULT_SIGNAL_KEYWORDS,
    DEFAULT_SIGNAL_TURNS_BEFORE,
)


class _SettingsModel(BaseModel):
    # Settings files historically use camelCase keys (includeTools, signalExtraction, ...).
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    api_key: Optional[str] = None
    include_tools: List[str] = []
    signal_keywords: List[str] = []

    @field_validator("include_tools", "signal_keywords", mode="before")
    @classmethod
    def parse_string_list(cls, v: object) -> object:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


class ProjectSettings(_SettingsModel):
    """Per-project overrides, read from <project>/.claude/.supermemory-claude/settings.json."""

    signal_extraction: Optional[bool] = None
    signal_turns_before: Optional[int] = Field(default=None, ge=1)


class GlobalSettings(_SettingsModel):
    """User-level settings, read from ~/.supermemory-claude/settings.json."""

    max_profile_items: int = Field(default=DEFAULT_MAX_PROFILE_ITEMS, ge=0)
    debug: bool = False
    inject_profile: bool = True
    signal_extraction: bool = False
    signal_keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_SIGNAL_KEYWORDS))
    signal_turns_before: int = Field(default=DEFAULT_SIGNAL_TURNS_BEFORE, ge=1)
