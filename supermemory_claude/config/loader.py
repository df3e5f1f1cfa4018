import os
import re
from pathlib import Path
from typing import Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError
from structlog import get_logger

from supermemory_claude.config.schema import GlobalSettings, ProjectSettings
from supermemory_claude.paths import PROJECT_SETTINGS_RELPATH, settings_file

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def expand_env_vars(config: object) -> object:
    """Recursively replace ${VAR} patterns with environment variable values.

    Unset variables are left as-is.
    """
    if isinstance(config, dict):
        return {k: expand_env_vars(v) for k, v in config.items()}
    if isinstance(config, list):
        return [expand_env_vars(item) for item in config]
    if isinstance(config, str):

        def replace_env_var(match: re.Match[str]) -> str:
            return os.getenv(match.group(1), match.group(0))

        return re.sub(r"\$\{([^}]+)\}", replace_env_var, config)
    return config


def load_config(path: Path, model_class: Type[T]) -> T:
    """Load and validate a settings file.

    The file may be YAML or JSON (JSON parses as YAML). A missing, unreadable or
    invalid file yields the model defaults.
    """
    if not path.exists():
        return model_class()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read settings file %s: %s", path, e)
        return model_class()

    if not isinstance(raw, dict):
        logger.warning("Settings file %s is not a mapping; using defaults", path)
        return model_class()

    try:
        model = model_class.model_validate(expand_env_vars(raw))
    except ValidationError as e:
        logger.warning("Invalid settings in %s: %s", path, e)
        return model_class()

    if model.model_extra:
        logger.warning("Unknown keys in %s: %s", path, list(model.model_extra.keys()))
    return model


def load_global_settings(path: Optional[Path] = None) -> GlobalSettings:
    return load_config(path or settings_file(), GlobalSettings)


def load_project_settings(project_root: Path) -> ProjectSettings:
    return load_config(project_root / PROJECT_SETTINGS_RELPATH, ProjectSettings)
