"""Constants used across supermemory-claude.

This module defines shared constants to ensure consistency.
"""

# Transcript rendering limits (not user-configurable)
MAX_TOOL_RESULT_LENGTH = 500
MAX_TOOL_INPUT_VALUE_LENGTH = 100
MIN_CAPTURE_LENGTH = 100  # Renders shorter than this are not worth saving
UNKNOWN_TOOL_NAME = "Unknown"

# Render markup
TURN_START_MARKER = "<|turn_start|>"
TURN_END_MARKER = "<|turn_end|>"
SYSTEM_REMINDER_TAG = "system-reminder"
CONTEXT_TAG = "supermemory-context"
STATUS_TAG = "supermemory-status"

# Remote memory store
DEFAULT_API_URL = "https://api.supermemory.ai"
DEFAULT_CONTAINER_TAG = "claudecode_default"
MEMORY_SOURCE = "claude-code-plugin"
API_TIMEOUT_S = 10.0
DEFAULT_SEARCH_LIMIT = 10

# Signal extraction defaults
DEFAULT_SIGNAL_KEYWORDS: tuple[str, ...] = (
    "remember",
    "implementation",
    "refactor",
    "architecture",
    "decision",
    "important",
    "bug",
    "fix",
    "solved",
    "solution",
    "pattern",
    "approach",
    "design",
    "tradeoff",
    "migrate",
    "upgrade",
    "deprecate",
)
DEFAULT_SIGNAL_TURNS_BEFORE = 3
DEFAULT_MAX_PROFILE_ITEMS = 5

# Environment variables
ENV_API_KEY = "SUPERMEMORY_CC_API_KEY"
ENV_API_URL = "SUPERMEMORY_API_URL"
ENV_DEBUG = "SUPERMEMORY_DEBUG"
ENV_LOG_LEVEL = "SUPERMEMORY_LOG_LEVEL"
ENV_HOME = "SUPERMEMORY_CLAUDE_HOME"
