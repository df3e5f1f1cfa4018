"""supermemory-claude logging configuration.

Hooks answer Claude Code on stdout, so every log line goes to stderr.
Loggers are plain structlog loggers (`structlog.get_logger(__name__)`) routed
through the stdlib `logging` tree under the `supermemory_claude` namespace.

Level resolution: explicit argument, then `SUPERMEMORY_LOG_LEVEL`, then DEBUG
when `SUPERMEMORY_DEBUG=true` (or `debug=True`), otherwise WARNING.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import structlog

from supermemory_claude.constants import ENV_DEBUG, ENV_LOG_LEVEL

LOGGER_NAMESPACE = "supermemory_claude"


def _resolve_level(level: Optional[str], debug: bool) -> int:
    name = level or os.environ.get(ENV_LOG_LEVEL)
    if not name and (debug or os.environ.get(ENV_DEBUG) == "true"):
        name = "DEBUG"
    resolved = logging.getLevelName((name or "WARNING").upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: Optional[str] = None, *, debug: bool = False) -> None:
    """Configure supermemory-claude logging.

    Args:
        level: Optional override for `SUPERMEMORY_LOG_LEVEL`.
        debug: Settings-level debug switch; lowers the default level to DEBUG.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(_resolve_level(level, debug))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
