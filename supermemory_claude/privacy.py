"""Privacy tag handling.

Anything wrapped in ``<private>...</private>`` is replaced before storage.
"""

from __future__ import annotations

import re

from structlog import get_logger

logger = get_logger(__name__)

PRIVATE_PLACEHOLDER = "[PRIVATE]"
_PRIVATE_TAG_RE = re.compile(r"<private>.*?</private>", re.IGNORECASE | re.DOTALL)
_MAX_TAG_COUNT = 100


def strip_private_content(text: str) -> str:
    if not text:
        return text
    stripped, count = _PRIVATE_TAG_RE.subn(PRIVATE_PLACEHOLDER, text)
    if count > _MAX_TAG_COUNT:
        logger.warning("Unusually many private tags", count=count)
    return stripped


def is_fully_private(text: str) -> bool:
    """True when nothing but private placeholders (or whitespace) is left."""
    if not text:
        return True
    remainder = strip_private_content(text).replace(PRIVATE_PLACEHOLDER, "")
    return not remainder.strip()
