"""Text extraction and cleanup shared by grouping, signal scanning and rendering."""

from __future__ import annotations

import re

from supermemory_claude.constants import CONTEXT_TAG, SYSTEM_REMINDER_TAG
from supermemory_claude.transcript.entries import TextBlock, TranscriptEntry

# Injected markup is removed wholesale, never escaped.
_INJECTED_MARKUP_RES = (
    re.compile(rf"<{SYSTEM_REMINDER_TAG}>.*?</{SYSTEM_REMINDER_TAG}>", re.DOTALL),
    re.compile(rf"<{CONTEXT_TAG}>.*?</{CONTEXT_TAG}>", re.DOTALL),
)


def clean_content(text: object) -> str:
    """Strip system reminders and previously injected memory context."""
    if not isinstance(text, str) or not text:
        return ""
    for pattern in _INJECTED_MARKUP_RES:
        text = pattern.sub("", text)
    return text.strip()


def truncate(text: str, max_length: int) -> str:
    if not text or len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


def entry_text(entry: TranscriptEntry) -> str:
    """Cleaned text of an entry's text blocks, space-joined. Tool blocks are ignored."""
    texts = [clean_content(block.text) for block in entry.blocks if isinstance(block, TextBlock)]
    return " ".join(text for text in texts if text)


def has_text_content(entry: TranscriptEntry) -> bool:
    """True when the entry carries renderable text (meta entries never do)."""
    if entry.is_meta:
        return False
    return bool(entry_text(entry))
