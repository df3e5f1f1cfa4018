"""Format recalled memories for injection into a Claude Code session."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from supermemory_claude.constants import CONTEXT_TAG
from supermemory_claude.memory.types import MemoryResult, ProfileResult

CONTEXT_INTRO = "The following is recalled context. Reference it only when relevant to the conversation."
CONTEXT_DISCLAIMER = (
    "Use these memories naturally when relevant, including indirect connections, "
    "but don't force them into every response or make assumptions beyond what's stated."
)


@dataclass(frozen=True)
class ContextSection:
    content: Optional[str]
    label: Optional[str] = None


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_relative_time(iso_timestamp: str, now: Optional[datetime] = None) -> str:
    """Human-friendly age of a timestamp ("just now", "3hrs ago", "4 Mar").

    Returns an empty string for unparseable input.
    """
    try:
        dt = _parse_timestamp(iso_timestamp)
    except (TypeError, ValueError):
        return ""

    now = now or datetime.now(timezone.utc)
    seconds = (now - dt).total_seconds()
    minutes = seconds / 60
    hours = seconds / 3600
    days = seconds / 86400

    if minutes < 30:
        return "just now"
    if minutes < 60:
        return f"{math.floor(minutes)}mins ago"
    if hours < 24:
        return f"{math.floor(hours)}hrs ago"
    if days < 7:
        return f"{math.floor(days)}d ago"

    month = dt.strftime("%b")
    if dt.year == now.year:
        return f"{dt.day} {month}"
    return f"{dt.day} {month}, {dt.year}"


def _format_memory_line(result: MemoryResult, now: Optional[datetime] = None) -> str:
    time_str = format_relative_time(result.updated_at, now) if result.updated_at else ""
    pct = f"[{math.floor(result.similarity * 100 + 0.5)}%]" if result.similarity is not None else ""
    prefix = f"[{time_str}] " if time_str else ""
    return f"{prefix}{result.memory} {pct}".strip()


def _wrap(content: str) -> str:
    return f"<{CONTEXT_TAG}>\n{CONTEXT_INTRO}\n\n{content}\n\n{CONTEXT_DISCLAIMER}\n</{CONTEXT_TAG}>"


def format_context(
    profile_result: Optional[ProfileResult],
    include_profile: bool = True,
    include_relevant_memories: bool = False,
    max_results: int = 10,
    wrap_with_tags: bool = True,
) -> Optional[str]:
    """Render profile facts and relevant memories as markdown sections.

    Returns None when there is nothing to show.
    """
    if profile_result is None:
        return None

    statics = profile_result.profile.static[:max_results] if include_profile else []
    dynamics = profile_result.profile.dynamic[:max_results] if include_profile else []
    search: list[MemoryResult] = []
    if include_relevant_memories and profile_result.search_results:
        search = profile_result.search_results.results[:max_results]

    if not statics and not dynamics and not search:
        return None

    sections = []
    if statics:
        sections.append("## User Profile (Persistent)\n" + "\n".join(f"- {fact}" for fact in statics))
    if dynamics:
        sections.append("## Recent Context\n" + "\n".join(f"- {fact}" for fact in dynamics))
    if search:
        lines = [f"- {_format_memory_line(result)}".strip() for result in search]
        sections.append("## Relevant Memories (with relevance %)\n" + "\n".join(lines))

    content = "\n\n".join(sections)
    return _wrap(content) if wrap_with_tags else content


def combine_contexts(contexts: Iterable[ContextSection]) -> Optional[str]:
    """Join several labelled sections into one wrapped context block."""
    valid = [c for c in contexts if c.content]
    if not valid:
        return None

    sections = [f"{c.label}\n\n{c.content}" if c.label else str(c.content) for c in valid]
    return _wrap("\n\n---\n\n".join(sections))


def format_search_results(query: str, results: Sequence[MemoryResult], label: Optional[str] = None) -> str:
    if not results:
        scope = f"{label.lower()} " if label else ""
        return f'No {scope}memories found for "{query}"'

    header = f'{label} memories for "{query}"' if label else f'Memories for "{query}"'
    return header + "\n" + "\n".join(_format_memory_line(result) for result in results)
