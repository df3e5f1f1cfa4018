"""Render transcript entries into a bounded, tagged plain-text capture.

Output shape::

    <|turn_start|>2025-01-01T10:00:00.000Z

    <|start|>user<|message|>...<|end|>

    <|start|>assistant<|message|>...<|end|>
    <|start|>assistant:tool<|message|>Bash: command="ls"<|end|>

    <|turn_end|>

Tool activity is only rendered for tools on the caller's include-list; an empty
list renders no tool blocks at all. Thinking blocks are never rendered.
Private spans are replaced per block, before any truncation.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from supermemory_claude.constants import (
    MAX_TOOL_INPUT_VALUE_LENGTH,
    MAX_TOOL_RESULT_LENGTH,
    MIN_CAPTURE_LENGTH,
    TURN_END_MARKER,
    TURN_START_MARKER,
    UNKNOWN_TOOL_NAME,
)
from supermemory_claude.privacy import strip_private_content
from supermemory_claude.transcript.entries import (
    ContentBlock,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    TranscriptEntry,
)
from supermemory_claude.transcript.text import clean_content, truncate
from supermemory_claude.transcript.turns import Turn


def should_include_tool(tool_name: str, include_tools: Iterable[str]) -> bool:
    """Case-insensitive include-list check; an empty list includes nothing."""
    lowered = {tool.lower() for tool in include_tools}
    return bool(lowered) and tool_name.lower() in lowered


@dataclass
class RenderContext:
    """State scoped to a single render call.

    ``tool_names`` maps tool_use ids to tool names as they are seen, so a later
    tool_result can be attributed to its tool.
    """

    include_tools: frozenset[str] = frozenset()
    tool_names: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(cls, include_tools: Optional[Iterable[str]] = None) -> RenderContext:
        return cls(include_tools=frozenset(tool.lower() for tool in include_tools or ()))

    def includes(self, tool_name: str) -> bool:
        return should_include_tool(tool_name, self.include_tools)

    def remember_tool(self, block: ToolUseBlock) -> None:
        if block.id:
            self.tool_names[block.id] = block.name

    def resolve_tool_name(self, tool_use_id: str) -> str:
        return self.tool_names.get(tool_use_id) or UNKNOWN_TOOL_NAME


def _tag(role: str, body: str) -> str:
    return f"<|start|>{role}<|message|>{body}<|end|>"


def format_tool_input(tool_input: Mapping[str, object]) -> str:
    """Flatten tool input to ``key="value"`` pairs, each value truncated."""
    parts = []
    for key, value in tool_input.items():
        value_str = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        parts.append(f'{key}="{truncate(strip_private_content(value_str), MAX_TOOL_INPUT_VALUE_LENGTH)}"')
    return " ".join(parts)


def _render_block(role: str, block: ContentBlock, context: RenderContext, text_only: bool) -> Optional[str]:
    if isinstance(block, TextBlock):
        cleaned = clean_content(strip_private_content(block.text))
        return _tag(role, cleaned) if cleaned else None

    if text_only:
        return None

    if isinstance(block, ToolUseBlock):
        context.remember_tool(block)
        if not context.includes(block.name):
            return None
        return _tag("assistant:tool", f"{block.name}: {format_tool_input(block.input)}")

    if isinstance(block, ToolResultBlock):
        tool_name = context.resolve_tool_name(block.tool_use_id)
        if not context.includes(tool_name):
            return None
        result = truncate(clean_content(strip_private_content(block.content)), MAX_TOOL_RESULT_LENGTH)
        if not result:
            return None
        status = "error" if block.is_error else "success"
        return _tag("assistant:tool_result", f"{tool_name}({status}): {result}")

    # Thinking blocks are never rendered.
    return None


def render_entry(entry: TranscriptEntry, context: RenderContext, *, text_only: bool = False) -> Optional[str]:
    """Render one entry, or None when nothing in it is renderable."""
    if not entry.is_conversational:
        return None

    role = entry.type.value
    parts = [_render_block(role, block, context, text_only) for block in entry.blocks]
    rendered = [part for part in parts if part]
    return "\n".join(rendered) if rendered else None


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_capture(
    entries: Sequence[TranscriptEntry],
    *,
    include_tools: Optional[Iterable[str]] = None,
    text_only: bool = False,
) -> Optional[str]:
    """Render entries between turn markers.

    Returns None when there is nothing to render or the result is shorter than
    MIN_CAPTURE_LENGTH characters.
    """
    if not entries:
        return None

    context = RenderContext.create(include_tools)
    timestamp = entries[0].timestamp or now_iso()

    parts = [f"{TURN_START_MARKER}{timestamp}"]
    for entry in entries:
        formatted = render_entry(entry, context, text_only=text_only)
        if formatted:
            parts.append(formatted)
    parts.append(TURN_END_MARKER)

    result = "\n\n".join(parts)
    if len(result) < MIN_CAPTURE_LENGTH:
        return None
    return result


def render_turns(
    turns: Iterable[Turn],
    *,
    include_tools: Optional[Iterable[str]] = None,
    text_only: bool = False,
) -> Optional[str]:
    """Render the combined entries of the given turns, in order."""
    entries = [entry for turn in turns for entry in turn.entries]
    return render_capture(entries, include_tools=include_tools, text_only=text_only)
