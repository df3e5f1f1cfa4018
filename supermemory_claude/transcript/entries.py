"""Parse Claude Code JSONL transcripts into typed entries."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union, cast

from structlog import get_logger

from supermemory_claude.constants import UNKNOWN_TOOL_NAME

logger = get_logger(__name__)


class EntryType(str, Enum):
    """Who produced a transcript entry."""

    USER = "user"
    ASSISTANT = "assistant"
    OTHER = "other"  # summaries, system entries, file snapshots, ...

    @classmethod
    def from_raw(cls, value: object) -> EntryType:
        if value == cls.USER.value:
            return cls.USER
        if value == cls.ASSISTANT.value:
            return cls.ASSISTANT
        return cls.OTHER


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ToolUseBlock:
    id: str
    name: str
    input: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultBlock:
    tool_use_id: str
    content: str
    is_error: bool = False


@dataclass(frozen=True)
class ThinkingBlock:
    thinking: str = ""


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock, ThinkingBlock]
MessageContent = Union[str, tuple[ContentBlock, ...]]


@dataclass(frozen=True)
class TranscriptEntry:
    """One line of a transcript.

    ``content`` is either the plain string a user typed or the ordered content
    blocks of the message. ``uuid`` is the capture watermark identifier.
    """

    type: EntryType
    uuid: Optional[str] = None
    timestamp: Optional[str] = None
    content: MessageContent = ()
    is_meta: bool = False

    @property
    def is_user(self) -> bool:
        return self.type is EntryType.USER

    @property
    def is_assistant(self) -> bool:
        return self.type is EntryType.ASSISTANT

    @property
    def is_conversational(self) -> bool:
        return self.type in (EntryType.USER, EntryType.ASSISTANT)

    @property
    def blocks(self) -> tuple[ContentBlock, ...]:
        """Content as blocks; a plain string becomes a single text block."""
        if isinstance(self.content, str):
            return (TextBlock(self.content),)
        return self.content


def _flatten_tool_result_content(raw: object) -> str:
    """Tool results carry either a string or a list of text parts."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        parts = [
            str(item.get("text", ""))
            for item in raw
            if isinstance(item, dict) and item.get("type") == "text" and item.get("text")
        ]
        return "\n".join(parts)
    return ""


def parse_content_block(raw: object) -> Optional[ContentBlock]:
    """Parse a single content block; unknown shapes return None."""
    if not isinstance(raw, dict):
        return None

    block_type = raw.get("type")
    if block_type == "text":
        text = raw.get("text")
        return TextBlock(text) if isinstance(text, str) else None
    if block_type == "tool_use":
        tool_input = raw.get("input")
        return ToolUseBlock(
            id=str(raw.get("id") or ""),
            name=str(raw.get("name") or UNKNOWN_TOOL_NAME),
            input=cast(dict[str, object], tool_input) if isinstance(tool_input, dict) else {},
        )
    if block_type == "tool_result":
        return ToolResultBlock(
            tool_use_id=str(raw.get("tool_use_id") or ""),
            content=_flatten_tool_result_content(raw.get("content")),
            is_error=bool(raw.get("is_error")),
        )
    if block_type in ("thinking", "redacted_thinking"):
        thinking = raw.get("thinking")
        return ThinkingBlock(thinking if isinstance(thinking, str) else "")
    return None


def _parse_content(message: object) -> MessageContent:
    content: object = message.get("content") if isinstance(message, dict) else message
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parsed = (parse_content_block(block) for block in content)
        return tuple(block for block in parsed if block is not None)
    return ()


def parse_entry(raw: Mapping[str, object]) -> TranscriptEntry:
    """Build a TranscriptEntry from one decoded JSONL record."""
    uuid = raw.get("uuid")
    timestamp = raw.get("timestamp")
    return TranscriptEntry(
        type=EntryType.from_raw(raw.get("type")),
        uuid=uuid if isinstance(uuid, str) and uuid else None,
        timestamp=timestamp if isinstance(timestamp, str) and timestamp else None,
        content=_parse_content(raw.get("message")),
        is_meta=bool(raw.get("isMeta")),
    )


def iter_entries(lines: Iterable[str]) -> Iterator[TranscriptEntry]:
    """Yield entries for each parseable line; corrupt lines are skipped."""
    for line in lines:
        if not line.strip():
            continue
        try:
            value: object = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            yield parse_entry(cast(dict[str, object], value))


def parse_transcript_text(text: str) -> list[TranscriptEntry]:
    """Parse raw JSONL text. Empty input yields an empty list."""
    return list(iter_entries(text.split("\n")))


def read_transcript(transcript_path: str | Path) -> list[TranscriptEntry]:
    """Read and parse a transcript file; a missing or unreadable file yields no entries."""
    path = Path(transcript_path).expanduser()
    if not path.exists():
        logger.debug("Transcript not found", path=str(path))
        return []

    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return list(iter_entries(f))
    except OSError as exc:
        logger.warning("Failed to read transcript", path=str(path), error=str(exc))
        return []
