"""Claude Code hook I/O: JSON payload on stdin, JSON response on stdout."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Optional, TextIO, cast

# Explicit mapping: Claude external field -> internal field
# Only these fields are forwarded; everything else is dropped
_CLAUDE_TO_INTERNAL: dict[str, str] = {
    "session_id": "session_id",
    "transcript_path": "transcript_path",
    "cwd": "cwd",
    "prompt": "prompt",  # UserPromptSubmit
    "source": "source",  # SessionStart: startup
    "reason": "reason",  # SessionEnd: exit
}

CONTINUE_OUTPUT: dict[str, object] = {"continue": True, "suppressOutput": True}


@dataclass(frozen=True)
class HookPayload:
    session_id: str = ""
    transcript_path: Optional[str] = None
    cwd: Optional[str] = None
    prompt: Optional[str] = None
    source: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def from_raw(cls, data: dict[str, object]) -> HookPayload:
        """Map Claude external fields to the internal payload.

        Non-string values are dropped; fields like permission_mode and
        hook_event_name are ignored.
        """
        fields = {
            internal: data[external]
            for external, internal in _CLAUDE_TO_INTERNAL.items()
            if isinstance(data.get(external), str)
        }
        return cls(**cast(dict[str, str], fields))


def read_stdin(stream: Optional[TextIO] = None) -> dict[str, object]:
    """Read the hook payload; an empty or interactive stdin yields {}."""
    stream = stream or sys.stdin
    if stream.isatty():
        return {}
    raw_input = stream.read()
    if not raw_input.strip():
        return {}
    parsed = json.loads(raw_input)
    if not isinstance(parsed, dict):
        raise ValueError("Hook stdin payload must be a JSON object")
    return cast(dict[str, object], parsed)


def write_output(data: dict[str, object], stream: Optional[TextIO] = None) -> None:
    print(json.dumps(data), file=stream or sys.stdout)


def session_start_output(additional_context: str) -> dict[str, object]:
    return {
        "hookSpecificOutput": {
            "hookEventName": "SessionStart",
            "additionalContext": additional_context,
        }
    }
