"""Fold transcript entries into user/assistant turns.

One grouping routine serves both capture modes; a GroupingPolicy decides which
entries participate and how many assistant entries a turn keeps.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from supermemory_claude.transcript.entries import TranscriptEntry
from supermemory_claude.transcript.text import entry_text, has_text_content


@dataclass
class Turn:
    """One user-initiated exchange plus the assistant's reply."""

    user_entries: list[TranscriptEntry] = field(default_factory=list)
    assistant_entries: list[TranscriptEntry] = field(default_factory=list)

    @property
    def entries(self) -> list[TranscriptEntry]:
        # A user entry after an assistant entry always opens a new turn,
        # so users-then-assistants is the original order.
        return [*self.user_entries, *self.assistant_entries]

    @property
    def is_empty(self) -> bool:
        return not self.user_entries and not self.assistant_entries

    def user_text(self) -> str:
        """Lower-cased, space-joined user text used for keyword scanning."""
        texts = [entry_text(entry) for entry in self.user_entries]
        return " ".join(text for text in texts if text).lower()


@dataclass(frozen=True)
class GroupingPolicy:
    name: str
    accepts: Callable[[TranscriptEntry], bool]
    single_assistant: bool


def _is_conversational(entry: TranscriptEntry) -> bool:
    return entry.is_conversational


# Full capture: every user/assistant entry, every assistant utterance.
FULL_POLICY = GroupingPolicy(name="full", accepts=_is_conversational, single_assistant=False)

# Signal extraction: text-bearing entries only, latest assistant reply per turn.
SIGNAL_POLICY = GroupingPolicy(
    name="signal",
    accepts=lambda entry: entry.is_conversational and has_text_content(entry),
    single_assistant=True,
)


def group_turns(entries: Iterable[TranscriptEntry], policy: GroupingPolicy = FULL_POLICY) -> list[Turn]:
    """Group entries into non-overlapping turns in original order."""
    turns: list[Turn] = []
    current = Turn()

    for entry in entries:
        if not policy.accepts(entry):
            continue

        if entry.is_user:
            if current.assistant_entries:
                turns.append(current)
                current = Turn()
            current.user_entries.append(entry)
        elif entry.is_assistant:
            if policy.single_assistant:
                current.assistant_entries = [entry]
            else:
                current.assistant_entries.append(entry)

    if not current.is_empty:
        turns.append(current)

    return turns
