"""Keyword signal detection and context-window selection over turns."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from supermemory_claude.transcript.turns import Turn


def normalize_keywords(keywords: Iterable[str]) -> list[str]:
    """Lower-case keywords, dropping blanks and duplicates (first seen wins)."""
    seen: dict[str, None] = {}
    for keyword in keywords:
        normalized = keyword.strip().lower()
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


def find_signal_turns(turns: Sequence[Turn], keywords: Iterable[str]) -> list[int]:
    """Indices of turns whose user text contains any keyword.

    Matching is plain substring matching, so "fix" also hits "suffix".
    """
    normalized = normalize_keywords(keywords)
    if not normalized:
        return []

    indices: list[int] = []
    for index, turn in enumerate(turns):
        user_text = turn.user_text()
        if user_text and any(keyword in user_text for keyword in normalized):
            indices.append(index)
    return indices


def signal_window_indices(signal_indices: Iterable[int], turns_before: int) -> list[int]:
    """Expand each signal index backwards to a window of ``turns_before`` turns.

    Overlapping windows merge; the result is sorted and duplicate-free.
    """
    if turns_before < 1:
        raise ValueError(f"turns_before must be >= 1, got {turns_before}")

    selected: set[int] = set()
    for signal_index in signal_indices:
        start = max(0, signal_index - turns_before + 1)
        selected.update(range(start, signal_index + 1))
    return sorted(selected)


def select_signal_turns(turns: Sequence[Turn], signal_indices: Iterable[int], turns_before: int) -> list[Turn]:
    """Materialize the merged signal windows as turns, in transcript order."""
    return [turns[index] for index in signal_window_indices(signal_indices, turns_before) if index < len(turns)]
