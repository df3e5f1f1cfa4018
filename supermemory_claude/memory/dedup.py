"""Case- and whitespace-insensitive de-duplication of memory items."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Optional, TypeVar

T = TypeVar("T")


def normalize_key(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


class DedupFilter:
    """Keeps the first occurrence of each normalized key.

    One filter can be applied to several lists in sequence; an item whose key was
    already seen in an earlier list is dropped from the later one. Items with an
    empty key are always dropped.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def filter(self, items: Iterable[T], key: Optional[Callable[[T], object]] = None) -> list[T]:
        kept: list[T] = []
        for item in items:
            normalized = normalize_key(key(item) if key else item)
            if not normalized or normalized in self._seen:
                continue
            self._seen.add(normalized)
            kept.append(item)
        return kept


def dedupe(items: Iterable[T], key: Optional[Callable[[T], object]] = None) -> list[T]:
    return DedupFilter().filter(items, key)
