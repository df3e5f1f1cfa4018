"""Result types returned by the Supermemory client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class MemoryResult:
    memory: str
    id: Optional[str] = None
    chunk: Optional[str] = None
    title: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    updated_at: Optional[str] = None
    similarity: Optional[float] = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> MemoryResult:
        similarity = raw.get("similarity")
        return cls(
            memory=str(raw.get("content") or raw.get("memory") or raw.get("context") or ""),
            id=raw.get("id"),
            chunk=raw.get("chunk"),
            title=raw.get("title"),
            metadata=raw.get("metadata") if isinstance(raw.get("metadata"), dict) else None,
            updated_at=raw.get("updatedAt"),
            similarity=float(similarity) if isinstance(similarity, (int, float)) else None,
        )


@dataclass(frozen=True)
class SearchResponse:
    results: list[MemoryResult] = field(default_factory=list)
    total: Optional[int] = None
    timing: Optional[float] = None


@dataclass(frozen=True)
class Profile:
    static: list[str] = field(default_factory=list)
    dynamic: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProfileResult:
    profile: Profile = field(default_factory=Profile)
    search_results: Optional[SearchResponse] = None


@dataclass(frozen=True)
class AddResult:
    id: Optional[str]
    status: Optional[str]
    container_tag: str
