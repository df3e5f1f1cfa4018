"""Remote memory store client and context formatting."""

from supermemory_claude.memory.client import (
    PERSONAL_ENTITY_CONTEXT,
    REPO_ENTITY_CONTEXT,
    SupermemoryAPIError,
    SupermemoryClient,
)
from supermemory_claude.memory.context import ContextSection, combine_contexts, format_context, format_search_results
from supermemory_claude.memory.dedup import DedupFilter, dedupe
from supermemory_claude.memory.types import AddResult, MemoryResult, Profile, ProfileResult, SearchResponse

__all__ = [
    "PERSONAL_ENTITY_CONTEXT",
    "REPO_ENTITY_CONTEXT",
    "AddResult",
    "ContextSection",
    "DedupFilter",
    "MemoryResult",
    "Profile",
    "ProfileResult",
    "SearchResponse",
    "SupermemoryAPIError",
    "SupermemoryClient",
    "combine_contexts",
    "dedupe",
    "format_context",
    "format_search_results",
]
