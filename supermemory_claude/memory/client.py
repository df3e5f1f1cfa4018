"""Synchronous HTTP client for the Supermemory API.

Hooks are short-lived processes, so every call is a plain blocking request.
Errors surface as SupermemoryAPIError; callers decide whether to fail open.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
from structlog import get_logger

from supermemory_claude.constants import (
    API_TIMEOUT_S,
    DEFAULT_API_URL,
    DEFAULT_CONTAINER_TAG,
    DEFAULT_SEARCH_LIMIT,
    MEMORY_SOURCE,
)
from supermemory_claude.errors import SupermemoryClaudeError
from supermemory_claude.memory.dedup import DedupFilter
from supermemory_claude.memory.types import AddResult, MemoryResult, Profile, ProfileResult, SearchResponse

logger = get_logger(__name__)

PERSONAL_ENTITY_CONTEXT = """Developer coding session transcript. Focus on USER message and intent.

RULES:
- Extract USER's action/intent, not every detail assistant provides matter
- Condense assistant responses into what user gained from it
- Skip granular facts from assistant output

EXTRACT:
- Research: "researched whisper.cpp for speech recognition"
- Actions: "built auth flow with JWT", "fixed memory leak in useEffect"
- Preferences: "prefers Tailwind over CSS modules"
- Decisions: "chose SQLite for local storage"
- Learnings: "learned about React Server Components"

SKIP:
- Every fact assistant mentions (condense to user's action)
- Generic assistant explanations user didn't confirm/use"""

REPO_ENTITY_CONTEXT = """Project/codebase knowledge for team sharing.

EXTRACT:
- Architecture: "uses monorepo with turborepo", "API in /apps/api"
- Conventions: "components in PascalCase", "hooks prefixed with use"
- Patterns: "all API routes use withAuth wrapper", "errors thrown as ApiError"
- Setup: "requires .env with DATABASE_URL", "run pnpm db:migrate first"
- Decisions: "chose Drizzle over Prisma for performance", "using RSC for data fetching\""""


class SupermemoryAPIError(SupermemoryClaudeError):
    """API request failed with structured error info."""

    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail or message


def _search_response(raw: object, dedup: DedupFilter) -> SearchResponse:
    data = raw if isinstance(raw, dict) else {}
    results = [MemoryResult.from_api(item) for item in data.get("results") or [] if isinstance(item, dict)]
    return SearchResponse(
        results=dedup.filter(results, key=lambda r: r.memory),
        total=data.get("total"),
        timing=data.get("timing"),
    )


class SupermemoryClient:
    """Blocking client for adding, searching and profiling memories."""

    def __init__(
        self,
        api_key: str,
        container_tag: Optional[str] = None,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = API_TIMEOUT_S,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self.container_tag = container_tag or DEFAULT_CONTAINER_TAG
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {api_key}"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SupermemoryClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _post(self, path: str, body: dict[str, Any]) -> Any:
        try:
            resp = self._client.post(path, json=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            detail = None
            try:
                payload = e.response.json()
                if isinstance(payload, dict):
                    detail = payload.get("detail") or payload.get("error")
            except (json.JSONDecodeError, ValueError):
                detail = e.response.text
            raise SupermemoryAPIError(
                f"API request failed: {status_code} {detail or e.response.text}",
                status_code=status_code,
                detail=str(detail) if detail else None,
            ) from e
        except httpx.TimeoutException as e:
            raise SupermemoryAPIError("API request timed out") from e
        except httpx.HTTPError as e:
            raise SupermemoryAPIError(f"API request failed: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise SupermemoryAPIError("API returned invalid JSON", status_code=resp.status_code) from e

    def add_memory(
        self,
        content: str,
        container_tag: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
        *,
        custom_id: Optional[str] = None,
        entity_context: Optional[str] = None,
    ) -> AddResult:
        tag = container_tag or self.container_tag
        body: dict[str, Any] = {
            "content": content,
            "containerTag": tag,
            "metadata": {"sm_source": MEMORY_SOURCE, **(metadata or {})},
        }
        if custom_id:
            body["customId"] = custom_id
        if entity_context:
            body["entityContext"] = entity_context

        data = self._post("/v3/documents", body)
        data = data if isinstance(data, dict) else {}
        logger.debug("Memory added", container_tag=tag, id=data.get("id"), length=len(content))
        return AddResult(id=data.get("id"), status=data.get("status"), container_tag=tag)

    def search(
        self,
        query: str,
        container_tag: Optional[str] = None,
        *,
        limit: int = DEFAULT_SEARCH_LIMIT,
        search_mode: str = "hybrid",
    ) -> SearchResponse:
        """Search memories; results are de-duplicated by memory text."""
        data = self._post(
            "/v4/search",
            {
                "q": query,
                "containerTag": container_tag or self.container_tag,
                "limit": limit,
                "searchMode": search_mode,
            },
        )
        return _search_response(data, DedupFilter())

    def get_profile(self, container_tag: Optional[str] = None, query: Optional[str] = None) -> ProfileResult:
        """Fetch the user profile, optionally with query-matched memories.

        Static facts, dynamic facts and search results share one dedup pass, so a
        memory already listed as a fact is not repeated as a search result.
        """
        body: dict[str, Any] = {"containerTag": container_tag or self.container_tag}
        if query:
            body["q"] = query
        data = self._post("/v4/profile", body)
        data = data if isinstance(data, dict) else {}

        dedup = DedupFilter()
        raw_profile = data.get("profile") if isinstance(data.get("profile"), dict) else {}
        profile = Profile(
            static=dedup.filter(str(f) for f in raw_profile.get("static") or [] if f is not None),
            dynamic=dedup.filter(str(f) for f in raw_profile.get("dynamic") or [] if f is not None),
        )

        search_results = None
        if data.get("searchResults"):
            search_results = _search_response(data["searchResults"], dedup)

        return ProfileResult(profile=profile, search_results=search_results)


__all__ = [
    "PERSONAL_ENTITY_CONTEXT",
    "REPO_ENTITY_CONTEXT",
    "SupermemoryAPIError",
    "SupermemoryClient",
]
