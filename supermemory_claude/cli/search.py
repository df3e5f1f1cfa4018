"""Search project memories from the command line.

Usage: supermemory-claude-search <query...>

Output is markdown on stdout so it can be injected straight into a skill context.
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence

from structlog import get_logger

from supermemory_claude.config import get_api_key, get_api_url, load_project_settings_for, load_settings
from supermemory_claude.errors import MissingApiKeyError
from supermemory_claude.logging_config import setup_logging
from supermemory_claude.memory import MemoryResult, SupermemoryAPIError, SupermemoryClient
from supermemory_claude.project import get_container_tag, get_project_name

logger = get_logger(__name__)

MAX_MEMORY_CHARS = 500


def _format_memories(results: Sequence[MemoryResult]) -> list[str]:
    lines = ["### Relevant Memories"]
    for index, memory in enumerate(results, start=1):
        similarity = round((memory.similarity or 0.0) * 100)
        lines.append(f"\n**Memory {index}** ({similarity}% match)")
        if memory.title:
            lines.append(f"*{memory.title}*")
        lines.append(memory.memory[:MAX_MEMORY_CHARS])
    return lines


def run_search(query: str, client: SupermemoryClient, container_tag: str, project_name: str) -> str:
    """Profile search first; direct search when the profile has no matches."""
    result = client.get_profile(container_tag, query)

    lines = [f'## Memory Search: "{query}"', f"Project: {project_name}\n"]
    if result.profile.static:
        lines.append("### User Preferences")
        lines.extend(f"- {fact}" for fact in result.profile.static)
        lines.append("")
    if result.profile.dynamic:
        lines.append("### Recent Context")
        lines.extend(f"- {fact}" for fact in result.profile.dynamic)
        lines.append("")

    if result.search_results and result.search_results.results:
        lines.extend(_format_memories(result.search_results.results))
        return "\n".join(lines)

    direct = client.search(query, container_tag, limit=10)
    if direct.results:
        lines.extend(_format_memories(direct.results))
    else:
        lines.append("No memories found matching your query.")
        lines.append("Memories are automatically saved as you work in this project.")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Search Supermemory for this project")
    parser.add_argument("query", nargs="*", help="Search query")
    args = parser.parse_args(argv)
    setup_logging()

    query = " ".join(args.query).strip()
    if not query:
        print("No search query provided. Please specify what you want to search for.")
        return

    cwd = os.getcwd()
    settings = load_settings()
    try:
        api_key = get_api_key(settings, load_project_settings_for(cwd))
    except MissingApiKeyError:
        print("Supermemory API key not configured.")
        print("Set SUPERMEMORY_CC_API_KEY environment variable to enable memory search.")
        print("Get your key at: https://console.supermemory.ai")
        return

    container_tag = get_container_tag(cwd)
    project_name = get_project_name(cwd)

    try:
        with SupermemoryClient(api_key, container_tag, base_url=get_api_url()) as client:
            print(run_search(query, client, container_tag, project_name))
    except SupermemoryAPIError as exc:
        logger.warning("Memory search failed", error=str(exc))
        print(f"Error searching memories: {exc}")


if __name__ == "__main__":
    main()
