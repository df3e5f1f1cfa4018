#!/usr/bin/env python3
"""Hook receiver for Claude Code.

Usage: supermemory-claude-hook <event>  (JSON payload on stdin)

Events:
  session_start       inject recalled project context
  user_prompt_submit  save the user's prompt
  stop, session_end   capture new transcript content as a memory

Every handler is fail-open: errors are logged to stderr and Claude Code still
receives a "continue" response.
"""

from __future__ import annotations

import argparse
import json
import os
import re
import sys
from collections.abc import Callable

from structlog import get_logger

from supermemory_claude.config import (
    GlobalSettings,
    ProjectSettings,
    get_api_key,
    get_api_url,
    load_project_settings_for,
    load_settings,
    resolve_capture_settings,
)
from supermemory_claude.constants import CONTEXT_TAG, STATUS_TAG
from supermemory_claude.errors import MissingApiKeyError
from supermemory_claude.hooks.io import (
    CONTINUE_OUTPUT,
    HookPayload,
    read_stdin,
    session_start_output,
    write_output,
)
from supermemory_claude.logging_config import setup_logging
from supermemory_claude.memory import (
    PERSONAL_ENTITY_CONTEXT,
    SupermemoryAPIError,
    SupermemoryClient,
    format_context,
)
from supermemory_claude.privacy import is_fully_private, strip_private_content
from supermemory_claude.project import get_container_tag, get_project_name
from supermemory_claude.transcript.capture import collect_capture
from supermemory_claude.transcript.renderer import now_iso
from supermemory_claude.transcript.watermark import WatermarkStore

logger = get_logger(__name__)

SESSION_START = "session_start"
USER_PROMPT_SUBMIT = "user_prompt_submit"
STOP = "stop"
SESSION_END = "session_end"

NO_MEMORIES_CONTEXT = (
    f"<{CONTEXT_TAG}>\nNo previous memories found for this project.\nMemories will be saved as you work.\n</{CONTEXT_TAG}>"
)

HookOutput = dict[str, object]


def _create_client(api_key: str, container_tag: str) -> SupermemoryClient:
    return SupermemoryClient(api_key, container_tag, base_url=get_api_url())


def normalize_event_name(raw: str) -> str:
    """'SessionStart', 'session-start' and 'session_start' all map to 'session_start'."""
    snake = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", raw.strip())
    return snake.replace("-", "_").lower()


def handle_session_start(payload: HookPayload, settings: GlobalSettings, project: ProjectSettings) -> HookOutput:
    cwd = payload.cwd or os.getcwd()
    container_tag = get_container_tag(cwd)
    project_name = get_project_name(cwd)
    logger.debug("SessionStart", cwd=cwd, container_tag=container_tag, project=project_name)

    if not settings.inject_profile:
        return CONTINUE_OUTPUT

    api_key = get_api_key(settings, project)
    with _create_client(api_key, container_tag) as client:
        try:
            profile = client.get_profile(container_tag, project_name)
        except SupermemoryAPIError as exc:
            logger.warning("Profile fetch failed", container_tag=container_tag, error=str(exc))
            profile = None

    context = format_context(profile, True, False, settings.max_profile_items)
    if not context:
        return session_start_output(NO_MEMORIES_CONTEXT)

    logger.debug("Context generated", length=len(context))
    return session_start_output(context)


def handle_user_prompt_submit(payload: HookPayload, settings: GlobalSettings, project: ProjectSettings) -> HookOutput:
    prompt = payload.prompt or ""
    logger.debug("UserPromptSubmit", session_id=payload.session_id[:8], prompt_length=len(prompt))

    if not prompt.strip():
        return CONTINUE_OUTPUT
    if is_fully_private(prompt):
        logger.debug("Skipping fully private prompt", session_id=payload.session_id[:8])
        return CONTINUE_OUTPUT

    api_key = get_api_key(settings, project)
    cwd = payload.cwd or os.getcwd()
    container_tag = get_container_tag(cwd)
    project_name = get_project_name(cwd)

    with _create_client(api_key, container_tag) as client:
        client.add_memory(
            f"User request in {project_name}: {strip_private_content(prompt)}",
            container_tag,
            {
                "type": "user_prompt",
                "sessionId": payload.session_id,
                "project": project_name,
                "timestamp": now_iso(),
            },
        )
    logger.debug("Prompt saved", session_id=payload.session_id[:8])
    return CONTINUE_OUTPUT


def handle_capture(payload: HookPayload, settings: GlobalSettings, project: ProjectSettings) -> HookOutput:
    """Capture what is new in the transcript and store it as one memory.

    The watermark is committed before the upload; a failed upload is logged and
    not retried on the next stop.
    """
    if not payload.session_id or not payload.transcript_path:
        logger.debug("Capture skipped: missing session or transcript", session_id=payload.session_id[:8])
        return CONTINUE_OUTPUT

    api_key = get_api_key(settings, project)
    capture_settings = resolve_capture_settings(settings, project)
    store = WatermarkStore()

    capture = collect_capture(payload.transcript_path, payload.session_id, capture_settings, store)
    if capture is None:
        logger.debug("Nothing to capture", session_id=payload.session_id[:8])
        return CONTINUE_OUTPUT
    capture.commit(store)

    cwd = payload.cwd or os.getcwd()
    container_tag = get_container_tag(cwd)
    project_name = get_project_name(cwd)

    with _create_client(api_key, container_tag) as client:
        try:
            client.add_memory(
                strip_private_content(capture.text),
                container_tag,
                {
                    "type": "session_turn",
                    "sessionId": payload.session_id,
                    "project": project_name,
                    "timestamp": now_iso(),
                },
                entity_context=PERSONAL_ENTITY_CONTEXT,
            )
        except SupermemoryAPIError as exc:
            logger.warning("Capture upload failed", session_id=payload.session_id[:8], error=str(exc))
            return CONTINUE_OUTPUT

    logger.debug(
        "Transcript captured",
        session_id=payload.session_id[:8],
        mode=capture.mode,
        length=len(capture.text),
    )
    return CONTINUE_OUTPUT


Handler = Callable[[HookPayload, GlobalSettings, ProjectSettings], HookOutput]

HANDLERS: dict[str, Handler] = {
    SESSION_START: handle_session_start,
    USER_PROMPT_SUBMIT: handle_user_prompt_submit,
    STOP: handle_capture,
    SESSION_END: handle_capture,
}


def _failure_output(event: str, error: Exception) -> HookOutput:
    if event == SESSION_START:
        return session_start_output(
            f"<{STATUS_TAG}>\nFailed to load memories: {error}\n"
            f"Session will continue without memory context.\n</{STATUS_TAG}>"
        )
    return CONTINUE_OUTPUT


def dispatch(event: str, raw_data: dict[str, object]) -> HookOutput:
    """Run the handler for ``event``; never raises for handler failures."""
    handler = HANDLERS[event]
    payload = HookPayload.from_raw(raw_data)
    settings = load_settings()
    if settings.debug:
        setup_logging(debug=True)

    try:
        project = load_project_settings_for(payload.cwd)
        return handler(payload, settings, project)
    except MissingApiKeyError:
        logger.debug("No API key configured; skipping", hook_event=event)
        return CONTINUE_OUTPUT
    except Exception as exc:  # noqa: BLE001 - fail-open: never break the session on hook errors
        logger.error("Hook failed", hook_event=event, session_id=payload.session_id[:8], error=str(exc))
        return _failure_output(event, exc)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Supermemory hook receiver for Claude Code")
    parser.add_argument("event_type", help="Hook event type (e.g. session_start, SessionStart)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    setup_logging()

    event = normalize_event_name(args.event_type)
    if event not in HANDLERS:
        logger.error("Unhandled hook event: %s (raw: %s)", event, args.event_type)
        sys.exit(1)

    try:
        raw_data = read_stdin()
    except (json.JSONDecodeError, ValueError) as exc:
        logger.error("Invalid hook payload", hook_event=event, error=str(exc))
        write_output(CONTINUE_OUTPUT)
        return

    write_output(dispatch(event, raw_data))


if __name__ == "__main__":
    main()
