"""Incremental transcript capture.

Pipeline: read transcript -> drop everything up to the session watermark ->
group into turns -> (signal mode) pick keyword windows -> render.

The watermark is only advanced by ``Capture.commit`` once a non-trivial render
exists, so a too-small window is reconsidered on the next invocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from structlog import get_logger

from supermemory_claude.config import CaptureSettings
from supermemory_claude.transcript.entries import TranscriptEntry, read_transcript
from supermemory_claude.transcript.renderer import render_turns
from supermemory_claude.transcript.signals import find_signal_turns, select_signal_turns
from supermemory_claude.transcript.turns import FULL_POLICY, SIGNAL_POLICY, group_turns
from supermemory_claude.transcript.watermark import WatermarkStore, entries_since

logger = get_logger(__name__)


@dataclass(frozen=True)
class Capture:
    """A rendered capture and the watermark it will advance to."""

    text: str
    session_id: str
    last_uuid: Optional[str]
    mode: str

    def commit(self, store: WatermarkStore) -> None:
        if not self.last_uuid:
            logger.warning("Capture has no entry uuid; watermark not advanced", session_id=self.session_id[:8])
            return
        store.set(self.session_id, self.last_uuid)


def _render_full(entries: list[TranscriptEntry], settings: CaptureSettings) -> Optional[str]:
    turns = group_turns(entries, FULL_POLICY)
    return render_turns(turns, include_tools=settings.include_tools)


def _render_signal(entries: list[TranscriptEntry], settings: CaptureSettings) -> Optional[str]:
    turns = group_turns(entries, SIGNAL_POLICY)
    if not turns:
        return None

    signal_indices = find_signal_turns(turns, settings.signal_keywords)
    if not signal_indices:
        logger.debug("No signal turns", turns=len(turns))
        return None

    selected = select_signal_turns(turns, signal_indices, settings.signal_turns_before)
    logger.debug("Signal turns selected", turns=len(turns), signals=len(signal_indices), selected=len(selected))
    return render_turns(selected, text_only=True)


def collect_capture(
    transcript_path: str | Path,
    session_id: str,
    settings: CaptureSettings,
    store: Optional[WatermarkStore] = None,
    *,
    signal: Optional[bool] = None,
) -> Optional[Capture]:
    """Render the not-yet-captured part of a transcript without committing it.

    Args:
        transcript_path: Claude Code session .jsonl file.
        session_id: Session the watermark belongs to.
        settings: Effective capture settings.
        store: Watermark store (defaults to the per-user trackers directory).
        signal: Force signal (True) or full (False) mode; None follows settings.

    Returns:
        The capture, or None when nothing new qualifies.
    """
    store = store or WatermarkStore()

    entries = read_transcript(transcript_path)
    if not entries:
        return None

    new_entries = entries_since(entries, store.get(session_id))
    if not new_entries:
        logger.debug("Nothing new since last capture", session_id=session_id[:8])
        return None

    # The watermark can only move to an entry that carries a uuid.
    last_uuid = next((entry.uuid for entry in reversed(new_entries) if entry.uuid), None)
    if last_uuid is None:
        logger.debug("No new entry carries a uuid; skipping capture", session_id=session_id[:8])
        return None

    use_signal = settings.signal_extraction if signal is None else signal
    text = _render_signal(new_entries, settings) if use_signal else _render_full(new_entries, settings)
    if text is None:
        return None

    return Capture(
        text=text,
        session_id=session_id,
        last_uuid=last_uuid,
        mode=SIGNAL_POLICY.name if use_signal else FULL_POLICY.name,
    )


def _collect_and_commit(
    transcript_path: str | Path,
    session_id: str,
    settings: CaptureSettings,
    store: Optional[WatermarkStore],
    signal: bool,
) -> Optional[str]:
    store = store or WatermarkStore()
    capture = collect_capture(transcript_path, session_id, settings, store, signal=signal)
    if capture is None:
        return None
    capture.commit(store)
    return capture.text


def format_new_entries(
    transcript_path: str | Path,
    session_id: str,
    settings: CaptureSettings,
    store: Optional[WatermarkStore] = None,
) -> Optional[str]:
    """Full capture of everything new; advances the watermark on success."""
    return _collect_and_commit(transcript_path, session_id, settings, store, signal=False)


def format_signal_entries(
    transcript_path: str | Path,
    session_id: str,
    settings: CaptureSettings,
    store: Optional[WatermarkStore] = None,
) -> Optional[str]:
    """Signal-window capture of what is new; advances the watermark on success."""
    return _collect_and_commit(transcript_path, session_id, settings, store, signal=True)
