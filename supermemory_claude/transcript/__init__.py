"""Transcript parsing, turn grouping, signal extraction and capture rendering."""

from supermemory_claude.transcript.capture import (
    Capture,
    collect_capture,
    format_new_entries,
    format_signal_entries,
)
from supermemory_claude.transcript.entries import EntryType, TranscriptEntry, parse_transcript_text, read_transcript
from supermemory_claude.transcript.renderer import render_capture, render_turns
from supermemory_claude.transcript.signals import find_signal_turns, select_signal_turns, signal_window_indices
from supermemory_claude.transcript.turns import FULL_POLICY, SIGNAL_POLICY, Turn, group_turns
from supermemory_claude.transcript.watermark import WatermarkStore, entries_since

__all__ = [
    "FULL_POLICY",
    "SIGNAL_POLICY",
    "Capture",
    "EntryType",
    "TranscriptEntry",
    "Turn",
    "WatermarkStore",
    "collect_capture",
    "entries_since",
    "find_signal_turns",
    "format_new_entries",
    "format_signal_entries",
    "group_turns",
    "parse_transcript_text",
    "read_transcript",
    "render_capture",
    "render_turns",
    "select_signal_turns",
    "signal_window_indices",
]
