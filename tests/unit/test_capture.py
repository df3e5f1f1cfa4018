"""Unit tests for incremental transcript capture."""

import json

from supermemory_claude.config import CaptureSettings
from supermemory_claude.transcript.capture import collect_capture, format_new_entries, format_signal_entries
from supermemory_claude.transcript.watermark import WatermarkStore

TS = "2025-01-01T00:00:00.000Z"


def _write_transcript(path, records):
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
    return path


def _user(uuid, text):
    return {"type": "user", "uuid": uuid, "timestamp": TS, "message": {"role": "user", "content": text}}


def _assistant(uuid, text):
    return {
        "type": "assistant",
        "uuid": uuid,
        "timestamp": TS,
        "message": {"role": "assistant", "content": [{"type": "text", "text": text}]},
    }


CONVERSATION = [
    _user("u1", "Set up the project skeleton with a src layout please"),
    _assistant("a1", "Created the skeleton with pyproject.toml and a src package."),
    {"type": "summary", "uuid": "s1", "summary": "setup"},
    _user("u2", "There's a bug in the login flow when the token expires"),
    _assistant("a2", "Fixed the refresh logic so expired tokens are renewed."),
    _user("u3", "Thanks, looks good"),
    _assistant("a3", "Glad it works."),
]


def test_full_capture_renders_and_advances_watermark(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", CONVERSATION)
    store = WatermarkStore(tmp_path / "trackers")

    text = format_new_entries(transcript, "sess-1", CaptureSettings(), store)

    assert text is not None
    assert text.startswith(f"<|turn_start|>{TS}")
    assert "Set up the project skeleton" in text
    assert "Glad it works." in text
    assert store.get("sess-1") == "a3"


def test_second_capture_without_new_entries_returns_none(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", CONVERSATION)
    store = WatermarkStore(tmp_path / "trackers")

    format_new_entries(transcript, "sess-1", CaptureSettings(), store)

    assert format_new_entries(transcript, "sess-1", CaptureSettings(), store) is None
    assert store.get("sess-1") == "a3"


def test_capture_only_includes_entries_after_watermark(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", CONVERSATION)
    store = WatermarkStore(tmp_path / "trackers")
    store.set("sess-1", "a1")

    text = format_new_entries(transcript, "sess-1", CaptureSettings(), store)

    assert text is not None
    assert "Set up the project skeleton" not in text
    assert "bug in the login flow" in text


def test_small_capture_does_not_advance_watermark(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", [_user("u1", "hi")])
    store = WatermarkStore(tmp_path / "trackers")

    assert format_new_entries(transcript, "sess-1", CaptureSettings(), store) is None
    assert store.get("sess-1") is None


def test_missing_transcript_returns_none(tmp_path):
    store = WatermarkStore(tmp_path / "trackers")

    assert format_new_entries(tmp_path / "missing.jsonl", "sess-1", CaptureSettings(), store) is None


def test_signal_capture_selects_keyword_window(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", CONVERSATION)
    store = WatermarkStore(tmp_path / "trackers")
    settings = CaptureSettings(signal_extraction=True, signal_keywords=("bug",), signal_turns_before=1)

    text = format_signal_entries(transcript, "sess-1", settings, store)

    assert text is not None
    assert "bug in the login flow" in text
    assert "Set up the project skeleton" not in text
    assert "Thanks, looks good" not in text
    # Watermark moves past everything new, not just the selected window.
    assert store.get("sess-1") == "a3"


def test_signal_capture_without_signals_keeps_watermark(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", CONVERSATION)
    store = WatermarkStore(tmp_path / "trackers")
    settings = CaptureSettings(signal_extraction=True, signal_keywords=("kubernetes",))

    assert format_signal_entries(transcript, "sess-1", settings, store) is None
    assert store.get("sess-1") is None


def test_collect_capture_does_not_commit(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", CONVERSATION)
    store = WatermarkStore(tmp_path / "trackers")
    settings = CaptureSettings(signal_extraction=True, signal_keywords=("bug",))

    capture = collect_capture(transcript, "sess-1", settings, store)

    assert capture is not None
    assert capture.mode == "signal"
    assert capture.last_uuid == "a3"
    assert store.get("sess-1") is None

    capture.commit(store)
    assert store.get("sess-1") == "a3"


def test_collect_capture_signal_override(tmp_path):
    transcript = _write_transcript(tmp_path / "t.jsonl", CONVERSATION)
    settings = CaptureSettings(signal_extraction=True, signal_keywords=("bug",))

    capture = collect_capture(transcript, "sess-1", settings, WatermarkStore(tmp_path / "trackers"), signal=False)

    assert capture is not None
    assert capture.mode == "full"


def test_watermark_uses_last_entry_with_uuid(tmp_path):
    trailing = {"type": "assistant", "timestamp": TS, "message": {"content": [{"type": "text", "text": "ok"}]}}
    transcript = _write_transcript(tmp_path / "t.jsonl", [_user("u1", "x" * 120), trailing])
    store = WatermarkStore(tmp_path / "trackers")

    assert format_new_entries(transcript, "sess-1", CaptureSettings(), store) is not None
    assert store.get("sess-1") == "u1"
    assert format_new_entries(transcript, "sess-1", CaptureSettings(), store) is None
    assert store.get("sess-1") == "u1"


def test_entries_without_uuid_are_not_captured(tmp_path):
    records = [{"type": "user", "timestamp": TS, "message": {"content": "y" * 150}}]
    transcript = _write_transcript(tmp_path / "t.jsonl", records)
    store = WatermarkStore(tmp_path / "trackers")

    assert collect_capture(transcript, "sess-1", CaptureSettings(), store) is None
    assert store.get("sess-1") is None
