"""Unit tests for per-session capture watermarks."""

import pytest

from supermemory_claude.errors import WatermarkError
from supermemory_claude.transcript.entries import EntryType, TranscriptEntry
from supermemory_claude.transcript.watermark import WatermarkStore, entries_since


def _entry(kind: EntryType, uuid: str) -> TranscriptEntry:
    return TranscriptEntry(type=kind, uuid=uuid, content="text")


ENTRIES = [
    _entry(EntryType.USER, "u1"),
    _entry(EntryType.ASSISTANT, "a1"),
    _entry(EntryType.OTHER, "s1"),
    _entry(EntryType.USER, "u2"),
    _entry(EntryType.ASSISTANT, "a2"),
]


def test_get_returns_none_without_file(tmp_path):
    assert WatermarkStore(tmp_path).get("session-1") is None


def test_set_then_get_round_trips(tmp_path):
    store = WatermarkStore(tmp_path)

    store.set("session-1", "a1")

    assert store.get("session-1") == "a1"
    assert (tmp_path / "session-1.txt").read_text(encoding="utf-8") == "a1"


def test_set_is_idempotent(tmp_path):
    store = WatermarkStore(tmp_path)

    store.set("session-1", "a1")
    store.set("session-1", "a1")

    assert store.get("session-1") == "a1"
    assert [p.name for p in tmp_path.iterdir()] == ["session-1.txt"]


def test_empty_file_means_no_watermark(tmp_path):
    (tmp_path / "session-1.txt").write_text("  \n", encoding="utf-8")

    assert WatermarkStore(tmp_path).get("session-1") is None


def test_set_rejects_empty_uuid(tmp_path):
    with pytest.raises(ValueError):
        WatermarkStore(tmp_path).set("session-1", "")


def test_unsafe_session_ids_are_hashed(tmp_path):
    store = WatermarkStore(tmp_path)

    path = store.path_for("../../etc/passwd")

    assert path.parent == tmp_path
    assert ".." not in path.name


def test_read_failure_raises_watermark_error(tmp_path):
    store = WatermarkStore(tmp_path)
    # A directory where the file should be makes the read fail at the I/O level.
    store.path_for("session-1").mkdir(parents=True)

    with pytest.raises(WatermarkError):
        store.get("session-1")


def test_write_failure_raises_watermark_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(WatermarkError):
        WatermarkStore(blocker / "trackers").set("session-1", "a1")


def test_clear_removes_watermark(tmp_path):
    store = WatermarkStore(tmp_path)
    store.set("session-1", "a1")

    store.clear("session-1")
    store.clear("session-1")

    assert store.get("session-1") is None


def test_default_directory_follows_home_override(isolated_home):
    assert WatermarkStore().directory == isolated_home / "trackers"


def test_entries_since_without_watermark_returns_all_conversational():
    assert [e.uuid for e in entries_since(ENTRIES, None)] == ["u1", "a1", "u2", "a2"]


def test_entries_since_returns_entries_after_watermark():
    assert [e.uuid for e in entries_since(ENTRIES, "a1")] == ["u2", "a2"]


def test_entries_since_unknown_watermark_returns_all():
    assert [e.uuid for e in entries_since(ENTRIES, "gone")] == ["u1", "a1", "u2", "a2"]


def test_entries_since_at_end_returns_nothing():
    assert entries_since(ENTRIES, "a2") == []
