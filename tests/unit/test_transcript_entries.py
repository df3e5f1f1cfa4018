"""Unit tests for transcript parsing."""

import json

from supermemory_claude.transcript.entries import (
    EntryType,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    parse_transcript_text,
    read_transcript,
)


def _line(record: dict) -> str:
    return json.dumps(record)


def test_parse_skips_blank_corrupt_and_non_object_lines():
    text = "\n".join(
        [
            _line({"type": "user", "uuid": "u1", "message": {"content": "hello"}}),
            "",
            "{not json",
            "[1, 2, 3]",
            _line({"type": "assistant", "uuid": "a1", "message": {"content": [{"type": "text", "text": "hi"}]}}),
        ]
    )

    entries = parse_transcript_text(text)

    assert [e.uuid for e in entries] == ["u1", "a1"]
    assert entries[0].content == "hello"
    assert entries[1].content == (TextBlock("hi"),)


def test_parse_empty_text_yields_no_entries():
    assert parse_transcript_text("") == []


def test_unicode_line_separators_inside_strings_do_not_split_records():
    content = chr(0x2028).join(["a", "b", "c"]) + chr(0x2029) + chr(0x85) + "d"
    record = {"type": "user", "uuid": "u1", "message": {"content": content}}
    text = json.dumps(record, ensure_ascii=False) + "\n" + _line({"type": "assistant", "uuid": "a1"})

    entries = parse_transcript_text(text)

    assert [entry.uuid for entry in entries] == ["u1", "a1"]
    assert entries[0].content == content


def test_unknown_types_become_other():
    entries = parse_transcript_text(_line({"type": "summary", "uuid": "s1", "summary": "x"}))

    assert entries[0].type is EntryType.OTHER
    assert not entries[0].is_conversational


def test_content_blocks_are_typed():
    record = {
        "type": "assistant",
        "uuid": "a1",
        "timestamp": "2025-01-01T00:00:00.000Z",
        "message": {
            "content": [
                {"type": "thinking", "thinking": "hmm"},
                {"type": "tool_use", "id": "t1", "name": "Bash", "input": {"command": "ls"}},
                {"type": "mystery"},
            ]
        },
    }

    entry = parse_transcript_text(_line(record))[0]

    assert entry.timestamp == "2025-01-01T00:00:00.000Z"
    assert entry.content == (ThinkingBlock("hmm"), ToolUseBlock(id="t1", name="Bash", input={"command": "ls"}))


def test_tool_result_list_content_is_flattened():
    record = {
        "type": "user",
        "uuid": "u2",
        "message": {
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": "t1",
                    "is_error": True,
                    "content": [{"type": "text", "text": "line 1"}, {"type": "image"}, {"type": "text", "text": "line 2"}],
                }
            ]
        },
    }

    entry = parse_transcript_text(_line(record))[0]

    assert entry.content == (ToolResultBlock(tool_use_id="t1", content="line 1\nline 2", is_error=True),)


def test_string_content_exposes_single_text_block():
    entry = parse_transcript_text(_line({"type": "user", "uuid": "u1", "message": {"content": "plain"}}))[0]

    assert entry.blocks == (TextBlock("plain"),)


def test_meta_flag_is_parsed():
    entry = parse_transcript_text(_line({"type": "user", "uuid": "u1", "isMeta": True, "message": {"content": "x"}}))[0]

    assert entry.is_meta


def test_read_transcript_missing_file(tmp_path):
    assert read_transcript(tmp_path / "missing.jsonl") == []


def test_read_transcript_reads_file(tmp_path):
    path = tmp_path / "session.jsonl"
    path.write_text(_line({"type": "user", "uuid": "u1", "message": {"content": "hello"}}) + "\n", encoding="utf-8")

    entries = read_transcript(str(path))

    assert len(entries) == 1
    assert entries[0].is_user
