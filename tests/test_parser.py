"""Tests for session file parsing."""

import json
import os
from datetime import datetime, timezone

import pytest

from claude_history.context.parser import (
    JsonLinesFormat,
    StructuredSessionFormat,
    parse_session_file,
    parse_timestamp,
    path_hash_id,
)
from transcripts import assistant, user


class TestJsonLines:
    def test_parses_conversation(self, write_session):
        path = write_session(
            "abc",
            [
                user("Add a health check", session_id="sess-1", timestamp="2026-01-15T11:00:00.000Z"),
                assistant(
                    [{"type": "text", "text": "I will add /health."}],
                    session_id="sess-1",
                    timestamp="2026-01-15T11:00:20.000Z",
                ),
            ],
        )
        session = parse_session_file(path)

        assert session is not None
        assert session.id == "sess-1"
        assert session.cwd == "/home/user/myproject"
        assert session.project_path == "/home/user/myproject"
        assert [m.role for m in session.messages] == ["user", "assistant"]
        assert session.messages[1].content == "I will add /health."
        assert session.created_at == datetime(2026, 1, 15, 11, 0, tzinfo=timezone.utc)
        assert session.updated_at == datetime(2026, 1, 15, 11, 0, 20, tzinfo=timezone.utc)
        assert session.file_path == path

    def test_metadata_only_records_feed_identity_and_bounds(self, write_session):
        path = write_session(
            "file-stem",
            [
                {
                    "type": "file-history-snapshot",
                    "sessionId": "meta-id",
                    "cwd": "/work",
                    "timestamp": "2026-01-01T00:00:00Z",
                },
                {"type": "summary", "summary": "Not a message"},
                user("Hello there", timestamp="2026-01-02T00:00:00Z", cwd="/other"),
            ],
        )
        session = parse_session_file(path)

        assert session.id == "meta-id"
        assert session.cwd == "/work"
        assert len(session.messages) == 1
        assert session.created_at == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert session.updated_at == datetime(2026, 1, 2, tzinfo=timezone.utc)

    def test_role_falls_back_to_record_type(self, write_session):
        path = write_session("r", [{"type": "assistant", "message": {"content": "Done."}}])
        assert parse_session_file(path).messages[0].role == "assistant"

    def test_tool_results_and_empty_content_dropped(self, write_session):
        path = write_session(
            "t",
            [
                user("Run the tests"),
                assistant([{"type": "tool_use", "name": "Bash", "input": {"command": "pytest -q"}}]),
                user([{"type": "tool_result", "tool_use_id": "t1", "content": "3 passed"}]),
                assistant([]),
            ],
        )
        session = parse_session_file(path)
        assert [m.content for m in session.messages] == ["Run the tests", "[Tool: Bash: pytest -q]"]

    def test_legacy_flat_records(self, tmp_path):
        path = tmp_path / "legacy.jsonl"
        path.write_text(
            json.dumps({"role": "human", "content": "Old style"})
            + "\n"
            + json.dumps({"role": "assistant", "content": [{"text": "Reply"}]})
            + "\n"
        )
        session = parse_session_file(path)
        assert [(m.role, m.content) for m in session.messages] == [
            ("human", "Old style"),
            ("assistant", "Reply"),
        ]

    def test_malformed_lines_skipped(self, tmp_path):
        path = tmp_path / "broken.jsonl"
        good = json.dumps(user("Survives")).encode("utf-8")
        path.write_bytes(b"\xff\xfe not utf8\n{not json\n[1, 2]\n\n" + good + b"\n")
        session = parse_session_file(path)
        assert session is not None
        assert [m.content for m in session.messages] == ["Survives"]

    def test_oversized_integer_line_skipped(self, tmp_path):
        path = tmp_path / "bigint.jsonl"
        huge = b'{"type": "user", "n": ' + b"9" * 5000 + b"}"
        good = json.dumps(user("Still parsed")).encode("utf-8")
        path.write_bytes(huge + b"\n" + good + b"\n")
        session = parse_session_file(path)
        assert [m.content for m in session.messages] == ["Still parsed"]

    def test_deeply_nested_line_skipped(self, tmp_path):
        path = tmp_path / "nested.jsonl"
        nested = b"[" * 100_000 + b"]" * 100_000
        good = json.dumps(user("Still parsed")).encode("utf-8")
        path.write_bytes(good + b"\n" + nested + b"\n")
        session = parse_session_file(path)
        assert [m.content for m in session.messages] == ["Still parsed"]

    def test_id_falls_back_to_file_stem(self, write_session):
        path = write_session("7f3c2a", [user("No session id here")])
        assert parse_session_file(path).id == "7f3c2a"

    def test_updated_at_falls_back_to_mtime(self, write_session):
        path = write_session("m", [user("No timestamps")])
        os.utime(path, (1_600_000_000, 1_600_000_000))
        session = parse_session_file(path)
        assert session.created_at is None
        assert session.updated_at == datetime.fromtimestamp(1_600_000_000, tz=timezone.utc)

    def test_no_messages_is_not_a_session(self, write_session):
        path = write_session(
            "empty",
            [{"type": "summary", "summary": "x", "sessionId": "s"}, user("")],
        )
        assert parse_session_file(path) is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "nothing.jsonl"
        path.write_text("")
        assert parse_session_file(path) is None


class TestStructured:
    def test_parses_messages_object(self, tmp_path):
        path = tmp_path / "projects" / "-srv-app" / "legacy.json"
        path.parent.mkdir(parents=True)
        path.write_text(
            json.dumps(
                {
                    "id": "legacy-1",
                    "cwd": "/srv/app",
                    "created_at": "2024-01-01T00:00:00Z",
                    "updated_at": "2024-01-02T00:00:00Z",
                    "messages": [
                        {"role": "human", "content": "Hi"},
                        {"role": "assistant", "content": [{"type": "text", "text": "Hello"}]},
                        {"content": "no role"},
                        {"role": "assistant", "content": ""},
                    ],
                },
                indent=2,
            )
        )
        session = parse_session_file(path)

        assert session.id == "legacy-1"
        assert session.project_path == "/srv/app"
        assert session.cwd == "/srv/app"
        assert [m.role for m in session.messages] == ["human", "assistant", "unknown"]
        assert session.updated_at == datetime(2024, 1, 2, tzinfo=timezone.utc)

    def test_conversation_key_and_session_id(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text(
            json.dumps({"session_id": "conv-9", "conversation": [{"role": "user", "content": "x"}]})
        )
        session = parse_session_file(path)
        assert session.id == "conv-9"
        assert session.updated_at is not None

    def test_bounds_fall_back_to_message_timestamps(self, tmp_path):
        path = tmp_path / "stamped.json"
        path.write_text(
            json.dumps(
                {
                    "messages": [
                        {"role": "user", "content": "a", "timestamp": "2024-03-02T00:00:00Z"},
                        {"role": "assistant", "content": "b", "timestamp": "2024-03-01T00:00:00Z"},
                        {"role": "user", "content": "c", "timestamp": "2024-03-05T00:00:00Z"},
                    ]
                }
            )
        )
        os.utime(path, (1_600_000_000, 1_600_000_000))
        session = parse_session_file(path)
        assert session.created_at == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert session.updated_at == datetime(2024, 3, 5, tzinfo=timezone.utc)

    def test_oversized_integer_document(self, tmp_path):
        path = tmp_path / "bigint.json"
        path.write_text("9" * 5000)
        assert parse_session_file(path) is None

    def test_not_a_session_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"theme": "dark", "model": "opus"}))
        assert parse_session_file(path) is None

    def test_single_jsonl_record_falls_through(self, write_session):
        path = write_session("one", [user("Only line", session_id="one-line")])
        raw = path.read_bytes()
        assert StructuredSessionFormat().parse(raw, path) is None
        assert JsonLinesFormat().parse(raw, path).id == "one-line"


class TestHelpers:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            parse_session_file(tmp_path / "missing.jsonl")

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2026-01-15T10:00:00.000Z", datetime(2026, 1, 15, 10, tzinfo=timezone.utc)),
            ("2026-01-15T10:00:00", datetime(2026, 1, 15, 10, tzinfo=timezone.utc)),
            (
                "2026-01-15T10:00:00.1234Z",
                datetime(2026, 1, 15, 10, 0, 0, 123400, tzinfo=timezone.utc),
            ),
            ("2026-01-15T12:00:00+02:00", datetime(2026, 1, 15, 10, tzinfo=timezone.utc)),
            ("yesterday", None),
            (None, None),
            (1700000000, None),
        ],
    )
    def test_parse_timestamp(self, value, expected):
        assert parse_timestamp(value) == expected

    def test_path_hash_is_stable_hex(self, tmp_path):
        first = path_hash_id(tmp_path / "a.jsonl")
        assert first == path_hash_id(tmp_path / "a.jsonl")
        assert first != path_hash_id(tmp_path / "b.jsonl")
        assert len(first) == 16
        int(first, 16)
