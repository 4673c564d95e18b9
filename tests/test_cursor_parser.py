"""Tests for claude_tracker.services.cursor_parser."""

import pytest

from claude_tracker.services.cursor_parser import (
    build_cursor_session,
    get_composer_created_at,
    load_bubbles,
    normalize_tool,
    parse_cursor_session,
)
from claude_tracker.types import DataSource, FileContribution, MessageRole, SessionHandle
from helpers import bubble, composer_data, create_kv_db

CREATED_AT = "2023-11-14T22:13:20.000Z"  # 1_700_000_000_000 ms


class TestNormalizeTool:
    @pytest.mark.parametrize("name,expected", [
        ("edit_file", "Edit"),
        ("create_file", "Write"),
        ("run_terminal_command", "Bash"),
        ("read_file", "Read"),
        ("codebase_search", "Grep"),
        ("grep_search", "Grep"),
        ("file_search", "Glob"),
    ])
    def test_mapped(self, name, expected):
        assert normalize_tool(name) == expected

    def test_unknown_passes_through(self):
        assert normalize_tool("web_search") == "web_search"


class TestBuildCursorSession:
    def test_input_is_running_max_output_is_sum(self):
        bubbles = [
            bubble("b1", 2, start=1000, tokens={"inputTokens": 100, "outputTokens": 20}),
            bubble("b2", 2, start=2000, tokens={"inputTokens": 250, "outputTokens": 20}),
            bubble("b3", 2, start=3000, tokens={"inputTokens": 180, "outputTokens": 20}),
        ]
        session = build_cursor_session(bubbles, "c1", "cursor-ws", CREATED_AT)
        assert session.total_tokens.input == 250
        assert session.total_tokens.output == 60

    def test_user_bubble(self):
        session = build_cursor_session(
            [bubble("b1", 1, "  add a parser\nplease ", start=1000)], "c1", "p", CREATED_AT,
        )
        assert session.first_prompt == "add a parser\nplease"
        assert (session.human_lines, session.human_words, session.human_chars) == (2, 4, 19)
        assert session.messages[0].role is MessageRole.USER
        assert session.source is DataSource.CURSOR

    def test_relative_times_resolved(self):
        session = build_cursor_session(
            [bubble("b1", 1, "a", start=1000), bubble("b2", 2, "b", start=2000, end=5000)],
            "c1", "p", CREATED_AT,
        )
        assert session.started_at == "2023-11-14T22:13:21.000Z"
        assert session.last_active == "2023-11-14T22:13:22.000Z"
        assert session.duration_ms == 3000

    def test_zero_end_time_does_not_use_settle_time(self):
        timed = bubble("b1", 2, "b", start=1_700_000_000_000, end=0)
        timed["timingInfo"]["clientSettleTime"] = 1_700_000_009_000
        session = build_cursor_session([timed], "c1", "p", CREATED_AT)
        assert session.duration_ms == 0

    def test_missing_end_time_uses_settle_time(self):
        timed = bubble("b1", 2, "b", start=1_700_000_000_000)
        timed["timingInfo"]["clientSettleTime"] = 1_700_000_009_000
        session = build_cursor_session([timed], "c1", "p", CREATED_AT)
        assert session.duration_ms == 9000

    def test_absolute_times_kept(self):
        session = build_cursor_session(
            [bubble("b1", 1, "a", start=1_700_000_100_000)], "c1", "p", CREATED_AT,
        )
        assert session.started_at == "2023-11-14T22:15:00.000Z"

    def test_unresolved_start_falls_back_to_creation(self):
        session = build_cursor_session([bubble("b1", 1, "a")], "c1", "p", CREATED_AT)
        assert session.unresolved_timestamps == 1
        assert session.messages[0].timestamp == CREATED_AT
        assert session.started_at == CREATED_AT

    def test_no_bubbles(self):
        session = build_cursor_session([], "c1", "p", CREATED_AT)
        assert session.messages == ()
        assert session.started_at == CREATED_AT
        assert session.last_active == CREATED_AT

    def test_code_blocks(self):
        session = build_cursor_session([
            bubble("b1", 2, start=1000, code_blocks=[
                {"content": "a\nb\nc", "uri": {"_fsPath": "/p/a.py"}},
                {"content": "x\ny"},
                {"content": "z", "uri": {"path": "/p/a.py"}},
            ]),
        ], "c1", "p", CREATED_AT)
        assert session.lines_added == 6
        assert session.lines_removed == 0
        assert session.file_contributions == {"/p/a.py": FileContribution(added=4)}
        assert session.tool_usage == {"Edit": 2}

    def test_missing_bubble_id(self):
        session = build_cursor_session(
            [bubble(None, 1, "a", start=1000), bubble(None, 2, "b", start=2000)],
            "c1", "p", CREATED_AT,
        )
        assert [m.id for m in session.messages] == ["cursor-c1-0", "cursor-c1-1"]

    def test_unknown_bubble_types_ignored(self):
        session = build_cursor_session([bubble("b1", 7, "?", start=1000)], "c1", "p", CREATED_AT)
        assert session.messages == ()


class TestComposerCreatedAt:
    def test_milliseconds(self, tmp_path):
        db = create_kv_db(tmp_path / "ws.vscdb", item_table={
            "composer.composerData": composer_data({"composerId": "c1", "createdAt": 1_700_000_000_000}),
        })
        assert get_composer_created_at(db, "c1") == CREATED_AT

    def test_seconds(self, tmp_path):
        db = create_kv_db(tmp_path / "ws.vscdb", item_table={
            "composer.composerData": composer_data({"composerId": "c1", "createdAt": 1_700_000_000}),
        })
        assert get_composer_created_at(db, "c1") == CREATED_AT

    def test_fallback_table(self, tmp_path):
        db = create_kv_db(tmp_path / "ws.vscdb", disk_kv={
            "composer.composerData": composer_data({"composerId": "c1", "createdAt": 1_700_000_000_000}),
        })
        assert get_composer_created_at(db, "c1") == CREATED_AT

    def test_unknown_composer(self, tmp_path):
        db = create_kv_db(tmp_path / "ws.vscdb", item_table={
            "composer.composerData": composer_data({"composerId": "c1"}),
        })
        assert get_composer_created_at(db, "c2") == ""
        assert get_composer_created_at(db, "c1") == ""

    def test_missing_db(self, tmp_path):
        assert get_composer_created_at(tmp_path / "none.vscdb", "c1") == ""


class TestLoadBubbles:
    def test_sorted_by_start(self, tmp_path):
        db = create_kv_db(tmp_path / "g.vscdb", disk_kv={
            "bubbleId:c1:b2": bubble("b2", 2, start=2000),
            "bubbleId:c1:b1": bubble("b1", 1, start=1000),
            "bubbleId:c10:b1": bubble("other", 1, start=500),
        })
        bubbles, skipped = load_bubbles(db, "c1")
        assert [b["bubbleId"] for b in bubbles] == ["b1", "b2"]
        assert skipped == 0

    def test_unparsable_counted(self, tmp_path):
        db = create_kv_db(tmp_path / "g.vscdb", disk_kv={
            "bubbleId:c1:b1": bubble("b1", 1, start=1000),
            "bubbleId:c1:b2": "{broken",
            "bubbleId:c1:b3": "[]",
        })
        bubbles, skipped = load_bubbles(db, "c1")
        assert len(bubbles) == 1
        assert skipped == 2

    def test_missing_db(self, tmp_path):
        assert load_bubbles(tmp_path / "none.vscdb", "c1") == ([], 0)


def test_parse_cursor_session(cursor_user_dir, project_path):
    handle = SessionHandle(
        id="c1",
        path=str(cursor_user_dir / "workspaceStorage" / "ws1" / "state.vscdb"),
        source=DataSource.CURSOR,
    )
    session = parse_cursor_session(
        handle, "cursor-ws1", cursor_user_dir / "globalStorage" / "state.vscdb",
    )

    assert session.session_id == "c1"
    assert session.project_id == "cursor-ws1"
    assert len(session.messages) == 2
    assert session.first_prompt == "Add a parser"
    assert session.total_tokens.input == 300
    assert session.total_tokens.output == 40
    assert session.lines_added == 2
    assert session.file_contributions == {str(project_path / "p.py"): FileContribution(added=2)}
    assert session.tool_usage == {"Edit": 1}
    assert session.started_at == "2023-11-14T22:13:21.000Z"
    assert session.duration_ms == 3000
