"""Shared test fixtures for Claude Tracker."""

import os
import sys
from pathlib import Path

import pytest

from helpers import (
    assistant_record,
    bubble,
    composer_data,
    create_kv_db,
    user_record,
    write_jsonl,
)

CREATED_AT_MS = 1_700_000_000_000


@pytest.fixture(scope="session")
def qapp():
    """Create a QGuiApplication for tests that need Qt."""
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv or ["test"])
    yield app


@pytest.fixture
def project_path(tmp_path) -> Path:
    """A real project directory both sources point at."""
    path = tmp_path / "work" / "myapp"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def tmp_session_dir(tmp_path) -> Path:
    """Create a temporary Claude projects directory structure."""
    projects_dir = tmp_path / ".claude" / "projects"
    projects_dir.mkdir(parents=True)
    return projects_dir


@pytest.fixture
def simple_session_path(tmp_session_dir, project_path) -> Path:
    """One Claude session: two prompts, two answers, one Edit."""
    cwd = str(project_path)
    return write_jsonl(tmp_session_dir / "-work-myapp" / "sess-1.jsonl", [
        {"type": "file-history-snapshot", "timestamp": "2026-02-10T09:59:00.000Z"},
        user_record("Hello, can you help me with a Python script?", "2026-02-10T10:00:00.000Z", "u1", cwd),
        assistant_record(
            "m1", "2026-02-10T10:00:05.000Z", text="Sure.",
            usage={"input_tokens": 100, "output_tokens": 20, "cache_read_input_tokens": 10},
            tools=[("Edit", {"file_path": "/x/a.py", "old_string": "a\nb\nc", "new_string": "1\n2\n3\n4\n5"})],
        ),
        user_record("Thanks, that looks great!", "2026-02-10T10:01:00.000Z", "u2", cwd),
        assistant_record(
            "m2", "2026-02-10T10:01:05.000Z", text="Glad to help.",
            usage={"input_tokens": 200, "output_tokens": 30},
        ),
        {"type": "system", "subtype": "turn_duration", "durationMs": 1500, "timestamp": "2026-02-10T10:01:06.000Z"},
    ])


@pytest.fixture
def cursor_user_dir(tmp_path, project_path) -> Path:
    """A Cursor user directory with one workspace and one live composer.

    A second composer is archived and a third has no bubbles.
    """
    user_dir = tmp_path / "Cursor" / "User"
    workspace = user_dir / "workspaceStorage" / "ws1"
    workspace.mkdir(parents=True)
    (workspace / "workspace.json").write_text(
        '{"folder": "' + project_path.as_uri() + '"}'
    )
    create_kv_db(
        workspace / "state.vscdb",
        item_table={"composer.composerData": composer_data(
            {"composerId": "c1", "createdAt": CREATED_AT_MS},
            {"composerId": "c2", "createdAt": CREATED_AT_MS, "isArchived": True},
            {"composerId": "c3", "createdAt": CREATED_AT_MS},
        )},
    )
    create_kv_db(
        user_dir / "globalStorage" / "state.vscdb",
        disk_kv={
            "bubbleId:c1:b1": bubble("b1", 1, "Add a parser", start=1000),
            "bubbleId:c1:b2": bubble(
                "b2", 2, "Done.", start=2000, end=5000,
                tokens={"inputTokens": 300, "outputTokens": 40},
                code_blocks=[{"content": "x = 1\ny = 2\n", "uri": {"_fsPath": str(project_path / "p.py")}}],
            ),
            "bubbleId:c2:b1": bubble("b1", 1, "archived", start=1000),
        },
    )
    return user_dir
