"""Tests for the Claude and Cursor project scanners."""

import pytest

from claude_tracker.services.claude_scanner import scan_claude_projects
from claude_tracker.services.cursor_scanner import read_workspace_folder, scan_cursor_projects
from claude_tracker.types import DataSource, SkipKind, SkipReport
from helpers import composer_data, create_kv_db, user_record, write_jsonl


class TestScanClaudeProjects:
    def test_finds_project(self, tmp_session_dir, simple_session_path, project_path):
        projects = scan_claude_projects(tmp_session_dir)
        assert len(projects) == 1
        project = projects[0]
        assert project.id == "-work-myapp"
        assert project.dir == str(project_path)
        assert project.sources == [DataSource.CLAUDE]
        assert [h.id for h in project.session_handles] == ["sess-1"]
        assert project.session_handles[0].size > 0

    def test_skips_dirs_without_sessions(self, tmp_session_dir):
        (tmp_session_dir / "-empty-project").mkdir()
        (tmp_session_dir / "-notes").mkdir()
        (tmp_session_dir / "-notes" / "readme.txt").write_text("x")
        assert scan_claude_projects(tmp_session_dir) == []

    def test_unresolved_slug_kept(self, tmp_session_dir):
        record = user_record("hi", "2026-02-10T10:00:00Z")
        del record["cwd"]
        write_jsonl(tmp_session_dir / "-no-such-place-anywhere" / "s.jsonl", [record])
        report = SkipReport()

        projects = scan_claude_projects(tmp_session_dir, report)
        assert projects[0].dir == "-no-such-place-anywhere"
        assert report.get(SkipKind.UNRESOLVABLE_PROJECT_PATH) == 1

    def test_cwd_from_later_probe_file(self, tmp_session_dir):
        project = tmp_session_dir / "-proj"
        no_cwd = user_record("hi", "2026-02-10T10:00:00Z")
        del no_cwd["cwd"]
        write_jsonl(project / "a.jsonl", [no_cwd])
        write_jsonl(project / "b.jsonl", [user_record("hi", "2026-02-10T10:00:00Z", cwd="/real/proj")])
        assert scan_claude_projects(tmp_session_dir)[0].dir == "/real/proj"

    def test_nonexistent_root(self, tmp_path):
        assert scan_claude_projects(tmp_path / "nonexistent") == []

    def test_empty_root(self, tmp_session_dir):
        assert scan_claude_projects(tmp_session_dir) == []


class TestScanCursorProjects:
    def _scan(self, user_dir, report=None):
        return scan_cursor_projects(
            user_dir / "workspaceStorage", user_dir / "globalStorage" / "state.vscdb", report,
        )

    def test_finds_live_composers(self, cursor_user_dir, project_path):
        projects = self._scan(cursor_user_dir)
        assert len(projects) == 1
        project = projects[0]
        assert project.id == "cursor-ws1"
        assert project.dir == str(project_path)
        assert project.sources == [DataSource.CURSOR]
        # c2 is archived and c3 has no bubbles
        assert [h.id for h in project.session_handles] == ["c1"]
        assert project.session_handles[0].source is DataSource.CURSOR

    def test_remote_workspace_skipped(self, cursor_user_dir):
        ws = cursor_user_dir / "workspaceStorage" / "ws2"
        ws.mkdir()
        (ws / "workspace.json").write_text('{"folder": "vscode-remote://ssh-remote+box/home/a"}')
        create_kv_db(ws / "state.vscdb", item_table={
            "composer.composerData": composer_data({"composerId": "c1"}),
        })
        assert [p.id for p in self._scan(cursor_user_dir)] == ["cursor-ws1"]

    def test_workspace_without_db_skipped(self, cursor_user_dir, tmp_path):
        ws = cursor_user_dir / "workspaceStorage" / "ws3"
        ws.mkdir()
        (ws / "workspace.json").write_text('{"folder": "file:///tmp/x"}')
        assert [p.id for p in self._scan(cursor_user_dir)] == ["cursor-ws1"]

    def test_missing_global_db(self, cursor_user_dir):
        (cursor_user_dir / "globalStorage" / "state.vscdb").unlink()
        report = SkipReport()
        assert self._scan(cursor_user_dir, report) == []
        assert report.get(SkipKind.UNREADABLE_SOURCE) == 1

    def test_missing_storage(self, tmp_path):
        report = SkipReport()
        assert self._scan(tmp_path / "Cursor" / "User", report) == []
        assert report.total == 0


class TestReadWorkspaceFolder:
    def test_file_uri(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text('{"folder": "file:///Users/a/my%20proj"}')
        assert read_workspace_folder(path) == "/Users/a/my proj"

    def test_multi_root_workspace(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text('{"workspace": "file:///Users/a/x.code-workspace"}')
        assert read_workspace_folder(path) == ""

    def test_invalid(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text("not json")
        assert read_workspace_folder(path) == ""
        assert read_workspace_folder(tmp_path / "missing.json") == ""
