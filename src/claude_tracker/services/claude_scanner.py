"""Discover Claude Code projects and their session files."""

import logging
from pathlib import Path

from claude_tracker.config import default_claude_projects_dir
from claude_tracker.errors import UnresolvableProjectPath
from claude_tracker.services.jsonl_parser import read_session_metadata
from claude_tracker.types import DataSource, ScannedProject, SessionHandle, SkipKind, SkipReport
from claude_tracker.utils.path_codec import resolve_project_dir

logger = logging.getLogger(__name__)

# Session files consulted for a project's cwd before falling back to its slug
CWD_PROBE_FILES = 3


def scan_claude_projects(
    projects_root: str | Path | None = None,
    report: SkipReport | None = None,
) -> list[ScannedProject]:
    """List every project directory holding at least one .jsonl session.

    A missing root yields an empty list. Errors listing the root itself
    propagate to the caller.
    """
    root = Path(projects_root) if projects_root else default_claude_projects_dir()
    if not root.is_dir():
        logger.info("Claude projects root does not exist: %s", root)
        return []

    projects = []
    for entry in sorted(root.iterdir()):
        if not entry.is_dir():
            continue
        handles = _session_handles(entry)
        if not handles:
            continue

        project_id = entry.name
        projects.append(ScannedProject(
            id=project_id,
            dir=resolve_claude_project_dir(handles, project_id, report),
            sources=[DataSource.CLAUDE],
            session_handles=handles,
        ))
    return projects


def _session_handles(project_dir: Path) -> list[SessionHandle]:
    handles = []
    try:
        files = sorted(project_dir.glob("*.jsonl"))
    except OSError:
        logger.warning("Cannot list project directory %s", project_dir, exc_info=True)
        return handles

    for jsonl_file in files:
        try:
            if not jsonl_file.is_file():
                continue
            size = jsonl_file.stat().st_size
        except OSError:
            continue
        handles.append(SessionHandle(
            id=jsonl_file.stem,
            path=str(jsonl_file),
            source=DataSource.CLAUDE,
            size=size,
        ))
    return handles


def resolve_claude_project_dir(
    handles: list[SessionHandle],
    project_id: str,
    report: SkipReport | None = None,
) -> str:
    """Resolve a project's real filesystem path.

    Prefers the cwd recorded in one of the first session files, then the
    decoded slug if it exists on disk, and finally keeps the raw slug so
    processing can continue (the project just won't merge across sources).
    """
    for handle in handles[:CWD_PROBE_FILES]:
        cwd, _ = read_session_metadata(handle.path)
        if cwd:
            return cwd

    try:
        return resolve_project_dir(project_id)
    except UnresolvableProjectPath:
        logger.debug("Keeping unresolved project slug %s", project_id)
        if report is not None:
            report.record(SkipKind.UNRESOLVABLE_PROJECT_PATH)
        return project_id
