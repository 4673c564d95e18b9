"""Scan, normalize and aggregate every session in one run."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from claude_tracker.config import TrackerConfig
from claude_tracker.errors import TrackerError
from claude_tracker.services.claude_scanner import scan_claude_projects
from claude_tracker.services.cursor_scanner import scan_cursor_projects
from claude_tracker.services.metrics import build_project_summaries, compute_global_metrics
from claude_tracker.services.normalizer import normalize
from claude_tracker.services.project_merger import merge_projects
from claude_tracker.types import (
    LoadResult,
    ParsedSession,
    ScannedProject,
    SessionHandle,
    SkipKind,
    SkipReport,
)
from claude_tracker.utils.path_codec import extract_project_name

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class _Progress:
    """One-way progress channel; a failing receiver never affects the run."""

    def __init__(self, callback: Optional[ProgressCallback]):
        self._callback = callback

    def __call__(self, message: str):
        logger.debug("%s", message)
        if self._callback is None:
            return
        try:
            self._callback(message)
        except Exception:
            logger.debug("Progress receiver failed; dropping further updates", exc_info=True)
            self._callback = None


def load_data(
    config: TrackerConfig,
    progress: Optional[ProgressCallback] = None,
) -> LoadResult:
    """Run the whole pipeline and return an immutable result.

    Per-file and per-record failures are absorbed and counted in
    ``LoadResult.skipped``. Only errors from listing the Claude projects
    root propagate.
    """
    send = _Progress(progress)
    report = SkipReport()

    send("Scanning Claude projects...")
    claude_projects = scan_claude_projects(config.claude_projects_dir, report)

    send("Scanning Cursor workspaces...")
    try:
        cursor_projects = scan_cursor_projects(
            config.cursor_workspace_storage_dir, config.cursor_global_db_path, report,
        )
    except OSError:
        logger.warning("Cursor scan failed", exc_info=True)
        report.record(SkipKind.UNREADABLE_SOURCE)
        cursor_projects = []

    send("Merging projects...")
    scanned = merge_projects(claude_projects, cursor_projects)
    total = len(scanned)

    with ThreadPoolExecutor(max_workers=config.max_workers, thread_name_prefix="project") as projects_pool, \
            ThreadPoolExecutor(max_workers=config.max_workers, thread_name_prefix="session") as sessions_pool:

        def run_project(n: int, project: ScannedProject):
            name = extract_project_name(project.dir) or project.id
            send(f"Parsing: {name} ({n}/{total})")
            futures = [
                sessions_pool.submit(_parse_one, handle, project.id, config)
                for handle in project.session_handles
            ]
            sessions = []
            project_report = SkipReport()
            for future in futures:
                session, session_report = future.result()
                project_report.merge(session_report)
                if session is not None:
                    sessions.append(session)
            return (project.id, project.dir, tuple(project.sources), sessions), project_report

        project_futures = [
            projects_pool.submit(run_project, n, project)
            for n, project in enumerate(scanned, start=1)
        ]
        project_sessions = []
        for future in project_futures:
            entry, project_report = future.result()
            report.merge(project_report)
            project_sessions.append(entry)

    send("Building metrics...")
    projects = build_project_summaries(project_sessions)
    metrics = compute_global_metrics(projects)
    if report.total:
        logger.info("Skipped during load: %s", report.as_dict())
    return LoadResult(projects=tuple(projects), metrics=metrics, skipped=report)


def _parse_one(
    handle: SessionHandle,
    project_id: str,
    config: TrackerConfig,
) -> tuple[ParsedSession | None, SkipReport]:
    """Normalize one session, turning any failure into a skip count."""
    report = SkipReport()
    try:
        session = normalize(handle, project_id, config.cursor_global_db_path)
    except TrackerError as e:
        logger.warning("Skipping session %s: %s", handle.id, e)
        report.record(e.kind or SkipKind.UNREADABLE_SOURCE)
        return None, report
    except Exception:
        logger.exception("Failed to parse session %s", handle.path)
        report.record(SkipKind.MALFORMED_RECORD)
        return None, report

    report.record(SkipKind.MALFORMED_RECORD, session.skipped_records)
    report.record(SkipKind.UNRESOLVABLE_TIMESTAMP, session.unresolved_timestamps)
    return session, report
