"""Single entry point that normalizes a session handle of either source."""

from pathlib import Path

from claude_tracker.services.cursor_parser import parse_cursor_session
from claude_tracker.services.jsonl_parser import parse_session_file
from claude_tracker.types import DataSource, ParsedSession, SessionHandle


def normalize(
    handle: SessionHandle,
    project_id: str,
    cursor_global_db: str | Path,
) -> ParsedSession:
    """Parse one session with the normalizer matching its source tag.

    Raises UnreadableSource when a Claude transcript cannot be read.
    """
    if handle.source is DataSource.CLAUDE:
        return parse_session_file(handle.path, handle.id, project_id)
    if handle.source is DataSource.CURSOR:
        return parse_cursor_session(handle, project_id, cursor_global_db)
    raise ValueError(f"Unknown session source: {handle.source!r}")
