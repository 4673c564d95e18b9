"""Discover Cursor workspaces and the composers worth parsing in them."""

import logging
from pathlib import Path

import orjson

from claude_tracker.errors import UnreadableSource
from claude_tracker.services.kv_store import KeyValueStore
from claude_tracker.types import DataSource, ScannedProject, SessionHandle, SkipKind, SkipReport
from claude_tracker.utils.path_codec import decode_folder_uri

logger = logging.getLogger(__name__)

WORKSPACE_DB_NAME = "state.vscdb"
WORKSPACE_JSON_NAME = "workspace.json"


def scan_cursor_projects(
    workspace_storage_dir: str | Path,
    global_db_path: str | Path,
    report: SkipReport | None = None,
) -> list[ScannedProject]:
    """List workspaces that have at least one live composer.

    A composer is live when it is not archived and the global store holds
    at least one bubble for it. Missing storage yields an empty list.
    """
    storage = Path(workspace_storage_dir)
    if not storage.is_dir():
        logger.info("Cursor workspace storage does not exist: %s", storage)
        return []

    active_composers = get_composer_ids_with_bubbles(global_db_path, report)
    if not active_composers:
        return []

    projects = []
    try:
        entries = sorted(storage.iterdir())
    except OSError:
        logger.warning("Cannot list Cursor workspace storage %s", storage, exc_info=True)
        _record(report, SkipKind.UNREADABLE_SOURCE)
        return []

    for workspace_dir in entries:
        if not workspace_dir.is_dir():
            continue
        db_path = workspace_dir / WORKSPACE_DB_NAME
        if not db_path.is_file():
            continue

        folder = read_workspace_folder(workspace_dir / WORKSPACE_JSON_NAME)
        if not folder:
            continue

        try:
            with KeyValueStore(db_path) as store:
                composers = store.read_composers()
        except UnreadableSource as e:
            logger.warning("Skipping workspace %s: %s", workspace_dir.name, e)
            _record(report, SkipKind.UNREADABLE_SOURCE)
            continue
        if not composers:
            continue

        handles = [
            SessionHandle(id=c["composerId"], path=str(db_path), source=DataSource.CURSOR)
            for c in composers
            if isinstance(c.get("composerId"), str)
            and not c.get("isArchived", False)
            and c["composerId"] in active_composers
        ]
        if not handles:
            continue

        projects.append(ScannedProject(
            id=f"cursor-{workspace_dir.name}",
            dir=folder,
            sources=[DataSource.CURSOR],
            session_handles=handles,
        ))
    return projects


def read_workspace_folder(workspace_json: Path) -> str:
    """Local project folder declared by a workspace, or "" to skip it."""
    try:
        data = orjson.loads(workspace_json.read_bytes())
    except (OSError, orjson.JSONDecodeError):
        return ""
    if not isinstance(data, dict) or not isinstance(data.get("folder"), str):
        return ""
    return decode_folder_uri(data["folder"])


def get_composer_ids_with_bubbles(
    global_db_path: str | Path,
    report: SkipReport | None = None,
) -> set[str]:
    """Composer ids with at least one message in the global store."""
    try:
        with KeyValueStore(global_db_path) as store:
            return store.composer_ids_with_bubbles()
    except UnreadableSource as e:
        logger.info("Cursor global store unavailable: %s", e)
        _record(report, SkipKind.UNREADABLE_SOURCE)
        return set()


def _record(report: SkipReport | None, kind: SkipKind):
    if report is not None:
        report.record(kind)
