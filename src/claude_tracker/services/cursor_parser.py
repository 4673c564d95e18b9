"""Normalize Cursor composer sessions (SQLite bubbles) into ParsedSession values."""

import logging
from pathlib import Path

import orjson

from claude_tracker.errors import UnreadableSource
from claude_tracker.services.kv_store import (
    BUBBLE_TABLE,
    KeyValueStore,
    bubble_key_prefix,
)
from claude_tracker.types import (
    ConversationMessage,
    DataSource,
    FileContribution,
    MessageRole,
    ParsedSession,
    SessionHandle,
    TokenTotals,
    TokenUsage,
)
from claude_tracker.utils.content_sanitizer import (
    count_human_contribution,
    count_lines,
    truncate_assistant_text,
)
from claude_tracker.utils.timestamps import (
    iso_to_ms,
    ms_to_iso,
    normalize_epoch_ms,
    resolve_timestamp,
)

logger = logging.getLogger(__name__)

BUBBLE_USER = 1
BUBBLE_ASSISTANT = 2

# Cursor tool names → the names Claude Code uses for the same operations
TOOL_NAME_MAP = {
    "edit_file": "Edit",
    "create_file": "Write",
    "run_terminal_command": "Bash",
    "read_file": "Read",
    "list_directory": "Glob",
    "file_search": "Glob",
    "search_files": "Grep",
    "codebase_search": "Grep",
    "grep_search": "Grep",
}


def normalize_tool(name: str) -> str:
    return TOOL_NAME_MAP.get(name, name)


def parse_cursor_session(
    handle: SessionHandle,
    project_id: str,
    global_db_path: str | Path,
) -> ParsedSession:
    """Load and normalize one composer.

    ``handle.path`` is the workspace store holding the composer's
    metadata; the bubbles themselves live in the global store.
    """
    bubbles, skipped = load_bubbles(global_db_path, handle.id)
    created_at = get_composer_created_at(handle.path, handle.id)
    return build_cursor_session(
        bubbles, handle.id, project_id, created_at, skipped_records=skipped,
    )


def load_bubbles(global_db_path: str | Path, composer_id: str) -> tuple[list[dict], int]:
    """Return (bubbles sorted by start time, number of unparsable bubbles).

    A missing global store yields no bubbles.
    """
    try:
        store = KeyValueStore(global_db_path)
    except UnreadableSource as e:
        logger.debug("No bubbles for %s: %s", composer_id, e)
        return [], 0

    bubbles = []
    skipped = 0
    with store:
        for key, value in store.iter_prefix(BUBBLE_TABLE, bubble_key_prefix(composer_id)):
            try:
                bubble = orjson.loads(value)
            except orjson.JSONDecodeError:
                logger.debug("Dropping unparsable bubble %s", key)
                skipped += 1
                continue
            if not isinstance(bubble, dict):
                skipped += 1
                continue
            bubbles.append(bubble)

    bubbles.sort(key=_start_sort_key)
    return bubbles, skipped


def _timing(bubble: dict) -> dict:
    timing = bubble.get("timingInfo")
    return timing if isinstance(timing, dict) else {}


def _start_sort_key(bubble: dict) -> float:
    start = _timing(bubble).get("clientStartTime")
    if isinstance(start, bool) or not isinstance(start, (int, float)):
        return 0.0
    return float(start)


def get_composer_created_at(db_path: str | Path, composer_id: str) -> str:
    """Creation time of a composer as an ISO string, or "" if unknown."""
    try:
        store = KeyValueStore(db_path)
    except UnreadableSource as e:
        logger.debug("No creation time for %s: %s", composer_id, e)
        return ""
    with store:
        composer = store.find_composer(composer_id)
    if composer is None:
        return ""
    created_ms = normalize_epoch_ms(composer.get("createdAt"))
    if created_ms is None:
        return ""
    return ms_to_iso(created_ms)


def build_cursor_session(
    bubbles: list[dict],
    session_id: str,
    project_id: str,
    created_at: str,
    skipped_records: int = 0,
) -> ParsedSession:
    """Fold ordered bubbles into a ParsedSession.

    Relative bubble times are resolved against ``created_at``. Input tokens
    are cumulative per conversation in this source, so the running maximum
    is kept instead of a sum.
    """
    base_ms = iso_to_ms(created_at)
    messages: list[ConversationMessage] = []
    tool_usage: dict[str, int] = {}
    tokens_input = 0
    tokens_output = 0
    lines_added = 0
    file_contributions: dict[str, int] = {}
    first_prompt = ""
    started_at = ""
    last_active = ""
    human_lines = human_words = human_chars = 0
    duration_ms = 0.0
    unresolved = 0

    for bubble in bubbles:
        timing = _timing(bubble)
        start_ms = resolve_timestamp(timing.get("clientStartTime"), base_ms)
        raw_end = timing.get("clientEndTime")
        if raw_end is None:
            raw_end = timing.get("clientSettleTime")
        end_ms = resolve_timestamp(raw_end, base_ms)

        if start_ms is None:
            unresolved += 1
            ts = created_at
        else:
            ts = ms_to_iso(start_ms)
        if ts:
            started_at = min(started_at, ts) if started_at else ts
            last_active = max(last_active, ts)

        text = bubble.get("text")
        text = text if isinstance(text, str) else ""
        bubble_type = bubble.get("type")
        bubble_id = bubble.get("bubbleId")
        if not isinstance(bubble_id, str) or not bubble_id:
            bubble_id = f"cursor-{session_id}-{len(messages)}"

        token_count = bubble.get("tokenCount")
        token_count = token_count if isinstance(token_count, dict) else {}
        input_tokens = _count(token_count.get("inputTokens"))
        output_tokens = _count(token_count.get("outputTokens"))

        if bubble_type == BUBBLE_USER:
            trimmed = text.strip()
            if not first_prompt and trimmed:
                first_prompt = trimmed
            lines, words, chars = count_human_contribution(text)
            human_lines += lines
            human_words += words
            human_chars += chars
            if input_tokens is not None:
                tokens_input = max(tokens_input, input_tokens)

            messages.append(ConversationMessage(
                role=MessageRole.USER,
                timestamp=ts,
                id=bubble_id,
                content=text,
            ))

        elif bubble_type == BUBBLE_ASSISTANT:
            if output_tokens is not None:
                tokens_output += output_tokens
            if input_tokens is not None:
                tokens_input = max(tokens_input, input_tokens)

            if start_ms is not None and end_ms is not None:
                duration_ms += end_ms - start_ms

            code_blocks = bubble.get("codeBlocks")
            for block in code_blocks if isinstance(code_blocks, list) else []:
                if not isinstance(block, dict) or not isinstance(block.get("content"), str):
                    continue
                lines = count_lines(block["content"])
                lines_added += lines
                file_path = _code_block_path(block)
                if file_path:
                    file_contributions[file_path] = file_contributions.get(file_path, 0) + lines
                    tool = normalize_tool("edit_file")
                    tool_usage[tool] = tool_usage.get(tool, 0) + 1

            usage = None
            if input_tokens is not None or output_tokens is not None:
                usage = TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens)
            messages.append(ConversationMessage(
                role=MessageRole.ASSISTANT,
                timestamp=ts,
                id=bubble_id,
                content=truncate_assistant_text(text),
                usage=usage,
            ))

    # Raw start times mix absolute and relative values, so re-check the order
    messages.sort(key=lambda m: m.timestamp)

    return ParsedSession(
        session_id=session_id,
        project_id=project_id,
        source=DataSource.CURSOR,
        messages=tuple(messages),
        tool_usage=tool_usage,
        total_tokens=TokenTotals(input=tokens_input, output=tokens_output),
        duration_ms=duration_ms,
        lines_added=lines_added,
        file_contributions={
            fp: FileContribution(added=added) for fp, added in file_contributions.items()
        },
        first_prompt=first_prompt,
        started_at=started_at or created_at,
        last_active=last_active or created_at,
        human_lines=human_lines,
        human_words=human_words,
        human_chars=human_chars,
        skipped_records=skipped_records,
        unresolved_timestamps=unresolved,
    )


def _count(value) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _code_block_path(block: dict) -> str:
    uri = block.get("uri")
    if not isinstance(uri, dict):
        return ""
    for key in ("_fsPath", "path"):
        value = uri.get(key)
        if isinstance(value, str) and value:
            return value
    return ""
