"""Normalize Claude Code JSONL transcripts into ParsedSession values."""

import logging
from pathlib import Path

import orjson

from claude_tracker.errors import MalformedRecord, UnreadableSource
from claude_tracker.types import (
    ConversationMessage,
    DataSource,
    FileContribution,
    MessageRole,
    ParsedSession,
    TokenTotals,
    TokenUsage,
)
from claude_tracker.utils.content_sanitizer import (
    count_human_contribution,
    count_lines,
    extract_display_text,
    extract_raw_text,
    strip_markup,
    truncate_assistant_text,
)

logger = logging.getLogger(__name__)

# Max size for a single JSONL line (10MB)
MAX_LINE_SIZE = 10 * 1024 * 1024

# Administrative records that never contribute to a conversation
SKIP_TYPES = frozenset({"progress", "queue-operation", "file-history-snapshot"})


def parse_session_file(
    file_path: str | Path,
    session_id: str,
    project_id: str,
) -> ParsedSession:
    """Read and normalize one transcript file.

    Raises UnreadableSource if the file cannot be read at all.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise UnreadableSource(path, e.strerror or str(e)) from e
    return parse_session_text(text, session_id, project_id)


def _load_record(line: str) -> dict:
    if len(line) > MAX_LINE_SIZE:
        raise MalformedRecord(f"line exceeds {MAX_LINE_SIZE // (1024 * 1024)}MB")
    try:
        raw = orjson.loads(line)
    except orjson.JSONDecodeError as e:
        raise MalformedRecord(str(e)) from e
    if not isinstance(raw, dict):
        raise MalformedRecord("record is not an object")
    return raw


def _message_of(raw: dict, role: str) -> dict | None:
    message = raw.get("message")
    if isinstance(message, dict) and message.get("role") == role:
        return message
    return None


def parse_session_text(text: str, session_id: str, project_id: str) -> ParsedSession:
    """Normalize the full text of one transcript.

    Every non-blank line is an independent record; malformed lines are
    dropped and counted, never fatal.
    """
    user_records: list[tuple[int, dict, str]] = []
    # message id -> (record, timestamp); a later record replaces an earlier one
    assistant_by_id: dict[str, tuple[dict, str]] = {}
    # (discovery index, record, timestamp) for assistant records without an id
    assistant_no_id: list[tuple[int, dict, str]] = []
    assistant_order: dict[str, int] = {}
    duration_ms = 0.0
    cwd = ""
    started_at = ""
    last_active = ""
    skipped = 0

    # Only "\n" ends a record; JSON strings may hold raw U+2028 and friends
    for line_num, line in enumerate(text.split("\n"), start=1):
        line = line.strip()
        if not line:
            continue

        try:
            raw = _load_record(line)
        except MalformedRecord as e:
            logger.debug("Dropping line %d of session %s: %s", line_num, session_id, e)
            skipped += 1
            continue

        event_type = raw.get("type")
        if event_type in SKIP_TYPES:
            continue

        if not cwd and isinstance(raw.get("cwd"), str):
            cwd = raw["cwd"]

        ts = raw.get("timestamp")
        ts = ts if isinstance(ts, str) else ""
        # Min/max rather than first/last keeps started_at <= last_active
        if ts:
            started_at = min(started_at, ts) if started_at else ts
            last_active = max(last_active, ts)

        if event_type == "system":
            duration = raw.get("durationMs")
            if raw.get("subtype") == "turn_duration" and isinstance(duration, (int, float)):
                duration_ms += duration
            continue

        if event_type == "user" and _message_of(raw, "user") is not None:
            user_records.append((line_num, raw, ts))
        elif event_type == "assistant":
            message = _message_of(raw, "assistant")
            if message is None:
                continue
            msg_id = message.get("id")
            if isinstance(msg_id, str) and msg_id:
                assistant_by_id[msg_id] = (raw, ts)
                assistant_order[msg_id] = line_num
            else:
                assistant_no_id.append((line_num, raw, ts))

    # Deduplicated assistant records sit where their winning record was read;
    # equal timestamps keep discovery order
    tagged = [(pos, MessageRole.USER, raw, ts) for pos, raw, ts in user_records]
    tagged += [
        (assistant_order[mid], MessageRole.ASSISTANT, raw, ts)
        for mid, (raw, ts) in assistant_by_id.items()
    ]
    tagged += [(pos, MessageRole.ASSISTANT, raw, ts) for pos, raw, ts in assistant_no_id]
    tagged.sort(key=lambda item: (item[3], item[0]))
    unresolved = sum(1 for item in tagged if not item[3])

    builder = _SessionBuilder()
    for _, role, raw, ts in tagged:
        if role is MessageRole.USER:
            builder.add_user(raw, ts)
        else:
            builder.add_assistant(raw, ts)

    return ParsedSession(
        session_id=session_id,
        project_id=project_id,
        source=DataSource.CLAUDE,
        cwd=cwd,
        messages=tuple(builder.messages),
        tool_usage=builder.tool_usage,
        total_tokens=TokenTotals(**builder.tokens),
        duration_ms=duration_ms,
        lines_added=builder.lines_added,
        lines_removed=builder.lines_removed,
        file_contributions={
            fp: FileContribution(added, removed)
            for fp, (added, removed) in builder.file_contributions.items()
        },
        first_prompt=builder.first_prompt,
        started_at=started_at,
        last_active=last_active,
        human_lines=builder.human_lines,
        human_words=builder.human_words,
        human_chars=builder.human_chars,
        model=builder.model,
        skipped_records=skipped,
        unresolved_timestamps=unresolved,
    )


class _SessionBuilder:
    """Accumulates per-message state while walking the ordered records."""

    def __init__(self):
        self.messages: list[ConversationMessage] = []
        self.tool_usage: dict[str, int] = {}
        self.tokens = {"input": 0, "output": 0, "cache_read": 0, "cache_creation": 0}
        self.lines_added = 0
        self.lines_removed = 0
        self.file_contributions: dict[str, list[int]] = {}
        self.first_prompt = ""
        self.human_lines = 0
        self.human_words = 0
        self.human_chars = 0
        self.model = ""

    def add_user(self, raw: dict, ts: str):
        content = raw["message"].get("content", "")
        if not self.first_prompt:
            self.first_prompt = extract_display_text(content)

        raw_text = extract_raw_text(content)
        lines, words, chars = count_human_contribution(raw_text)
        self.human_lines += lines
        self.human_words += words
        self.human_chars += chars

        self.messages.append(ConversationMessage(
            role=MessageRole.USER,
            timestamp=ts,
            id=_str_field(raw, "uuid"),
            content=strip_markup(raw_text).strip(),
        ))

    def add_assistant(self, raw: dict, ts: str):
        message = raw["message"]
        content = message.get("content", "")

        usage = None
        raw_usage = message.get("usage")
        if isinstance(raw_usage, dict):
            usage = TokenUsage.from_raw(raw_usage)
            self.tokens["input"] += usage.input_tokens or 0
            self.tokens["output"] += usage.output_tokens or 0
            self.tokens["cache_read"] += usage.cache_read_input_tokens or 0
            self.tokens["cache_creation"] += usage.cache_creation_input_tokens or 0

        text = strip_markup(extract_raw_text(content))
        self.messages.append(ConversationMessage(
            role=MessageRole.ASSISTANT,
            timestamp=ts,
            id=_str_field(raw, "uuid"),
            content=truncate_assistant_text(text).strip(),
            usage=usage,
        ))

        model = message.get("model")
        if not self.model and isinstance(model, str):
            self.model = model

        if isinstance(content, list):
            for block in content:
                if isinstance(block, dict) and block.get("type") == "tool_use":
                    self._add_tool_use(block)

    def _add_tool_use(self, block: dict):
        name = block.get("name")
        if not isinstance(name, str) or not name:
            return
        self.tool_usage[name] = self.tool_usage.get(name, 0) + 1

        tool_input = block.get("input")
        if not isinstance(tool_input, dict):
            return
        file_path = tool_input.get("file_path")
        file_path = file_path if isinstance(file_path, str) else ""

        if name == "Write":
            written = tool_input.get("content")
            if isinstance(written, str):
                self._contribute(file_path, count_lines(written), 0)
        elif name == "Edit":
            self._add_edit(file_path, tool_input)

    def _add_edit(self, file_path: str, edit: dict):
        old_str = edit.get("old_string")
        new_str = edit.get("new_string")
        old_lines = count_lines(old_str) if isinstance(old_str, str) else 0
        new_lines = count_lines(new_str) if isinstance(new_str, str) else 0
        self._contribute(file_path, new_lines, old_lines)

    def _contribute(self, file_path: str, added: int, removed: int):
        self.lines_added += added
        self.lines_removed += removed
        if file_path:
            fc = self.file_contributions.setdefault(file_path, [0, 0])
            fc[0] += added
            fc[1] += removed


def _str_field(raw: dict, key: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) else ""


def read_session_metadata(file_path: str | Path, max_lines: int = 20) -> tuple[str, str]:
    """Return (cwd, started_at) from the head of a transcript.

    Reads at most max_lines (optimization for project scanning).
    """
    path = Path(file_path)
    cwd = ""
    started_at = ""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line_count, line in enumerate(f, start=1):
                if line_count > max_lines:
                    break
                line = line.strip()
                if not line:
                    continue
                try:
                    raw = _load_record(line)
                except MalformedRecord:
                    continue

                if not cwd and isinstance(raw.get("cwd"), str):
                    cwd = raw["cwd"]
                if not started_at and isinstance(raw.get("timestamp"), str):
                    started_at = raw["timestamp"]
                if cwd and started_at:
                    break
    except OSError:
        logger.debug("Could not read metadata from %s", path, exc_info=True)
    return cwd, started_at
