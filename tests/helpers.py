"""Shared test helpers."""

import sqlite3
from pathlib import Path

import orjson


def write_jsonl(path: Path, records: list) -> Path:
    """Write records as JSONL; str entries are written verbatim."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = []
    for record in records:
        if isinstance(record, str):
            lines.append(record)
        else:
            lines.append(orjson.dumps(record).decode())
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def user_record(text, ts, uuid="", cwd="/home/wiz/projects/myapp"):
    return {
        "type": "user",
        "uuid": uuid,
        "cwd": cwd,
        "timestamp": ts,
        "message": {"role": "user", "content": text},
    }


def assistant_record(msg_id, ts, text="", usage=None, tools=(), model="claude-sonnet-4-5-20250929"):
    content = [{"type": "text", "text": text}] if text else []
    content += [{"type": "tool_use", "name": name, "input": tool_input} for name, tool_input in tools]
    message = {"role": "assistant", "id": msg_id, "model": model, "content": content}
    if usage is not None:
        message["usage"] = usage
    return {
        "type": "assistant",
        "uuid": f"uuid-{msg_id}-{ts}",
        "timestamp": ts,
        "message": message,
    }


def create_kv_db(path: Path, item_table: dict | None = None, disk_kv: dict | None = None) -> Path:
    """Create a state.vscdb with ItemTable and cursorDiskKV tables.

    Non-str values are stored as JSON text.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        for table, rows in (("ItemTable", item_table or {}), ("cursorDiskKV", disk_kv or {})):
            conn.execute(f"CREATE TABLE {table} (key TEXT UNIQUE ON CONFLICT REPLACE, value BLOB)")
            for key, value in rows.items():
                if not isinstance(value, (str, bytes)):
                    value = orjson.dumps(value).decode()
                conn.execute(f"INSERT INTO {table} (key, value) VALUES (?, ?)", (key, value))
        conn.commit()
    finally:
        conn.close()
    return path


def composer_data(*composers) -> dict:
    return {"allComposers": list(composers)}


def bubble(bubble_id, bubble_type, text="", start=None, end=None, tokens=None, code_blocks=None):
    data = {"bubbleId": bubble_id, "type": bubble_type, "text": text}
    timing = {}
    if start is not None:
        timing["clientStartTime"] = start
    if end is not None:
        timing["clientEndTime"] = end
    if timing:
        data["timingInfo"] = timing
    if tokens is not None:
        data["tokenCount"] = tokens
    if code_blocks is not None:
        data["codeBlocks"] = code_blocks
    return data
