"""Read-only access to Cursor's SQLite key-value stores (state.vscdb)."""

import logging
import sqlite3
from pathlib import Path
from typing import Iterator

import orjson

from claude_tracker.errors import MalformedRecord, UnreadableSource

logger = logging.getLogger(__name__)

BUBBLE_TABLE = "cursorDiskKV"
# Composer metadata lives in ItemTable in most workspaces, cursorDiskKV in some
COMPOSER_TABLES = ("ItemTable", "cursorDiskKV")
COMPOSER_DATA_KEY = "composer.composerData"
BUBBLE_KEY_PREFIX = "bubbleId:"


class KeyValueStore:
    """A read-only connection to one state.vscdb file.

    Many workers may open the same file at once; SQLite allows
    concurrent readers, so each caller simply opens its own store.
    """

    def __init__(self, db_path: str | Path):
        self._db_path = Path(db_path)
        if not self._db_path.is_file():
            raise UnreadableSource(self._db_path, "no such database")
        try:
            self._conn = sqlite3.connect(
                f"{self._db_path.resolve().as_uri()}?mode=ro",
                uri=True,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise UnreadableSource(self._db_path, str(e)) from e
        self._conn.row_factory = sqlite3.Row

    def __enter__(self) -> "KeyValueStore":
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def path(self) -> Path:
        return self._db_path

    def get(self, table: str, key: str) -> str | None:
        """Raw value for one key, or None when the key or table is missing."""
        try:
            row = self._conn.execute(
                f"SELECT value FROM {table} WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.debug("Lookup of %s in %s:%s failed: %s", key, self._db_path, table, e)
            return None
        if row is None:
            return None
        return _as_text(row["value"])

    def get_json(self, table: str, key: str):
        """Parsed JSON value for one key.

        Returns None when the key is absent; raises MalformedRecord when it
        is present but not valid JSON.
        """
        value = self.get(table, key)
        if value is None:
            return None
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError as e:
            raise MalformedRecord(f"{table}:{key}: {e}") from e

    def iter_prefix(self, table: str, prefix: str) -> Iterator[tuple[str, str]]:
        """Yield (key, raw value) for every key starting with prefix."""
        pattern = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        try:
            rows = self._conn.execute(
                f"SELECT key, value FROM {table} WHERE key LIKE ? ESCAPE '\\'",
                (pattern,),
            ).fetchall()
        except sqlite3.Error as e:
            logger.debug("Prefix scan of %s in %s:%s failed: %s", prefix, self._db_path, table, e)
            return
        for row in rows:
            value = _as_text(row["value"])
            if value is not None:
                yield row["key"], value

    def composer_ids_with_bubbles(self) -> set[str]:
        """Composer ids that have at least one stored bubble."""
        ids = set()
        try:
            rows = self._conn.execute(
                f"SELECT key FROM {BUBBLE_TABLE} WHERE key LIKE ?",
                (BUBBLE_KEY_PREFIX + "%",),
            ).fetchall()
        except sqlite3.Error as e:
            logger.debug("Bubble scan of %s failed: %s", self._db_path, e)
            return ids
        for row in rows:
            composer_id = bubble_composer_id(row["key"])
            if composer_id:
                ids.add(composer_id)
        return ids

    def _composers_in(self, table: str) -> list[dict] | None:
        try:
            data = self.get_json(table, COMPOSER_DATA_KEY)
        except MalformedRecord as e:
            logger.debug("Unparsable composer data in %s: %s", self._db_path, e)
            return None
        if not isinstance(data, dict):
            return None
        composers = data.get("allComposers")
        if not isinstance(composers, list):
            return []
        return [c for c in composers if isinstance(c, dict)]

    def read_composers(self) -> list[dict] | None:
        """The ``allComposers`` list from the first table that has one.

        A table holding an empty list does not stop the search. None means
        no table held composer data at all.
        """
        found = None
        for table in COMPOSER_TABLES:
            composers = self._composers_in(table)
            if composers:
                return composers
            if composers is not None:
                found = composers
        return found

    def find_composer(self, composer_id: str) -> dict | None:
        """Metadata for one composer; the first table listing it wins."""
        for table in COMPOSER_TABLES:
            for composer in self._composers_in(table) or []:
                if composer.get("composerId") == composer_id:
                    return composer
        return None

    def close(self):
        self._conn.close()


def bubble_key_prefix(composer_id: str) -> str:
    return f"{BUBBLE_KEY_PREFIX}{composer_id}:"


def bubble_composer_id(key: str) -> str:
    """bubbleId:<composerId>:<bubbleId> → <composerId>"""
    if not key.startswith(BUBBLE_KEY_PREFIX):
        return ""
    return key[len(BUBBLE_KEY_PREFIX):].split(":", 1)[0]


def _as_text(value) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    return None
