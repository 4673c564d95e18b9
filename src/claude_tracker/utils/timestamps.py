"""Normalize the timestamp representations found in both log sources.

Claude transcripts carry RFC-3339 strings. Cursor bubbles carry numbers
that may be absolute epoch milliseconds or offsets from the composer's
creation time, and composer creation times may be seconds or
milliseconds. The magnitude thresholds below are the ones the Cursor
data is known to use; values near them are ambiguous by nature.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

# Anything above this is already an absolute epoch-millisecond value.
ABSOLUTE_MS_THRESHOLD = 1_000_000_000_000
# Creation times above this (and not above the ms threshold) are epoch seconds.
EPOCH_SECONDS_THRESHOLD = 1_000_000_000

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def resolve_timestamp(raw, base_ms: Optional[float] = None) -> Optional[float]:
    """Resolve a raw bubble timestamp to epoch milliseconds.

    Returns None when the value is absent, non-positive, or a relative
    offset with no usable base.
    """
    val = _as_number(raw)
    if val is None or val <= 0:
        return None
    if val > ABSOLUTE_MS_THRESHOLD:
        return val
    if base_ms is not None and base_ms > 0:
        return base_ms + val
    return None


def normalize_epoch_ms(created_at) -> Optional[float]:
    """Convert a composer ``createdAt`` (seconds or ms) to epoch ms."""
    val = _as_number(created_at)
    if val is None or val <= EPOCH_SECONDS_THRESHOLD:
        return None
    if val > ABSOLUTE_MS_THRESHOLD:
        return val
    return val * 1000


def ms_to_iso(ms: float) -> str:
    """Render epoch ms as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    This is the shape Claude transcripts use, so timestamps from both
    sources compare correctly as plain strings.
    """
    try:
        dt = _EPOCH + timedelta(milliseconds=int(ms))
    except (OverflowError, OSError, ValueError):
        return ""
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def iso_to_ms(value: str) -> Optional[float]:
    """Parse an RFC-3339 string back to epoch ms, or None."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return float((dt - _EPOCH) // timedelta(milliseconds=1))
