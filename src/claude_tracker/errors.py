"""Error types for log ingestion.

None of these abort a run on their own. They are raised at item
boundaries (one file, one store, one record) and caught by the caller
that owns that item, which logs and counts them in a SkipReport.
"""

from claude_tracker.types.outcomes import SkipKind


class TrackerError(Exception):
    kind: SkipKind | None = None


class UnreadableSource(TrackerError):
    """A log file, directory or database could not be opened or read."""
    kind = SkipKind.UNREADABLE_SOURCE

    def __init__(self, path, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}" if reason else self.path)


class MalformedRecord(TrackerError):
    """A single line, row or JSON value failed to parse."""
    kind = SkipKind.MALFORMED_RECORD


class UnresolvableProjectPath(TrackerError):
    """A slug-encoded project directory does not decode to an existing path."""
    kind = SkipKind.UNRESOLVABLE_PROJECT_PATH
