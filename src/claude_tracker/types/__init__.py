"""Type definitions for Claude Tracker."""

from claude_tracker.types.messages import (
    ConversationMessage,
    MessageRole,
    TokenUsage,
)
from claude_tracker.types.sessions import (
    DataSource,
    FileContribution,
    ParsedSession,
    ScannedProject,
    SessionHandle,
    TokenTotals,
)
from claude_tracker.types.outcomes import SkipKind, SkipReport
from claude_tracker.types.metrics import (
    GlobalMetrics,
    LoadResult,
    ProjectSummary,
    TimelineEntry,
)

__all__ = [
    "ConversationMessage",
    "MessageRole",
    "TokenUsage",
    "DataSource",
    "FileContribution",
    "ParsedSession",
    "ScannedProject",
    "SessionHandle",
    "TokenTotals",
    "SkipKind",
    "SkipReport",
    "GlobalMetrics",
    "LoadResult",
    "ProjectSummary",
    "TimelineEntry",
]
