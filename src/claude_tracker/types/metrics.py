"""Aggregated project and run-wide metric types."""

from dataclasses import dataclass, field

from claude_tracker.types.outcomes import SkipReport
from claude_tracker.types.sessions import DataSource, FileContribution, ParsedSession, TokenTotals


@dataclass(frozen=True)
class ProjectSummary:
    id: str
    name: str
    path: str
    sources: tuple[DataSource, ...] = ()
    session_count: int = 0
    message_count: int = 0
    total_tokens: TokenTotals = TokenTotals()
    lines_added: int = 0
    lines_removed: int = 0
    last_active: str = ""
    tool_usage: dict[str, int] = field(default_factory=dict)
    cost: float = 0.0
    model: str = ""
    file_contributions: dict[str, FileContribution] = field(default_factory=dict)
    human_lines: int = 0
    human_words: int = 0
    human_chars: int = 0
    sessions: tuple[ParsedSession, ...] = ()


@dataclass(frozen=True)
class TimelineEntry:
    date: str
    sessions: int = 0
    messages: int = 0
    token_input: int = 0
    token_output: int = 0


@dataclass(frozen=True)
class GlobalMetrics:
    total_projects: int = 0
    total_sessions: int = 0
    total_messages: int = 0
    total_tokens: TokenTotals = TokenTotals()
    tool_usage: dict[str, int] = field(default_factory=dict)
    timeline: tuple[TimelineEntry, ...] = ()
    total_lines_added: int = 0
    total_lines_removed: int = 0
    total_cost: float = 0.0
    human_lines: int = 0
    human_words: int = 0
    human_chars: int = 0


@dataclass(frozen=True)
class LoadResult:
    """Everything one pipeline run hands to the presentation layer."""
    projects: tuple[ProjectSummary, ...]
    metrics: GlobalMetrics
    skipped: SkipReport = field(default_factory=SkipReport)
