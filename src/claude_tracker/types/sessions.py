"""Session and project types produced by scanners and normalizers."""

from dataclasses import dataclass, field
from enum import Enum

from claude_tracker.types.messages import ConversationMessage


class DataSource(str, Enum):
    CLAUDE = "claude"
    CURSOR = "cursor"


@dataclass(frozen=True)
class TokenTotals:
    input: int = 0
    output: int = 0
    cache_read: int = 0
    cache_creation: int = 0

    @property
    def total(self) -> int:
        return self.input + self.output

    def __add__(self, other: "TokenTotals") -> "TokenTotals":
        return TokenTotals(
            input=self.input + other.input,
            output=self.output + other.output,
            cache_read=self.cache_read + other.cache_read,
            cache_creation=self.cache_creation + other.cache_creation,
        )


@dataclass(frozen=True)
class FileContribution:
    added: int = 0
    removed: int = 0


@dataclass(frozen=True)
class ParsedSession:
    session_id: str
    project_id: str
    source: DataSource
    cwd: str = ""
    messages: tuple[ConversationMessage, ...] = ()
    tool_usage: dict[str, int] = field(default_factory=dict)
    total_tokens: TokenTotals = TokenTotals()
    duration_ms: float = 0.0
    lines_added: int = 0
    lines_removed: int = 0
    file_contributions: dict[str, FileContribution] = field(default_factory=dict)
    first_prompt: str = ""
    started_at: str = ""
    last_active: str = ""
    human_lines: int = 0
    human_words: int = 0
    human_chars: int = 0
    model: str = ""
    skipped_records: int = 0
    unresolved_timestamps: int = 0


@dataclass(frozen=True)
class SessionHandle:
    """Where a session lives, without any of its content parsed."""
    id: str
    path: str
    source: DataSource
    size: int = 0


@dataclass
class ScannedProject:
    id: str            # Slug directory name or cursor-<workspace>
    dir: str           # Resolved filesystem path (or raw slug when unresolved)
    sources: list[DataSource] = field(default_factory=list)
    session_handles: list[SessionHandle] = field(default_factory=list)
