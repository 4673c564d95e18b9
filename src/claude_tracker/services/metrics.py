"""Roll parsed sessions up into project summaries and run-wide metrics."""

from claude_tracker.types import (
    DataSource,
    FileContribution,
    GlobalMetrics,
    ParsedSession,
    ProjectSummary,
    TimelineEntry,
    TokenTotals,
)
from claude_tracker.utils.date_grouping import group_by_day
from claude_tracker.utils.path_codec import extract_project_name
from claude_tracker.utils.pricing import estimate_cost


def _add_counts(into: dict[str, int], counts: dict[str, int]):
    for name, count in counts.items():
        into[name] = into.get(name, 0) + count


def _add_contributions(into: dict[str, FileContribution], contributions: dict[str, FileContribution]):
    for path, fc in contributions.items():
        prev = into.get(path, FileContribution())
        into[path] = FileContribution(prev.added + fc.added, prev.removed + fc.removed)


def build_project_summary(
    project_id: str,
    sessions: list[ParsedSession],
    project_dir: str = "",
    sources: tuple[DataSource, ...] = (),
) -> ProjectSummary:
    """Fold one project's sessions into a summary.

    Sessions are ordered by ``started_at`` first so the "first model seen"
    choice does not depend on which worker finished first.
    """
    sessions = sorted(sessions, key=lambda s: (s.started_at, s.session_id))

    path = next((s.cwd for s in sessions if s.cwd), "") or project_dir
    name = extract_project_name(path) or project_id

    tokens = TokenTotals()
    tool_usage: dict[str, int] = {}
    file_contributions: dict[str, FileContribution] = {}
    message_count = 0
    human_lines = human_words = human_chars = 0
    lines_added = 0
    lines_removed = 0
    last_active = ""
    model = ""

    for s in sessions:
        tokens += s.total_tokens
        message_count += len(s.messages)
        lines_added += s.lines_added
        lines_removed += s.lines_removed
        _add_counts(tool_usage, s.tool_usage)
        _add_contributions(file_contributions, s.file_contributions)
        human_lines += s.human_lines
        human_words += s.human_words
        human_chars += s.human_chars
        if s.last_active > last_active:
            last_active = s.last_active
        if not model and s.model:
            model = s.model

    return ProjectSummary(
        id=project_id,
        name=name,
        path=path,
        sources=tuple(sources) or tuple(dict.fromkeys(s.source for s in sessions)),
        session_count=len(sessions),
        message_count=message_count,
        total_tokens=tokens,
        lines_added=lines_added,
        lines_removed=lines_removed,
        last_active=last_active,
        tool_usage=tool_usage,
        cost=estimate_cost(model, tokens.input, tokens.output, tokens.cache_read),
        model=model,
        file_contributions=file_contributions,
        human_lines=human_lines,
        human_words=human_words,
        human_chars=human_chars,
        sessions=tuple(sessions),
    )


def build_project_summaries(projects) -> list[ProjectSummary]:
    """Summaries for every project with at least one session.

    ``projects`` yields (project_id, dir, sources, sessions). The result is
    sorted by last activity, most recent first.
    """
    summaries = [
        build_project_summary(project_id, sessions, project_dir, tuple(sources))
        for project_id, project_dir, sources, sessions in projects
        if sessions
    ]
    summaries.sort(key=lambda p: (p.last_active, p.id), reverse=True)
    return summaries


def build_timeline(sessions: list[ParsedSession]) -> list[TimelineEntry]:
    """One entry per calendar day with at least one session, oldest first."""
    return [
        TimelineEntry(
            date=day,
            sessions=len(day_sessions),
            messages=sum(len(s.messages) for s in day_sessions),
            token_input=sum(s.total_tokens.input for s in day_sessions),
            token_output=sum(s.total_tokens.output for s in day_sessions),
        )
        for day, day_sessions in group_by_day(sessions).items()
    ]


def compute_global_metrics(projects: list[ProjectSummary]) -> GlobalMetrics:
    tokens = TokenTotals()
    tool_usage: dict[str, int] = {}
    all_sessions: list[ParsedSession] = []

    for p in projects:
        tokens += p.total_tokens
        _add_counts(tool_usage, p.tool_usage)
        all_sessions.extend(p.sessions)

    return GlobalMetrics(
        total_projects=len(projects),
        total_sessions=sum(p.session_count for p in projects),
        total_messages=sum(p.message_count for p in projects),
        total_tokens=tokens,
        tool_usage=tool_usage,
        timeline=tuple(build_timeline(all_sessions)),
        total_lines_added=sum(p.lines_added for p in projects),
        total_lines_removed=sum(p.lines_removed for p in projects),
        total_cost=sum(p.cost for p in projects),
        human_lines=sum(p.human_lines for p in projects),
        human_words=sum(p.human_words for p in projects),
        human_chars=sum(p.human_chars for p in projects),
    )
