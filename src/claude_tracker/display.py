"""Table and JSON output of a finished load."""

import sys

import orjson
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from claude_tracker.types import LoadResult
from claude_tracker.utils.formatting import (
    format_cost,
    format_number,
    format_relative,
    short_model,
    source_label,
)

# Style names per theme: (title, accent, added, removed, cost)
THEME_STYLES = {
    "dark": ("bold cyan", "bold", "green", "red", "bold green"),
    "light": ("bold blue", "bold", "dark_green", "dark_red", "bold dark_green"),
    "mono": ("bold", "bold", "", "", "bold"),
}


def print_table(result: LoadResult, theme: str = "dark", console: Console | None = None):
    """Print header stats and one row per project."""
    if console is None:
        console = Console(soft_wrap=True)
    title, accent, added, removed, cost = THEME_STYLES.get(theme, THEME_STYLES["dark"])
    metrics = result.metrics

    header = Text()
    header.append("Claude Tracker", style=title)
    header.append(f"  {metrics.total_projects} projects", style=accent)
    header.append(f"  {metrics.total_sessions} sessions", style=accent)
    header.append(f"  {format_number(metrics.total_messages)} messages", style=accent)
    header.append(f"  {format_number(metrics.total_tokens.total)} tokens", style=accent)
    header.append(f"  {format_cost(metrics.total_cost)} cost", style=cost)
    console.print()
    console.print(header)

    lines = Text("  Lines: ")
    lines.append(format_number(metrics.total_lines_added), style=added)
    lines.append(" added / ")
    lines.append(format_number(metrics.total_lines_removed), style=removed)
    lines.append(" removed")
    console.print(lines)
    if result.skipped.total:
        console.print(Text(f"  Skipped: {result.skipped.total} unreadable or malformed items", style="dim"))
    console.print()

    table = Table(box=box.ROUNDED, expand=False, show_lines=False)
    table.add_column("Project", no_wrap=True)
    table.add_column("Source", no_wrap=True)
    table.add_column("Sessions", justify="right")
    table.add_column("Messages", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Lines +/-", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Model", no_wrap=True)
    table.add_column("Last Active", no_wrap=True)

    for p in result.projects:
        table.add_row(
            p.name,
            source_label(p.sources),
            str(p.session_count),
            str(p.message_count),
            format_number(p.total_tokens.total),
            f"{format_number(p.lines_added)}/{format_number(p.lines_removed)}",
            format_cost(p.cost),
            short_model(p.model),
            format_relative(p.last_active) if p.last_active else "",
        )

    console.print(table)
    console.print()


def to_json(result: LoadResult) -> bytes:
    """Serialize global metrics and per-project rows."""
    output = {
        "metrics": result.metrics,
        "projects": [
            {
                "name": p.name,
                "path": p.path,
                "source": source_label(p.sources),
                "session_count": p.session_count,
                "message_count": p.message_count,
                "tokens_total": p.total_tokens.total,
                "lines_added": p.lines_added,
                "lines_removed": p.lines_removed,
                "file_contributions": p.file_contributions,
                "human_words": p.human_words,
                "cost": p.cost,
                "model": p.model,
                "last_active": p.last_active,
            }
            for p in result.projects
        ],
        "skipped": result.skipped.as_dict(),
    }
    return orjson.dumps(output, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS)


def print_json(result: LoadResult):
    sys.stdout.buffer.write(to_json(result) + b"\n")
    sys.stdout.flush()
