"""Human-readable formatting for table output."""

from datetime import datetime, timezone

from claude_tracker.types import DataSource

_FAMILIES = ("opus", "sonnet", "haiku")


def format_number(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def format_cost(cost: float) -> str:
    if cost < 0.01:
        return "<$0.01"
    return f"${cost:.2f}"


def format_date(value: str) -> str:
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_relative(value: str, now: datetime | None = None) -> str:
    """Format an ISO timestamp as a relative time ("5m ago", "3d ago")."""
    try:
        then = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)

    mins = int((now - then).total_seconds() // 60)
    if mins < 1:
        return "just now"
    if mins < 60:
        return f"{mins}m ago"
    hours = mins // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 30:
        return f"{days}d ago"
    return format_date(value)


def short_model(model: str) -> str:
    """Shorten a model id for display.

    claude-sonnet-4-5-20250929 → Sonnet 4.5
    claude-opus-4-20250514 → Opus 4
    """
    if not model:
        return ""
    m = model.lower()
    for family in _FAMILIES:
        idx = m.find(family)
        if idx < 0:
            continue
        name = family.capitalize()
        parts = [p for p in m[idx + len(family):].replace("_", "-").split("-") if p]
        if not parts or not parts[0].isdigit() or len(parts[0]) >= 8:
            return name
        if len(parts) >= 2 and parts[1].isdigit() and len(parts[1]) < 8:
            return f"{name} {parts[0]}.{parts[1]}"
        return f"{name} {parts[0]}"
    return ""


def source_label(sources) -> str:
    sources = set(sources)
    if DataSource.CLAUDE in sources and DataSource.CURSOR in sources:
        return "Both"
    if DataSource.CURSOR in sources:
        return "Cursor"
    return "Claude"
