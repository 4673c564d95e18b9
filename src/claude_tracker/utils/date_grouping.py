"""Group sessions by calendar day for the activity timeline."""


def day_key(timestamp: str) -> str:
    """Date portion of an ISO-8601 timestamp.

    2026-02-14T12:00:00.000Z → 2026-02-14
    """
    if not timestamp:
        return ""
    return timestamp.split("T", 1)[0]


def group_by_day(items: list, timestamp_key: str = "started_at") -> dict[str, list]:
    """Group items by the day of their timestamp, oldest day first.

    Items must have the specified attribute or key with an ISO timestamp.
    Items without a timestamp are left out. Order within a day is kept.
    """
    groups: dict[str, list] = {}

    for item in items:
        if isinstance(item, dict):
            ts = item.get(timestamp_key, "")
        else:
            ts = getattr(item, timestamp_key, "")
        day = day_key(ts)
        if not day:
            continue
        groups.setdefault(day, []).append(item)

    return {day: groups[day] for day in sorted(groups)}
