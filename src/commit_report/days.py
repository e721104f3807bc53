from __future__ import annotations

import datetime as dt


def parse_day(spec: str) -> dt.date:
    s = (spec or "").strip()
    if s.lower() == "today":
        return dt.date.today()
    if s.lower() == "yesterday":
        return dt.date.today() - dt.timedelta(days=1)
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Invalid date: {spec!r} (expected YYYY-MM-DD, today, or yesterday)") from None


def day_bounds(day: dt.date) -> tuple[str, str]:
    # Local-time strings; git resolves them in the local timezone.
    return f"{day.isoformat()}T00:00:00", f"{day.isoformat()}T23:59:59"


def day_window(end: dt.date, days: int) -> list[dt.date]:
    """Return `days` consecutive dates ending at `end`, most recent first."""
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")
    return [end - dt.timedelta(days=i) for i in range(days)]


def slugify(s: str) -> str:
    s = (s or "").strip()
    out: list[str] = []
    for ch in s:
        if ch.isalnum() or ch in ("-", "_"):
            out.append(ch)
        else:
            out.append("-")
    slug = "".join(out).strip("-")
    while "--" in slug:
        slug = slug.replace("--", "-")
    return slug or "project"
