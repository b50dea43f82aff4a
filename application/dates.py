"""Natural-language due dates and short duration strings."""

import re
from datetime import datetime, timedelta
from typing import Optional

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_EXPLICIT_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m-%d-%Y", "%b %d, %Y", "%B %d, %Y")
_MONTH_DAY_FORMATS = ("%b %d %Y", "%B %d %Y")
_DURATION_RE = re.compile(r"^(?:(?P<hours>\d+)h)?(?:(?P<minutes>\d+)m)?$")


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=0)


def _weekday_index(token: str) -> Optional[int]:
    for idx, name in enumerate(WEEKDAYS):
        if token == name or token == name[:3]:
            return idx
    return None


def parse_natural_date(text: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Resolve a due-date phrase to 23:59:59 local time on that day.

    Keywords: today, tomorrow/tom, weekday names (next occurrence, the same
    weekday means a week ahead), nextweek / "next week". Otherwise
    YYYY-MM-DD, MM/DD/YYYY, MM-DD-YYYY, "Jan 2" and "Jan 2, 2006".
    Returns None when nothing matches.
    """
    token = " ".join((text or "").strip().lower().split())
    if not token:
        return None
    base = now or datetime.now()
    if token == "today":
        return end_of_day(base)
    if token in ("tomorrow", "tom"):
        return end_of_day(base + timedelta(days=1))
    if token in ("nextweek", "next week"):
        return end_of_day(base + timedelta(days=7))
    weekday = _weekday_index(token)
    if weekday is not None:
        ahead = (weekday - base.weekday()) % 7 or 7
        return end_of_day(base + timedelta(days=ahead))
    raw = (text or "").strip()
    for fmt in _EXPLICIT_FORMATS:
        try:
            return end_of_day(datetime.strptime(raw, fmt))
        except ValueError:
            continue
    for fmt in _MONTH_DAY_FORMATS:
        try:
            return end_of_day(datetime.strptime(f"{raw} {base.year}", fmt))
        except ValueError:
            continue
    return None


def format_due_date(due: datetime, now: Optional[datetime] = None) -> str:
    """Compact label used in list rows."""
    base = now or datetime.now()
    delta = (due.date() - base.date()).days
    if delta == 0:
        return "today"
    if delta == 1:
        return "tomorrow"
    if delta == -1:
        return "yesterday"
    if 1 < delta < 7:
        return due.strftime("%a")
    if due.year == base.year:
        return due.strftime("%b %d")
    return due.strftime("%Y-%m-%d")


def parse_duration(text: str) -> Optional[int]:
    """Parse "30m", "1h", "1h30m" or a bare number of minutes."""
    token = (text or "").strip().lower().replace(" ", "")
    if not token:
        return None
    if token.isdigit():
        minutes = int(token)
        return minutes if minutes > 0 else None
    match = _DURATION_RE.match(token)
    if not match or not (match.group("hours") or match.group("minutes")):
        return None
    minutes = int(match.group("hours") or 0) * 60 + int(match.group("minutes") or 0)
    return minutes if minutes > 0 else None


def format_duration(minutes: int) -> str:
    hours, mins = divmod(max(0, minutes), 60)
    if hours and mins:
        return f"{hours}h{mins}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"


def format_elapsed(seconds: int) -> str:
    hours, rest = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


__all__ = [
    "end_of_day",
    "parse_natural_date",
    "format_due_date",
    "parse_duration",
    "format_duration",
    "format_elapsed",
]
