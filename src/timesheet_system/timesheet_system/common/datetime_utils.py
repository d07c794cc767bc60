from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_datetime(value: Any) -> Optional[datetime]:
    """Coerce a driver or JSON value into a naive local datetime.

    Accepts datetime objects, ``YYYY-MM-DD HH:MM[:SS]`` and ISO-8601 strings
    (``T`` separator, optional ``Z``/offset). Aware values are converted to
    local time and stripped of tzinfo. Returns None for empty or unparseable
    input.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, floored."""
    return int((end - start).total_seconds() // 1)


def format_hms(seconds: int) -> str:
    """Grid total format: ``H:MM:SS``; zero renders as ``0:00:00``."""
    if not seconds:
        return "0:00:00"
    hours, rem = divmod(int(seconds), 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def format_timer(seconds: int) -> str:
    """Running timer format: zero padded ``HH:MM:SS``."""
    hours, rem = divmod(max(int(seconds), 0), 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_hhmm(seconds: int) -> str:
    """Cell edit format ``H:MM``; seconds are truncated."""
    if not seconds:
        return "0:00"
    hours, rem = divmod(int(seconds), 3600)
    return f"{hours}:{rem // 60:02d}"


def format_minutes(minutes: Optional[int]) -> str:
    if not minutes:
        return "-"
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"
