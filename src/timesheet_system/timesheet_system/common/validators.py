from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_CELL_TIME_RE = re.compile(r"^\s*(\d+)\s*:\s*(\d{1,2})\s*$")
_TIME_SPENT_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
_MERIDIEM_RE = re.compile(r"\s*(AM|PM)\s*", re.IGNORECASE)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid") from None
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number


def parse_cell_time(value: Optional[str]) -> int:
    """Parse a grid cell value ``H:MM`` into seconds.

    An empty value means zero. Minutes must be 0-59; hours are unbounded.
    """

    if value is None or not value.strip():
        return 0
    match = _CELL_TIME_RE.match(value)
    if not match:
        raise ValidationError("Invalid time format. Please use H:MM (e.g. 2:45)")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59:
        raise ValidationError("Minutes must be between 00 and 59")
    return hours * 3600 + minutes * 60


def parse_time_spent(value: Optional[str]) -> tuple[int, int]:
    """Parse the add-line ``time_spent`` field into ``(hours, minutes)``.

    AM/PM markers and a trailing seconds component are dropped before the
    value is checked against ``HH:MM`` with hours 0-23.
    """

    text = require_non_empty(value, "Time spent")
    text = _MERIDIEM_RE.sub("", text)
    parts = text.split(":")
    if len(parts) == 3:
        text = f"{parts[0]}:{parts[1]}"

    if not _TIME_SPENT_RE.match(text):
        raise ValidationError("Invalid time format. Please use HH:MM format (e.g., 02:45)")

    hours, minutes = (int(p) for p in text.split(":"))
    if hours == 0 and minutes == 0:
        raise ValidationError("Time spent must be greater than 0")
    return hours, minutes
