"""Calendar windows displayed by the timesheet grid.

A window is a contiguous run of days: one day, a Monday-to-Sunday week, or
a full calendar month. Days are plain ``date`` values so midnight
normalization and "is today" are calendar comparisons, never timestamp
comparisons.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from ..core.enums import ViewMode


@dataclass(frozen=True)
class WeekDay:
    date: date
    day_name: str
    day_number: int
    month_name: str
    is_today: bool

    @property
    def key(self) -> str:
        return self.date.isoformat()

    def to_dict(self) -> dict:
        return {
            "date": self.key,
            "day_name": self.day_name,
            "day_number": self.day_number,
            "month_name": self.month_name,
            "is_today": self.is_today,
        }


@dataclass(frozen=True)
class ViewWindow:
    mode: ViewMode
    days: tuple[WeekDay, ...]

    @property
    def start(self) -> date:
        return self.days[0].date

    @property
    def end(self) -> date:
        return self.days[-1].date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __iter__(self) -> Iterator[WeekDay]:
        return iter(self.days)

    def __len__(self) -> int:
        return len(self.days)


def anchor_for(reference: date, mode: ViewMode) -> date:
    """First day of the window of ``mode`` that contains ``reference``."""

    if mode == ViewMode.WEEK:
        return reference - timedelta(days=reference.weekday())
    if mode == ViewMode.MONTH:
        return reference.replace(day=1)
    return reference


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    last = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last))


def shift_anchor(anchor: date, mode: ViewMode, direction: int) -> date:
    """Move a window by ``direction`` units of its own granularity."""

    if mode == ViewMode.WEEK:
        return anchor + timedelta(days=7 * direction)
    if mode == ViewMode.MONTH:
        return _add_months(anchor.replace(day=1), direction)
    return anchor + timedelta(days=direction)


def build_view_window(reference: date, mode: ViewMode, *, today: date) -> ViewWindow:
    start = anchor_for(reference, mode)
    if mode == ViewMode.DAY:
        count = 1
    elif mode == ViewMode.WEEK:
        count = 7
    else:
        count = calendar.monthrange(start.year, start.month)[1]

    days = []
    for offset in range(count):
        d = start + timedelta(days=offset)
        days.append(
            WeekDay(
                date=d,
                day_name=calendar.day_abbr[d.weekday()],
                day_number=d.day,
                month_name=calendar.month_abbr[d.month],
                is_today=d == today,
            )
        )
    return ViewWindow(mode=mode, days=tuple(days))
