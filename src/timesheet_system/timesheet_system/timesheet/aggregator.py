"""Timesheet aggregation.

Turns a flat list of time entries into Activity rows: one row per
(project, task) pair, bucketed by calendar day and by user. Rows are rebuilt
from scratch on every call and keep the order in which their first entry was
seen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import elapsed_seconds, format_hhmm, format_hms, parse_datetime
from ..core.constants import UNKNOWN_PROJECT, UNKNOWN_USER, UNNAMED_TASK
from ..core.enums import SearchField
from ..time_entries.model import TimeEntry
from .view_window import ViewWindow, WeekDay

logger = logging.getLogger(__name__)

AllocationFn = Callable[[Optional[int], str], tuple[Optional[str], int]]


def normalize_task_name(name: Optional[str]) -> str:
    """Row identity ignores surrounding whitespace; a blank name is "Unnamed Task"."""

    return (name or "").strip() or UNNAMED_TASK


@dataclass(frozen=True)
class ActivityKey:
    project_id: int
    task_name: str

    @classmethod
    def for_entry(cls, entry: TimeEntry) -> "ActivityKey":
        return cls(project_id=int(entry.project_id), task_name=normalize_task_name(entry.task_name))


@dataclass
class UserTime:
    name: str
    email: str
    seconds: int = 0


@dataclass
class Activity:
    key: ActivityKey
    project_name: str
    description: str = ""
    allocated_time: Optional[str] = None
    allocated_seconds: int = 0
    time_exceeded: bool = False
    daily_seconds: dict[date, int] = field(default_factory=dict)
    total_seconds: int = 0
    users: dict[str, UserTime] = field(default_factory=dict)

    @property
    def task_name(self) -> str:
        return self.key.task_name

    @property
    def project_id(self) -> int:
        return self.key.project_id

    @property
    def user_list(self) -> list[str]:
        return [u.name or u.email for u in self.users.values()]

    def to_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "task_name": self.task_name,
            "description": self.description,
            "allocated_time": self.allocated_time,
            "allocated_seconds": self.allocated_seconds,
            "time_exceeded": self.time_exceeded,
            "daily_seconds": {d.isoformat(): s for d, s in self.daily_seconds.items()},
            "daily_display": {d.isoformat(): format_hhmm(s) for d, s in self.daily_seconds.items()},
            "total_seconds": self.total_seconds,
            "total_display": format_hms(self.total_seconds),
            "users": {
                k: {"name": u.name, "email": u.email, "seconds": u.seconds} for k, u in self.users.items()
            },
            "user_list": self.user_list,
        }


@dataclass(frozen=True)
class TimesheetFilters:
    search: str = ""
    search_field: SearchField = SearchField.ANY
    project_id: Optional[int] = None
    mine_only: bool = False


def entry_seconds(entry: TimeEntry) -> int:
    """Length of an entry in whole seconds.

    Uses ``end - start`` when both are usable; falls back to the stored
    minutes when they are not or when the difference is zero.
    """

    fallback = int(entry.total_time or 0) * 60
    start = parse_datetime(entry.start_time)
    end = parse_datetime(entry.end_time)
    if start is None or end is None:
        return fallback
    seconds = elapsed_seconds(start, end)
    if seconds == 0 and fallback:
        return fallback
    return seconds


def entry_day(entry: TimeEntry) -> Optional[date]:
    start = parse_datetime(entry.start_time)
    return start.date() if start else None


def _matches_search(entry: TimeEntry, needle: str, search_field: SearchField) -> bool:
    candidates = {
        SearchField.TASK: entry.task_name,
        SearchField.PROJECT: entry.project_name,
        SearchField.DESCRIPTION: entry.description,
    }
    if search_field != SearchField.ANY:
        candidates = {search_field: candidates[search_field]}
    return any(needle in (value or "").lower() for value in candidates.values())


def filter_entries(
    entries: Iterable[TimeEntry],
    filters: TimesheetFilters,
    *,
    current_user_id: Optional[int] = None,
) -> list[TimeEntry]:
    """Apply search, then project, then owner filters."""

    result = list(entries)

    needle = (filters.search or "").strip().lower()
    if needle:
        result = [e for e in result if _matches_search(e, needle, filters.search_field)]

    if filters.project_id is not None:
        result = [e for e in result if e.project_id == filters.project_id]

    if filters.mine_only:
        result = [e for e in result if e.user_id == current_user_id]

    return result


def aggregate(
    entries: Iterable[TimeEntry],
    window: ViewWindow,
    filters: TimesheetFilters = TimesheetFilters(),
    *,
    current_user_id: Optional[int] = None,
    allocations: Optional[AllocationFn] = None,
) -> list[Activity]:
    activities: dict[ActivityKey, Activity] = {}

    for entry in filter_entries(entries, filters, current_user_id=current_user_id):
        if entry.end_time is None:
            continue

        day = entry_day(entry)
        if day is None:
            logger.warning("skipping time entry %s with invalid start_time %r", entry.entry_id, entry.start_time)
            continue
        if not window.contains(day):
            continue

        key = ActivityKey.for_entry(entry)
        activity = activities.get(key)
        if activity is None:
            allocated_time, allocated_seconds = (None, 0)
            if allocations is not None:
                allocated_time, allocated_seconds = allocations(key.project_id, key.task_name)
            activity = Activity(
                key=key,
                project_name=entry.project_name or UNKNOWN_PROJECT,
                description=entry.description or "",
                allocated_time=allocated_time,
                allocated_seconds=allocated_seconds,
            )
            activities[key] = activity

        seconds = entry_seconds(entry)

        email = entry.user_email or UNKNOWN_USER
        user_key = str(entry.user_id) if entry.user_id else email
        user = activity.users.get(user_key)
        if user is None:
            user = UserTime(name=entry.user_name or entry.user_email or UNKNOWN_USER, email=email)
            activity.users[user_key] = user
        user.seconds += seconds

        activity.daily_seconds[day] = activity.daily_seconds.get(day, 0) + seconds
        activity.total_seconds += seconds

    rows = list(activities.values())
    for activity in rows:
        if activity.allocated_seconds > 0:
            activity.time_exceeded = activity.total_seconds > activity.allocated_seconds
    return rows


def seconds_for_day(activity: Activity, day: WeekDay | date) -> int:
    d = day.date if isinstance(day, WeekDay) else day
    return activity.daily_seconds.get(d, 0)


def total_for_day(rows: Iterable[Activity], day: WeekDay | date) -> int:
    return sum(seconds_for_day(a, day) for a in rows)


def grand_total(rows: Iterable[Activity]) -> int:
    return sum(a.total_seconds for a in rows)


def entries_for_cell(entries: Sequence[TimeEntry], key: ActivityKey, day: date) -> list[TimeEntry]:
    """Finished entries of one (activity, day) grid cell."""

    return [
        e
        for e in entries
        if e.end_time is not None and ActivityKey.for_entry(e) == key and entry_day(e) == day
    ]


def entries_for_activity(entries: Sequence[TimeEntry], key: ActivityKey) -> list[TimeEntry]:
    return [e for e in entries if e.end_time is not None and ActivityKey.for_entry(e) == key]


def sort_by_start(entries: Iterable[TimeEntry]) -> list[TimeEntry]:
    return sorted(entries, key=lambda e: parse_datetime(e.start_time) or datetime.min)
