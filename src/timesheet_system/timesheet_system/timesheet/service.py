from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import format_hms, format_timer, now_local, parse_datetime
from ..common.validators import parse_cell_time, require_positive_int
from ..core.enums import ViewMode
from ..core.exceptions import ValidationError
from ..projects.repository import ProjectRepository
from ..time_entries.model import TimeEntry
from ..time_entries.service import TimeEntryService
from ..users.model import User
from .aggregator import (
    Activity,
    ActivityKey,
    TimesheetFilters,
    aggregate,
    entries_for_activity,
    grand_total,
    normalize_task_name,
    total_for_day,
)
from .allocation import AllocationLookup
from .export import workbook_bytes
from .reconciler import CellEditReconciler, CellEditResult
from .timers import RunningTimers
from .view_window import ViewWindow, build_view_window


@dataclass(frozen=True)
class TimesheetView:
    window: ViewWindow
    rows: list[Activity]
    day_totals: list[int]
    grand_total: int
    timers: RunningTimers
    now: datetime

    def to_dict(self) -> dict:
        return {
            "view": self.window.mode.value,
            "days": [d.to_dict() for d in self.window],
            "rows": [
                {
                    **r.to_dict(),
                    "running": self.timers.is_active(r.key),
                    "running_seconds": self.timers.elapsed(r.key, self.now),
                }
                for r in self.rows
            ],
            "day_totals": self.day_totals,
            "grand_total": self.grand_total,
            "grand_total_display": format_hms(self.grand_total),
            "running": [
                {
                    "project_id": key.project_id,
                    "task_name": key.task_name,
                    "started_at": timer.started_at.isoformat(),
                    "elapsed_seconds": timer.elapsed(self.now),
                    "elapsed": format_timer(timer.elapsed(self.now)),
                }
                for key, timer in self.timers
            ],
        }


class TimesheetService:
    """Builds the timesheet grid for a user and applies cell edits to it."""

    def __init__(
        self,
        time_entries: TimeEntryService,
        projects: ProjectRepository,
        reconciler: CellEditReconciler,
    ):
        self._time_entries = time_entries
        self._projects = projects
        self._reconciler = reconciler

    def _timers_for(self, user: User) -> RunningTimers:
        timers = RunningTimers()
        active = self._time_entries.get_active(user.user_id)
        started_at = parse_datetime(active.start_time) if active else None
        if active and started_at:
            timers.start(ActivityKey.for_entry(active), started_at)
        return timers

    def build_rows(
        self,
        *,
        user: User,
        window: ViewWindow,
        filters: TimesheetFilters,
        entries: Optional[Sequence[TimeEntry]] = None,
    ) -> list[Activity]:
        if entries is None:
            entries = self._time_entries.list_visible(user)
        allocations = AllocationLookup(self._projects)
        return aggregate(
            entries,
            window,
            filters,
            current_user_id=user.user_id,
            allocations=allocations.lookup,
        )

    def build_view(
        self,
        *,
        user: User,
        reference: date,
        mode: ViewMode,
        filters: TimesheetFilters = TimesheetFilters(),
        now: datetime | None = None,
    ) -> TimesheetView:
        now = now or now_local()
        window = build_view_window(reference, mode, today=now.date())
        rows = self.build_rows(user=user, window=window, filters=filters)
        return TimesheetView(
            window=window,
            rows=rows,
            day_totals=[total_for_day(rows, d) for d in window],
            grand_total=grand_total(rows),
            timers=self._timers_for(user),
            now=now,
        )

    def edit_cell(
        self,
        *,
        user: Optional[User],
        project_id: object,
        task_name: Optional[str],
        day: Optional[date],
        value: Optional[str],
    ) -> CellEditResult:
        """Set the (project, task, day) cell to ``value`` (``H:MM``)."""

        if day is None:
            raise ValidationError("Date is required")
        key = ActivityKey(
            project_id=require_positive_int(project_id, "Project"),
            task_name=normalize_task_name(task_name),
        )
        target = parse_cell_time(value)
        if user is None:
            raise ValidationError("User not found")

        visible = self._time_entries.list_visible(user)
        # New entries inherit the description shown on the activity row.
        description = next((e.description or "" for e in entries_for_activity(visible, key)), "")

        return self._reconciler.apply(
            visible_entries=visible,
            key=key,
            day=day,
            target_seconds=target,
            acting_user=user,
            description=description or "",
        )

    def export_xlsx(
        self,
        *,
        user: User,
        reference: date,
        mode: ViewMode,
        filters: TimesheetFilters = TimesheetFilters(),
        now: datetime | None = None,
    ) -> bytes:
        now = now or now_local()
        window = build_view_window(reference, mode, today=now.date())
        rows = self.build_rows(user=user, window=window, filters=filters)
        projects = {p.project_id: p for p in self._projects.list_all()}
        return workbook_bytes(rows, projects)
