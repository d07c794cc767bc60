from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import elapsed_seconds, now_local, parse_datetime
from ..common.validators import parse_time_spent, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_ENTRY_START
from ..core.enums import ApprovalStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..projects.repository import ProjectRepository
from ..users.model import User
from .model import TimeEntry
from .repository import UPDATABLE_FIELDS, TimeEntryRepository

logger = logging.getLogger(__name__)


def total_minutes(start: datetime, end: datetime) -> int:
    return elapsed_seconds(start, end) // 60


class TimeEntryService:
    """Use cases around single time entries: running timer, manual lines, admin edits."""

    def __init__(
        self,
        entries: TimeEntryRepository,
        projects: ProjectRepository,
        *,
        entry_start=DEFAULT_ENTRY_START,
    ):
        self._entries = entries
        self._projects = projects
        self._entry_start = entry_start

    def list_visible(self, user: User) -> Sequence[TimeEntry]:
        """Entries the user may see: everything for admins and head managers,
        the team for managers, own entries for employees."""

        if user.role in (Role.ADMIN, Role.HEAD_MANAGER):
            return self._entries.list_all()
        if user.role == Role.MANAGER:
            return self._entries.list_for_manager(user.user_id)
        return self._entries.list_for_user(user.user_id)

    def get_active(self, user_id: int) -> Optional[TimeEntry]:
        return self._entries.get_active_for_user(user_id)

    def start(
        self,
        *,
        user_id: int,
        project_id: Any,
        task_name: Optional[str],
        description: Optional[str] = None,
        now: datetime | None = None,
    ) -> int:
        now = now or now_local()
        project_id = require_positive_int(project_id, "Project")
        task_name = require_non_empty(task_name, "Task")

        if not self._projects.get_by_id(project_id):
            raise NotFoundError("Project not found")
        if self._entries.get_active_for_user(user_id):
            raise ValidationError("A time entry is already running")

        entry_id = self._entries.create(
            user_id=user_id,
            project_id=project_id,
            task_name=task_name,
            description=(description or "").strip() or None,
            start_time=now,
        )
        logger.info("started time entry %s for user %s", entry_id, user_id)
        return entry_id

    def stop(self, *, user: User, entry_id: int, now: datetime | None = None) -> int:
        """Close a running entry and return its length in whole minutes."""

        now = now or now_local()
        entry = self._entries.get_by_id(entry_id)
        if not entry or not entry.is_running:
            raise NotFoundError("Active time entry not found")
        if entry.user_id != user.user_id and user.role != Role.ADMIN:
            raise AuthorizationError("Access denied")

        minutes = total_minutes(entry.start_time, now) if entry.start_time else 0
        self._entries.update(entry.entry_id, {"end_time": now, "total_time": minutes})
        return minutes

    def discard(self, *, user_id: int) -> None:
        entry = self._entries.get_active_for_user(user_id)
        if not entry:
            raise NotFoundError("No active time entry found")
        self._entries.delete(entry.entry_id)

    def add_line(
        self,
        *,
        user_id: Optional[int],
        project_id: Any,
        task_name: Optional[str],
        work_date: Optional[date],
        time_spent: Optional[str],
        description: Optional[str] = None,
    ) -> int:
        """Book a finished entry of ``time_spent`` on ``work_date``.

        The task is created on the project when no task carries that title.
        """

        if not project_id or not (task_name or "").strip() or not work_date or not time_spent:
            raise ValidationError("Please fill in all required fields: Project, Date, Task, and Time Spent")
        if not user_id:
            raise ValidationError("User not found")

        project_id = require_positive_int(project_id, "Project")
        task_name = task_name.strip()
        hours, minutes = parse_time_spent(time_spent)
        description = (description or "").strip() or None

        if not self._projects.get_by_id(project_id):
            raise NotFoundError("Project not found")

        existing = self._projects.list_tasks(project_id)
        if not any(t.title == task_name for t in existing):
            self._projects.create_task(
                project_id=project_id,
                title=task_name,
                description=description,
                assigned_to=user_id,
            )

        start = datetime.combine(work_date, self._entry_start)
        end = start + timedelta(hours=hours, minutes=minutes)
        return self._entries.create(
            user_id=user_id,
            project_id=project_id,
            task_name=task_name,
            description=description,
            start_time=start,
            end_time=end,
            total_time=hours * 60 + minutes,
        )

    def approve_entry(
        self,
        *,
        approver: User,
        entry_id: int,
        status: Any,
        manager_comment: Optional[str] = "",
    ) -> TimeEntry:
        """Record the manager review of a finished entry.

        Admins and head managers review any entry; a manager reviews the
        entries of their team.
        """

        try:
            new_status = ApprovalStatus(str(status or "").strip().lower())
        except ValueError:
            raise ValidationError("Invalid approval status") from None

        entry = self._entries.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Time entry not found")
        if approver.role == Role.MANAGER:
            team_entries = self._entries.list_for_manager(approver.user_id)
            if not any(e.entry_id == entry.entry_id for e in team_entries):
                raise AuthorizationError("Access denied")
        elif approver.role not in (Role.ADMIN, Role.HEAD_MANAGER):
            raise AuthorizationError("Access denied")
        if entry.is_running:
            raise ValidationError("A running time entry cannot be reviewed")

        comment = (manager_comment or "").strip()
        self._entries.set_approval(entry.entry_id, new_status, comment)
        logger.info("time entry %s marked %s by user %s", entry.entry_id, new_status.value, approver.user_id)
        return self._entries.get_by_id(entry.entry_id) or entry

    def update_entry(self, *, current_role: Role, entry_id: int, changes: Mapping[str, Any]) -> TimeEntry:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied")

        entry = self._entries.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Time entry not found")

        clean: dict[str, Any] = {}
        for field in ("start_time", "end_time"):
            if changes.get(field):
                parsed = parse_datetime(changes[field])
                if parsed is None:
                    raise ValidationError(f"Invalid {field}")
                clean[field] = parsed
        if changes.get("task_name") is not None:
            clean["task_name"] = require_non_empty(str(changes["task_name"]), "Task")
        if changes.get("description") is not None:
            clean["description"] = str(changes["description"])
        if changes.get("project_id") is not None:
            clean["project_id"] = require_positive_int(changes["project_id"], "Project")

        start = clean.get("start_time", entry.start_time)
        end = clean.get("end_time", entry.end_time)
        if start and end:
            if end < start:
                raise ValidationError("End time must be after start time")
            clean["total_time"] = total_minutes(start, end)

        if clean:
            self._entries.update(entry_id, {k: v for k, v in clean.items() if k in UPDATABLE_FIELDS})
        return self._entries.get_by_id(entry_id) or entry

    def delete_entry(self, *, current_role: Role, entry_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied")
        if not self._entries.delete(entry_id):
            raise NotFoundError("Time entry not found")

    def clear_all(self, *, current_role: Role) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied")
        deleted = self._entries.delete_all()
        logger.warning("cleared all time entries (%s rows)", deleted)
        return deleted
