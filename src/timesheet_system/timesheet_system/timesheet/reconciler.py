from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import parse_datetime
from ..core.constants import DEFAULT_ENTRY_START
from ..core.enums import CellAction
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..projects.repository import ProjectRepository
from ..time_entries.model import TimeEntry
from ..time_entries.repository import TimeEntryRepository
from ..users.model import User
from .aggregator import ActivityKey, entries_for_cell, entry_seconds, sort_by_start

logger = logging.getLogger(__name__)


def _minutes(entry: TimeEntry, new_end: datetime) -> int:
    start = parse_datetime(entry.start_time)
    return max(int((new_end - start).total_seconds()) // 60, 0) if start else 0


@dataclass(frozen=True)
class CellEditResult:
    action: CellAction
    entry_ids: tuple[int, ...] = ()
    failed_ids: tuple[int, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.failed_ids

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "entry_ids": list(self.entry_ids),
            "failed_ids": list(self.failed_ids),
        }


class CellEditReconciler:
    """Maps the new value of one grid cell back onto its time entries.

    Growth extends the chronologically last entry. Shrinking resets the last
    entry to ``start + new total``; reaching zero deletes every entry of the
    cell, each deletion on its own (no rollback when one fails).
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        projects: ProjectRepository,
        *,
        entry_start: time = DEFAULT_ENTRY_START,
    ):
        self._entries = entries
        self._projects = projects
        self._entry_start = entry_start

    def apply(
        self,
        *,
        visible_entries: Sequence[TimeEntry],
        key: ActivityKey,
        day: date,
        target_seconds: int,
        acting_user: Optional[User],
        description: str = "",
    ) -> CellEditResult:
        if target_seconds < 0:
            raise ValidationError("Time must not be negative")
        if acting_user is None:
            raise ValidationError("User not found")

        cell = entries_for_cell(visible_entries, key, day)
        if not cell:
            return self._create(
                key=key,
                day=day,
                target_seconds=target_seconds,
                acting_user=acting_user,
                description=description,
            )

        current = sum(entry_seconds(e) for e in cell)
        delta = target_seconds - current
        if delta == 0:
            return CellEditResult(CellAction.NOOP)

        ordered = sort_by_start(cell)
        last = ordered[-1]

        if delta > 0:
            new_end = parse_datetime(last.end_time) + timedelta(seconds=delta)
            self._entries.update(last.entry_id, {"end_time": new_end, "total_time": _minutes(last, new_end)})
            return CellEditResult(CellAction.EXTENDED, entry_ids=(last.entry_id,))

        new_total = current + delta
        if new_total <= 0:
            return self._delete_all(ordered)

        new_end = parse_datetime(last.start_time) + timedelta(seconds=new_total)
        self._entries.update(last.entry_id, {"end_time": new_end, "total_time": new_total // 60})
        return CellEditResult(CellAction.SHRUNK, entry_ids=(last.entry_id,))

    def _create(
        self,
        *,
        key: ActivityKey,
        day: date,
        target_seconds: int,
        acting_user: User,
        description: str,
    ) -> CellEditResult:
        if target_seconds <= 0:
            return CellEditResult(CellAction.NOOP)

        project = self._projects.get_by_id(key.project_id)
        if not project:
            raise NotFoundError(f"Project not found: {key.project_id}")

        start = datetime.combine(day, self._entry_start)
        end = start + timedelta(seconds=target_seconds)
        entry_id = self._entries.create(
            user_id=acting_user.user_id,
            project_id=project.project_id,
            task_name=key.task_name,
            description=description or "",
            start_time=start,
            end_time=end,
            total_time=target_seconds // 60,
        )
        return CellEditResult(CellAction.CREATED, entry_ids=(entry_id,))

    def _delete_all(self, cell: Sequence[TimeEntry]) -> CellEditResult:
        deleted: list[int] = []
        failed: list[int] = []
        for entry in cell:
            try:
                if self._entries.delete(entry.entry_id):
                    deleted.append(entry.entry_id)
                else:
                    failed.append(entry.entry_id)
            except DomainError as e:
                logger.warning("could not delete time entry %s: %s", entry.entry_id, e)
                failed.append(entry.entry_id)
        return CellEditResult(CellAction.DELETED, entry_ids=tuple(deleted), failed_ids=tuple(failed))
