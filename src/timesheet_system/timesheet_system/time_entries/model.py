from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_minutes
from ..core.enums import ApprovalStatus


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one tracked interval of work.

    ``end_time`` is None while the entry is running. ``total_time`` holds
    whole minutes and is only a fallback when start/end are unusable.
    ``project_name``, ``user_name`` and ``user_email`` are read-model fields
    joined in by the repository.
    ``status`` and ``manager_comment`` record the manager review.
    """

    entry_id: int
    user_id: int
    project_id: int
    task_name: Optional[str]
    description: Optional[str]
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    total_time: int = 0
    project_name: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    status: ApprovalStatus = ApprovalStatus.PENDING
    manager_comment: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.end_time is None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "user_id": self.user_id,
            "project_id": self.project_id,
            "project_name": self.project_name,
            "task_name": self.task_name,
            "description": self.description,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "total_time": self.total_time,
            "duration": format_minutes(self.total_time),
            "employee_name": self.user_name,
            "employee_email": self.user_email,
            "status": self.status.value,
            "manager_comment": self.manager_comment,
        }
