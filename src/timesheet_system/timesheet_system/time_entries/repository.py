from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus
from .model import TimeEntry

# Columns a partial update may touch.
UPDATABLE_FIELDS = ("start_time", "end_time", "task_name", "description", "project_id", "total_time")


class TimeEntryRepository(Protocol):
    def list_all(self) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def list_for_manager(self, manager_id: int) -> Sequence[TimeEntry]:
        """Entries of the manager and of every user reporting to them."""

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def get_active_for_user(self, user_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        project_id: int,
        task_name: Optional[str],
        description: Optional[str],
        start_time: datetime,
        end_time: Optional[datetime] = None,
        total_time: int = 0,
    ) -> int:
        raise NotImplementedError

    def update(self, entry_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError

    def set_approval(self, entry_id: int, status: ApprovalStatus, manager_comment: Optional[str]) -> bool:
        raise NotImplementedError
