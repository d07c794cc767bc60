from __future__ import annotations

import logging
import re
from typing import Optional

from ..core.exceptions import PersistenceError
from ..projects.model import Task
from ..projects.repository import ProjectRepository

logger = logging.getLogger(__name__)


_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _int_or_zero(part: str) -> int:
    # Leading digits only: "1.5" is 1, "01x" is 1, "x1" is 0.
    match = _LEADING_INT_RE.match(part)
    return int(match.group(1)) if match else 0


def allocation_to_seconds(value: Optional[str]) -> int:
    """Convert an ``HH:MM:SS`` (or ``HH:MM``) budget to seconds.

    Missing values and any other shape yield 0. Each field is read from its
    leading digits, so a field without any counts as 0.
    """

    if not value or not isinstance(value, str):
        return 0
    parts = value.split(":")
    if len(parts) == 3:
        hours, minutes, seconds = (_int_or_zero(p) for p in parts)
        return hours * 3600 + minutes * 60 + seconds
    if len(parts) == 2:
        hours, minutes = (_int_or_zero(p) for p in parts)
        return hours * 3600 + minutes * 60
    return 0


class AllocationLookup:
    """Task budgets by ``(project_id, task title)``.

    Tasks are fetched once per project and cached for the lifetime of the
    lookup (one request). A project whose tasks cannot be loaded has no
    budgets.
    """

    def __init__(self, projects: ProjectRepository):
        self._projects = projects
        self._tasks: dict[int, list[Task]] = {}

    def _tasks_for(self, project_id: int) -> list[Task]:
        if project_id not in self._tasks:
            try:
                self._tasks[project_id] = list(self._projects.list_tasks(project_id))
            except PersistenceError as e:
                logger.warning("could not load tasks for project %s: %s", project_id, e)
                self._tasks[project_id] = []
        return self._tasks[project_id]

    def allocated_time(self, project_id: Optional[int], task_title: str) -> Optional[str]:
        if not project_id:
            return None
        for task in self._tasks_for(project_id):
            if task.title == task_title:
                return task.allocated_time or None
        return None

    def lookup(self, project_id: Optional[int], task_title: str) -> tuple[Optional[str], int]:
        raw = self.allocated_time(project_id, task_title)
        return raw, allocation_to_seconds(raw)
