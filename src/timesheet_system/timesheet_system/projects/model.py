from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_PROJECT_STATUS = "on-track"


@dataclass(frozen=True)
class Project:
    """Domain entity: a project time is booked against."""

    project_id: int
    name: str
    allocated_time: Optional[str] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    region: Optional[str] = None
    description: Optional[str] = None
    status: str = DEFAULT_PROJECT_STATUS
    archived: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.project_id,
            "name": self.name,
            "description": self.description,
            "allocated_time": self.allocated_time,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "region": self.region,
            "status": self.status,
            "archived": self.archived,
        }


@dataclass(frozen=True)
class Task:
    """Domain entity: a task of a project, optionally carrying a time budget."""

    task_id: int
    project_id: int
    title: str
    allocated_time: Optional[str] = None
    archived: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "project_id": self.project_id,
            "title": self.title,
            "allocated_time": self.allocated_time,
            "archived": self.archived,
        }
