from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project, Task


class ProjectRepository(Protocol):
    def list_all(self) -> Sequence[Project]:
        raise NotImplementedError

    def get_by_id(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def list_tasks(self, project_id: int) -> Sequence[Task]:
        raise NotImplementedError

    def create_task(
        self,
        *,
        project_id: int,
        title: str,
        description: Optional[str] = None,
        assigned_to: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def create_project(
        self,
        *,
        name: str,
        description: Optional[str],
        customer_id: Optional[int],
        region: Optional[str],
        allocated_time: Optional[str],
        status: str,
        archived: bool,
    ) -> int:
        raise NotImplementedError

    def update_project(
        self,
        project_id: int,
        *,
        name: str,
        description: Optional[str],
        customer_id: Optional[int],
        region: Optional[str],
        allocated_time: Optional[str],
        status: str,
        archived: bool,
    ) -> bool:
        raise NotImplementedError

    def delete_project(self, project_id: int) -> bool:
        raise NotImplementedError

    def set_tasks_archived(self, project_id: int, archived: bool) -> int:
        raise NotImplementedError

    def customer_region(self, customer_id: int) -> Optional[str]:
        raise NotImplementedError

    def set_customer_project_name(self, customer_id: int, project_name: Optional[str]) -> None:
        """Denormalized link shown on the customer record; None clears it."""

        raise NotImplementedError
