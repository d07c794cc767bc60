from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import require_non_empty, require_positive_int
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, PersistenceError, ValidationError
from .model import DEFAULT_PROJECT_STATUS, Project, Task
from .repository import ProjectRepository

logger = logging.getLogger(__name__)

PROJECT_EDITORS = (Role.ADMIN, Role.HEAD_MANAGER, Role.MANAGER)

_TRUE_FLAGS = ("1", "true", "yes", "on")


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_FLAGS
    return bool(value)


def _optional_customer(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    return require_positive_int(value, "Customer")


class ProjectService:
    """Projects and their tasks: listing for the timesheet plus project maintenance.

    Creating a project is open to every role; changing or removing one is
    reserved to admins and managers. Customer and task side effects are
    best effort: a failure there is logged and never undoes the project write.
    """

    def __init__(self, projects: ProjectRepository):
        self._projects = projects

    def list_projects(self) -> Sequence[Project]:
        return self._projects.list_all()

    def list_tasks(self, project_id: Any) -> Sequence[Task]:
        project_id = require_positive_int(project_id, "Project")
        if not self._projects.get_by_id(project_id):
            raise NotFoundError("Project not found")
        return self._projects.list_tasks(project_id)

    def create_project(self, data: Mapping[str, Any]) -> Project:
        name = require_non_empty(data.get("name"), "Project name")
        description = _optional_text(data.get("description"))
        if not description:
            raise ValidationError("Project description is required")

        customer_id = _optional_customer(data.get("customer_id"))
        region = _optional_text(data.get("region"))
        if region is None and customer_id is not None:
            region = self._projects.customer_region(customer_id)

        project_id = self._projects.create_project(
            name=name,
            description=description,
            customer_id=customer_id,
            region=region,
            allocated_time=_optional_text(data.get("allocated_time")),
            status=_optional_text(data.get("status")) or DEFAULT_PROJECT_STATUS,
            archived=_as_flag(data.get("archived")),
        )
        logger.info("created project %s (%s)", project_id, name)
        self._link_customer(customer_id, name)
        return self._projects.get_by_id(project_id)

    def update_project(self, *, current_role: Role, project_id: int, data: Mapping[str, Any]) -> Project:
        """Replace the editable fields of a project.

        Fields missing from ``data`` keep their current value. Toggling
        ``archived`` carries over to the project's tasks; moving the project
        to another customer clears the previous customer's link.
        """

        if current_role not in PROJECT_EDITORS:
            raise AuthorizationError("Access denied")
        current = self._projects.get_by_id(project_id)
        if not current:
            raise NotFoundError("Project not found")

        name = require_non_empty(data.get("name"), "Project name")
        customer_id = (
            _optional_customer(data.get("customer_id")) if "customer_id" in data else current.customer_id
        )
        region = _optional_text(data["region"]) if "region" in data else current.region
        if region is None and customer_id is not None:
            region = self._projects.customer_region(customer_id)
        archived = _as_flag(data["archived"]) if "archived" in data else current.archived

        self._projects.update_project(
            project_id,
            name=name,
            description=(
                _optional_text(data["description"]) if "description" in data else current.description
            ),
            customer_id=customer_id,
            region=region,
            allocated_time=(
                _optional_text(data["allocated_time"]) if "allocated_time" in data else current.allocated_time
            ),
            status=_optional_text(data.get("status")) or current.status,
            archived=archived,
        )
        logger.info("updated project %s", project_id)

        if archived != current.archived:
            try:
                self._projects.set_tasks_archived(project_id, archived)
            except PersistenceError as e:
                logger.warning("could not update archive flag on tasks of project %s: %s", project_id, e)

        if current.customer_id is not None and current.customer_id != customer_id:
            self._link_customer(current.customer_id, None)
        self._link_customer(customer_id, name)
        return self._projects.get_by_id(project_id) or current

    def delete_project(self, *, current_role: Role, project_id: int) -> None:
        if current_role not in PROJECT_EDITORS:
            raise AuthorizationError("Access denied")
        current = self._projects.get_by_id(project_id)
        if not current or not self._projects.delete_project(project_id):
            raise NotFoundError("Project not found")
        logger.info("deleted project %s", project_id)
        self._link_customer(current.customer_id, None)

    def _link_customer(self, customer_id: Optional[int], project_name: Optional[str]) -> None:
        if customer_id is None:
            return
        try:
            self._projects.set_customer_project_name(customer_id, project_name)
        except PersistenceError as e:
            logger.warning("could not sync project name on customer %s: %s", customer_id, e)
