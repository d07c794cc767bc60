from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.timesheet_system.timesheet_system.container import wire_services
from src.timesheet_system.timesheet_system.core.enums import Role
from src.timesheet_system.timesheet_system.core.exceptions import PersistenceError
from src.timesheet_system.timesheet_system.projects.model import Project, Task
from src.timesheet_system.timesheet_system.time_entries.model import TimeEntry
from src.timesheet_system.timesheet_system.users.model import User


class InMemoryUsers:
    def __init__(self, users=()):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)


class InMemoryProjects:
    def __init__(self, projects=(), tasks=(), customers=None):
        self.projects = {p.project_id: p for p in projects}
        self.tasks = list(tasks)
        # customer id -> {"name": ..., "region": ..., "project_name": ...}
        self.customers = dict(customers or {})
        self.failing_projects: set[int] = set()
        self.failing_customer_sync = False
        self.list_tasks_calls = 0

    def list_all(self):
        return list(self.projects.values())

    def get_by_id(self, project_id: int) -> Optional[Project]:
        return self.projects.get(project_id)

    def list_tasks(self, project_id: int):
        self.list_tasks_calls += 1
        if project_id in self.failing_projects:
            raise PersistenceError("tasks table unavailable")
        return [t for t in self.tasks if t.project_id == project_id]

    def create_task(self, *, project_id: int, title: str, description=None, assigned_to=None) -> int:
        task_id = len(self.tasks) + 1
        self.tasks.append(Task(task_id=task_id, project_id=project_id, title=title))
        return task_id

    def _project(self, project_id: int, **fields) -> Project:
        customer = self.customers.get(fields["customer_id"]) if fields["customer_id"] else None
        return Project(
            project_id=project_id,
            customer_name=customer["name"] if customer else None,
            **fields,
        )

    def create_project(self, **fields) -> int:
        project_id = max(self.projects, default=0) + 1
        self.projects[project_id] = self._project(project_id, **fields)
        return project_id

    def update_project(self, project_id: int, **fields) -> bool:
        if project_id not in self.projects:
            return False
        self.projects[project_id] = self._project(project_id, **fields)
        return True

    def delete_project(self, project_id: int) -> bool:
        self.tasks = [t for t in self.tasks if t.project_id != project_id]
        return self.projects.pop(project_id, None) is not None

    def set_tasks_archived(self, project_id: int, archived: bool) -> int:
        if project_id in self.failing_projects:
            raise PersistenceError("tasks table unavailable")
        changed = [i for i, t in enumerate(self.tasks) if t.project_id == project_id]
        for i in changed:
            self.tasks[i] = replace(self.tasks[i], archived=archived)
        return len(changed)

    def customer_region(self, customer_id: int):
        customer = self.customers.get(customer_id)
        return customer["region"] if customer else None

    def set_customer_project_name(self, customer_id: int, project_name) -> None:
        if self.failing_customer_sync:
            raise PersistenceError("customers table unavailable")
        if customer_id in self.customers:
            self.customers[customer_id]["project_name"] = project_name


class InMemoryTimeEntries:
    """Keeps entries in insertion order and joins names like the SQL read model."""

    def __init__(self, users: InMemoryUsers, projects: InMemoryProjects):
        self._users = users
        self._projects = projects
        self._rows: dict[int, TimeEntry] = {}
        self._id = 0
        self.failing_deletes: set[int] = set()

    def _joined(self, entry: TimeEntry) -> TimeEntry:
        project = self._projects.get_by_id(entry.project_id)
        user = self._users.get_by_id(entry.user_id)
        return replace(
            entry,
            project_name=project.name if project else None,
            user_name=user.name if user else None,
            user_email=user.email if user else None,
        )

    def _listed(self, entries):
        return [self._joined(e) for e in entries]

    def list_all(self):
        return self._listed(self._rows.values())

    def list_for_user(self, user_id: int):
        return self._listed(e for e in self._rows.values() if e.user_id == user_id)

    def list_for_manager(self, manager_id: int):
        team = {u.user_id for u in self._users.users_by_id.values() if u.manager_id == manager_id}
        team.add(manager_id)
        return self._listed(e for e in self._rows.values() if e.user_id in team)

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        entry = self._rows.get(entry_id)
        return self._joined(entry) if entry else None

    def get_active_for_user(self, user_id: int) -> Optional[TimeEntry]:
        for entry in self._rows.values():
            if entry.user_id == user_id and entry.end_time is None:
                return self._joined(entry)
        return None

    def create(
        self,
        *,
        user_id: int,
        project_id: int,
        task_name: str,
        description=None,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        total_time: int = 0,
    ) -> int:
        self._id += 1
        self._rows[self._id] = TimeEntry(
            entry_id=self._id,
            user_id=user_id,
            project_id=project_id,
            task_name=task_name,
            description=description,
            start_time=start_time,
            end_time=end_time,
            total_time=total_time,
        )
        return self._id

    def update(self, entry_id: int, changes: dict) -> bool:
        if entry_id not in self._rows:
            return False
        self._rows[entry_id] = replace(self._rows[entry_id], **changes)
        return True

    def delete(self, entry_id: int) -> bool:
        if entry_id in self.failing_deletes:
            raise PersistenceError("delete refused")
        return self._rows.pop(entry_id, None) is not None

    def delete_all(self) -> int:
        count = len(self._rows)
        self._rows.clear()
        return count

    def set_approval(self, entry_id: int, status, manager_comment) -> bool:
        if entry_id not in self._rows:
            return False
        self._rows[entry_id] = replace(self._rows[entry_id], status=status, manager_comment=manager_comment)
        return True

    def add(self, *, user_id: int = 3, project_id: int = 1, task_name="Design", start, end=None, total_time=0, description=None):
        entry_id = self.create(
            user_id=user_id,
            project_id=project_id,
            task_name=task_name,
            description=description,
            start_time=start,
            end_time=end,
            total_time=total_time,
        )
        return self.get_by_id(entry_id)


ADMIN = User(user_id=1, name="Ada Admin", email="admin@example.com", role=Role.ADMIN)
MANAGER = User(user_id=2, name="Max Manager", email="manager@example.com", role=Role.MANAGER)
EMPLOYEE = User(user_id=3, name="Eve Employee", email="eve@example.com", role=Role.EMPLOYEE, manager_id=2)
OUTSIDER = User(user_id=4, name="Otto Outsider", email="otto@example.com", role=Role.EMPLOYEE)


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday; its week runs from Monday 2024-01-08 to Sunday 2024-01-14.
    return datetime(2024, 1, 10, 15, 30, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def admin() -> User:
    return ADMIN


@pytest.fixture
def manager() -> User:
    return MANAGER


@pytest.fixture
def employee() -> User:
    return EMPLOYEE


@pytest.fixture
def outsider() -> User:
    return OUTSIDER


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers([ADMIN, MANAGER, EMPLOYEE, OUTSIDER])


@pytest.fixture
def projects_repo() -> InMemoryProjects:
    return InMemoryProjects(
        projects=[
            Project(
                project_id=1,
                name="Website Redesign",
                allocated_time="40:00:00",
                customer_id=1,
                customer_name="Acme Corp",
                region="EMEA",
            ),
            Project(project_id=2, name="Mobile App", allocated_time=None),
        ],
        tasks=[
            Task(task_id=1, project_id=1, title="Design", allocated_time="01:00:00"),
            Task(task_id=2, project_id=1, title="Build", allocated_time=None),
            Task(task_id=3, project_id=2, title="Release", allocated_time="10:00:00"),
        ],
        customers={
            1: {"name": "Acme Corp", "region": "EMEA", "project_name": "Website Redesign"},
            2: {"name": "Globex", "region": "APAC", "project_name": None},
        },
    )


@pytest.fixture
def entries_repo(users_repo, projects_repo) -> InMemoryTimeEntries:
    return InMemoryTimeEntries(users_repo, projects_repo)


@pytest.fixture
def container(users_repo, projects_repo, entries_repo):
    return wire_services(
        conn=None,
        users_repo=users_repo,
        projects_repo=projects_repo,
        time_entries_repo=entries_repo,
    )
