from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .core.constants import DEFAULT_ENTRY_START
from .database.connection import DBConfig, DatabaseConnection
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.service import ProjectService
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.service import TimeEntryService
from .timesheet.reconciler import CellEditReconciler
from .timesheet.service import TimesheetService
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection | None

    users_repo: MySQLUserRepository
    projects_repo: MySQLProjectRepository
    time_entries_repo: MySQLTimeEntryRepository

    project_service: ProjectService
    time_entry_service: TimeEntryService
    reconciler: CellEditReconciler
    timesheet_service: TimesheetService


def wire_services(
    *,
    conn: DatabaseConnection | None,
    users_repo,
    projects_repo,
    time_entries_repo,
    entry_start: time = DEFAULT_ENTRY_START,
) -> Container:
    """Build the service graph on top of already constructed repositories."""

    project_service = ProjectService(projects_repo)
    time_entry_service = TimeEntryService(time_entries_repo, projects_repo, entry_start=entry_start)
    reconciler = CellEditReconciler(time_entries_repo, projects_repo, entry_start=entry_start)
    timesheet_service = TimesheetService(time_entry_service, projects_repo, reconciler)

    return Container(
        conn=conn,
        users_repo=users_repo,
        projects_repo=projects_repo,
        time_entries_repo=time_entries_repo,
        project_service=project_service,
        time_entry_service=time_entry_service,
        reconciler=reconciler,
        timesheet_service=timesheet_service,
    )


def build_container(*, db_config: dict, entry_start: time = DEFAULT_ENTRY_START) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        entry_start=entry_start,
    )
