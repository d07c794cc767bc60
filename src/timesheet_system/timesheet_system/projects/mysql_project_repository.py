from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, mysql_duration_to_str
from .model import DEFAULT_PROJECT_STATUS, Project, Task
from .repository import ProjectRepository

_PROJECT_COLUMNS = """
    p.id, p.name, p.description, p.allocated_time, p.customer_id, p.region,
    p.status, p.archived,
    c.name AS customer_name
"""


def _to_project(r: dict) -> Project:
    return Project(
        project_id=int(r["id"]),
        name=r["name"],
        allocated_time=mysql_duration_to_str(r.get("allocated_time")),
        customer_id=r.get("customer_id"),
        customer_name=r.get("customer_name"),
        region=r.get("region"),
        description=r.get("description"),
        status=r.get("status") or DEFAULT_PROJECT_STATUS,
        archived=bool(r.get("archived")),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROJECT_COLUMNS}
                FROM projects p
                LEFT JOIN customers c ON c.id = p.customer_id
                ORDER BY p.id DESC
                """
            )
            return [_to_project(r) for r in fetchall(cur)]

    def get_by_id(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROJECT_COLUMNS}
                FROM projects p
                LEFT JOIN customers c ON c.id = p.customer_id
                WHERE p.id=%s
                """,
                (int(project_id),),
            )
            r = fetchone(cur)
            return _to_project(r) if r else None

    def list_tasks(self, project_id: int) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, project_id, title, allocated_time, archived
                FROM tasks
                WHERE project_id=%s
                ORDER BY id ASC
                """,
                (int(project_id),),
            )
            return [
                Task(
                    task_id=int(r["id"]),
                    project_id=int(r["project_id"]),
                    title=r["title"],
                    allocated_time=mysql_duration_to_str(r.get("allocated_time")),
                    archived=bool(r.get("archived")),
                )
                for r in fetchall(cur)
            ]

    def create_task(
        self,
        *,
        project_id: int,
        title: str,
        description: Optional[str] = None,
        assigned_to: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(project_id, title, description, status, assigned_to)
                VALUES(%s,%s,%s,'pending',%s)
                """,
                (int(project_id), title, description, assigned_to),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO projects(name, description, customer_id, region, allocated_time, status, archived)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (name, description, customer_id, region, allocated_time, status, 1 if archived else 0),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE projects
                SET name=%s, description=%s, customer_id=%s, region=%s,
                    allocated_time=%s, status=%s, archived=%s
                WHERE id=%s
                """,
                (
                    name,
                    description,
                    customer_id,
                    region,
                    allocated_time,
                    status,
                    1 if archived else 0,
                    int(project_id),
                ),
            )
            return cur.rowcount > 0

    def delete_project(self, project_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM projects WHERE id=%s", (int(project_id),))
            return cur.rowcount > 0

    def set_tasks_archived(self, project_id: int, archived: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE tasks SET archived=%s WHERE project_id=%s",
                (1 if archived else 0, int(project_id)),
            )
            return int(cur.rowcount)

    def customer_region(self, customer_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT region FROM customers WHERE id=%s", (int(customer_id),))
            r = fetchone(cur)
            return r.get("region") if r else None

    def set_customer_project_name(self, customer_id: int, project_name: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE customers SET project_name=%s WHERE id=%s",
                (project_name, int(customer_id)),
            )
