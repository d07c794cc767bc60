from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import ApprovalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimeEntry
from .repository import UPDATABLE_FIELDS, TimeEntryRepository

_SELECT = """
    SELECT
        t.id, t.user_id, t.project_id, t.task_name, t.description,
        t.start_time, t.end_time, t.total_time,
        t.status, t.manager_comment,
        p.name AS project_name, u.name AS user_name, u.email AS user_email
    FROM time_entries t
    JOIN projects p ON p.id = t.project_id
    JOIN users u ON u.id = t.user_id
"""


def _to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["id"]),
        user_id=int(r["user_id"]),
        project_id=int(r["project_id"]),
        task_name=r.get("task_name"),
        description=r.get("description"),
        start_time=r.get("start_time"),
        end_time=r.get("end_time"),
        total_time=int(r.get("total_time") or 0),
        project_name=r.get("project_name"),
        user_name=r.get("user_name"),
        user_email=r.get("user_email"),
        status=ApprovalStatus.parse(r.get("status")),
        manager_comment=r.get("manager_comment"),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str = "", params: tuple = ()) -> list[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY t.start_time DESC", params)
            return [_to_entry(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[TimeEntry]:
        return self._select()

    def list_for_user(self, user_id: int) -> Sequence[TimeEntry]:
        return self._select("WHERE t.user_id=%s", (int(user_id),))

    def list_for_manager(self, manager_id: int) -> Sequence[TimeEntry]:
        return self._select("WHERE t.user_id=%s OR u.manager_id=%s", (int(manager_id), int(manager_id)))

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE t.id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_active_for_user(self, user_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE t.user_id=%s AND t.end_time IS NULL ORDER BY t.start_time DESC LIMIT 1",
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(user_id, project_id, task_name, description, start_time, end_time, total_time)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(project_id), task_name, description, start_time, end_time, int(total_time)),
            )
            return int(cur.lastrowid)

    def update(self, entry_id: int, changes: Mapping[str, Any]) -> bool:
        fields = [f for f in UPDATABLE_FIELDS if f in changes]
        if not fields:
            return False

        assignments = ", ".join(f"{f}=%s" for f in fields)
        params = tuple(changes[f] for f in fields) + (int(entry_id),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE time_entries SET {assignments} WHERE id=%s", params)
            return cur.rowcount > 0

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries WHERE id=%s", (int(entry_id),))
            return cur.rowcount > 0

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries")
            return int(cur.rowcount)

    def set_approval(self, entry_id: int, status: ApprovalStatus, manager_comment: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_entries SET status=%s, manager_comment=%s WHERE id=%s",
                (status.value, manager_comment, int(entry_id)),
            )
            return cur.rowcount > 0
