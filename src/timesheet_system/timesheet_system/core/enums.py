from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization and entry visibility."""

    ADMIN = "admin"
    HEAD_MANAGER = "head manager"
    MANAGER = "manager"
    EMPLOYEE = "employee"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        normalized = (value or "").strip().lower().replace("_", " ")
        for role in cls:
            if role.value == normalized:
                return role
        return cls.EMPLOYEE


class ViewMode(str, Enum):
    """Granularity of the timesheet grid."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class SearchField(str, Enum):
    """Which entry field a search term is matched against."""

    TASK = "task"
    PROJECT = "project"
    DESCRIPTION = "description"
    ANY = "any"


class CellAction(str, Enum):
    """Outcome of reconciling one grid cell edit."""

    NOOP = "noop"
    CREATED = "created"
    EXTENDED = "extended"
    SHRUNK = "shrunk"
    DELETED = "deleted"


class ApprovalStatus(str, Enum):
    """Manager review state of a time entry."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: str | None) -> "ApprovalStatus":
        normalized = (value or "").strip().lower()
        for status in cls:
            if status.value == normalized:
                return status
        return cls.PENDING
