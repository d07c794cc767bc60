from __future__ import annotations

import io
from typing import Iterable, Mapping, Optional

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from ..common.datetime_utils import format_hms
from ..projects.model import Project
from .aggregator import Activity

HEADERS = [
    "Project Name",
    "Customer Name",
    "Region",
    "Task Name",
    "Project Allocated Time",
    "Task Allocated Time",
    "Time Spent",
    "Who Worked",
]
COLUMN_WIDTHS = [25, 20, 15, 25, 22, 20, 15, 30]
SHEET_NAME = "Timesheet"


def format_allocated_time(value: Optional[object]) -> str:
    """Allocated budgets are shown as stored; decimal hours become HH:MM:SS."""

    if value is None or value == "":
        return "-"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        total_seconds = round(float(value) * 3600)
        hours, rem = divmod(total_seconds, 3600)
        minutes, seconds = divmod(rem, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return str(value)


def build_rows(activities: Iterable[Activity], projects: Mapping[int, Project]) -> list[list[str]]:
    rows = []
    for activity in activities:
        project = projects.get(activity.project_id)
        rows.append(
            [
                activity.project_name or "-",
                (project.customer_name if project else None) or "-",
                (project.region if project else None) or "-",
                activity.task_name or "-",
                format_allocated_time(project.allocated_time) if project else "-",
                format_allocated_time(activity.allocated_time),
                format_hms(activity.total_seconds),
                ", ".join(activity.user_list) or "-",
            ]
        )
    return rows


def build_frame(activities: Iterable[Activity], projects: Mapping[int, Project]) -> pd.DataFrame:
    return pd.DataFrame(build_rows(activities, projects), columns=HEADERS)


def workbook_bytes(activities: Iterable[Activity], projects: Mapping[int, Project]) -> bytes:
    """Render the rows as an in-memory .xlsx (bold header, fixed column widths)."""

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        build_frame(activities, projects).to_excel(writer, index=False, sheet_name=SHEET_NAME)
        ws = writer.sheets[SHEET_NAME]
        for cell in ws[1]:
            cell.font = Font(bold=True)
        for idx, width in enumerate(COLUMN_WIDTHS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width
    return output.getvalue()
