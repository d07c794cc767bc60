from __future__ import annotations

import io
from datetime import date
from typing import Mapping

from flask import Flask, request, send_file

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import error_response, fail, login_required, ok, session_user_id
from ..container import Container
from ..core.enums import SearchField, ViewMode
from ..core.exceptions import ValidationError
from .aggregator import TimesheetFilters
from .view_window import anchor_for, shift_anchor

# The grid's search dropdown calls the task field "activity".
_FIELD_ALIASES = {"activity": SearchField.TASK, "": SearchField.ANY}

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def parse_date_arg(value: str | None, *, default: date | None) -> date | None:
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError("Invalid date, expected YYYY-MM-DD") from None


def parse_view_args(args: Mapping[str, str]) -> tuple[date, ViewMode, TimesheetFilters]:
    try:
        mode = ViewMode((args.get("view") or ViewMode.WEEK.value).lower())
    except ValueError:
        raise ValidationError("View must be one of: day, week, month") from None

    reference = parse_date_arg(args.get("date"), default=now_local().date())

    # nav=-1 / nav=1 steps to the previous / next window of the same mode.
    nav_s = (args.get("nav") or "0").strip()
    try:
        nav = int(nav_s)
    except ValueError:
        raise ValidationError("nav must be an integer") from None
    if nav:
        reference = shift_anchor(anchor_for(reference, mode), mode, nav)

    raw_field = (args.get("field") or "").lower()
    try:
        search_field = _FIELD_ALIASES.get(raw_field) or SearchField(raw_field)
    except ValueError:
        raise ValidationError("Unknown search field") from None

    project_s = args.get("project_id") or ""
    filters = TimesheetFilters(
        search=args.get("search") or "",
        search_field=search_field,
        project_id=int(project_s) if project_s.isdigit() else None,
        mine_only=(args.get("mine") or "").lower() in {"1", "true", "yes", "on"},
    )
    return reference, mode, filters


def register(app: Flask, container: Container) -> None:
    def _current_user():
        user_id = session_user_id()
        return container.users_repo.get_by_id(user_id) if user_id is not None else None

    @app.route("/api/timesheet", methods=["GET"], endpoint="api_timesheet")
    @login_required
    def api_timesheet():
        try:
            reference, mode, filters = parse_view_args(request.args)
            user = _current_user()
            if not user:
                raise ValidationError("User not found")
            view = container.timesheet_service.build_view(user=user, reference=reference, mode=mode, filters=filters)
            return ok(**view.to_dict())
        except Exception as e:
            return error_response(e, "Failed to load timesheet")

    @app.route("/api/timesheet/cell", methods=["PUT"], endpoint="api_timesheet_cell")
    @login_required
    def api_timesheet_cell():
        try:
            data = request.get_json(silent=True) or {}
            day = parse_date_arg(data.get("date"), default=None)
            result = container.timesheet_service.edit_cell(
                user=_current_user(),
                project_id=data.get("project_id"),
                task_name=data.get("task_name"),
                day=day,
                value=data.get("time"),
            )
            if not result.complete:
                app.logger.warning("cell edit left entries %s undeleted", list(result.failed_ids))
                return fail("Some time entries could not be deleted", 500)
            return ok("Time updated", **result.to_dict())
        except Exception as e:
            return error_response(e, "Error updating time entry")

    @app.route("/api/timesheet/export", methods=["GET"], endpoint="api_timesheet_export")
    @login_required
    def api_timesheet_export():
        try:
            reference, mode, filters = parse_view_args(request.args)
            user = _current_user()
            if not user:
                raise ValidationError("User not found")
            data = container.timesheet_service.export_xlsx(user=user, reference=reference, mode=mode, filters=filters)
        except Exception as e:
            return error_response(e, "Error exporting to Excel. Please try again.")

        return send_file(
            io.BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"timesheet_{now_local().date().isoformat()}.xlsx",
        )
