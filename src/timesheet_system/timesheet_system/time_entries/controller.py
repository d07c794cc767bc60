from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, error_response, login_required, ok, session_role, session_user_id
from ..container import Container
from ..core.exceptions import ValidationError
from ..users.model import User


def register(app: Flask, container: Container) -> None:
    def _current_user() -> User:
        user_id = session_user_id()
        user = container.users_repo.get_by_id(user_id) if user_id is not None else None
        if not user:
            raise ValidationError("User not found")
        return user

    @app.route("/api/time-entries/active", methods=["GET"], endpoint="api_time_entries_active")
    @login_required
    def api_time_entries_active():
        try:
            entry = container.time_entry_service.get_active(int(session_user_id()))
            if not entry:
                return ok(activeEntry=None, elapsed_seconds=0)
            elapsed = 0
            if entry.start_time:
                elapsed = max(int((now_local() - entry.start_time).total_seconds()), 0)
            return ok(activeEntry=entry.to_dict(), elapsed_seconds=elapsed)
        except Exception as e:
            return error_response(e, "Failed to load active time entry")

    @app.route("/api/time-entries/start", methods=["POST"], endpoint="api_time_entries_start")
    @login_required
    def api_time_entries_start():
        try:
            data = request.get_json(silent=True) or {}
            entry_id = container.time_entry_service.start(
                user_id=int(session_user_id()),
                project_id=data.get("project_id"),
                task_name=data.get("task_name"),
                description=data.get("description"),
            )
            return ok("Time tracking started successfully", 201, entryId=entry_id)
        except Exception as e:
            return error_response(e, "Error starting time tracking")

    @app.route("/api/time-entries/<int:entry_id>/stop", methods=["POST"], endpoint="api_time_entries_stop")
    @login_required
    def api_time_entries_stop(entry_id: int):
        try:
            minutes = container.time_entry_service.stop(user=_current_user(), entry_id=entry_id)
            return ok("Time tracking stopped", totalTime=minutes)
        except Exception as e:
            return error_response(e, "Error stopping time tracking")

    @app.route("/api/time-entries/discard", methods=["POST"], endpoint="api_time_entries_discard")
    @login_required
    def api_time_entries_discard():
        try:
            container.time_entry_service.discard(user_id=int(session_user_id()))
            return ok("Time entry discarded")
        except Exception as e:
            return error_response(e, "Error discarding time entry")

    @app.route("/api/time-entries", methods=["POST"], endpoint="api_time_entries_create")
    @login_required
    def api_time_entries_create():
        try:
            data = request.get_json(silent=True) or {}
            try:
                work_date = parse_iso_date(data["date"]) if data.get("date") else None
            except ValueError:
                raise ValidationError("Invalid date format") from None
            entry_id = container.time_entry_service.add_line(
                user_id=session_user_id(),
                project_id=data.get("project_id"),
                task_name=data.get("task_name"),
                work_date=work_date,
                time_spent=data.get("time_spent"),
                description=data.get("description"),
            )
            return ok("Time entry added successfully", 201, entryId=entry_id)
        except Exception as e:
            return error_response(e, "Error adding time entry")

    @app.route("/api/time-entries/<int:entry_id>/approve", methods=["PUT"], endpoint="api_time_entries_approve")
    @login_required
    def api_time_entries_approve(entry_id: int):
        try:
            data = request.get_json(silent=True) or {}
            entry = container.time_entry_service.approve_entry(
                approver=_current_user(),
                entry_id=entry_id,
                status=data.get("status"),
                manager_comment=data.get("manager_comment"),
            )
            return ok(f"Time entry {entry.status.value}", entry=entry.to_dict())
        except Exception as e:
            return error_response(e, "Error reviewing time entry")

    @app.route("/api/time-entries/<int:entry_id>", methods=["PUT"], endpoint="api_time_entries_update")
    @admin_required
    def api_time_entries_update(entry_id: int):
        try:
            data = request.get_json(silent=True) or {}
            entry = container.time_entry_service.update_entry(
                current_role=session_role(), entry_id=entry_id, changes=data
            )
            return ok("Time entry updated successfully", entry=entry.to_dict())
        except Exception as e:
            return error_response(e, "Error updating time entry")

    @app.route("/api/time-entries/<int:entry_id>", methods=["DELETE"], endpoint="api_time_entries_delete")
    @admin_required
    def api_time_entries_delete(entry_id: int):
        try:
            container.time_entry_service.delete_entry(current_role=session_role(), entry_id=entry_id)
            return ok("Time entry deleted successfully")
        except Exception as e:
            return error_response(e, "Error deleting time entry")

    @app.route("/api/time-entries", methods=["DELETE"], endpoint="api_time_entries_clear")
    @admin_required
    def api_time_entries_clear():
        try:
            deleted = container.time_entry_service.clear_all(current_role=session_role())
            return ok("All time entries cleared successfully", deleted=deleted)
        except Exception as e:
            return error_response(e, "Error clearing time entries")
