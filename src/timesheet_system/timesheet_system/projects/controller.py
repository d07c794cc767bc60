from __future__ import annotations

from flask import Flask, request

from ..common.web import error_response, login_required, ok, session_role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projects", methods=["GET"], endpoint="api_projects")
    @login_required
    def api_projects():
        try:
            projects = container.project_service.list_projects()
            return ok(projects=[p.to_dict() for p in projects])
        except Exception as e:
            return error_response(e, "Failed to fetch projects")

    @app.route("/api/projects/<int:project_id>/tasks", methods=["GET"], endpoint="api_project_tasks")
    @login_required
    def api_project_tasks(project_id: int):
        try:
            tasks = container.project_service.list_tasks(project_id)
            return ok(tasks=[t.to_dict() for t in tasks])
        except Exception as e:
            return error_response(e, "Failed to fetch tasks")

    @app.route("/api/projects", methods=["POST"], endpoint="api_projects_create")
    @login_required
    def api_projects_create():
        try:
            data = request.get_json(silent=True) or {}
            project = container.project_service.create_project(data)
            return ok("Project created successfully", 201, project=project.to_dict())
        except Exception as e:
            return error_response(e, "Error creating project")

    @app.route("/api/projects/<int:project_id>", methods=["PUT"], endpoint="api_projects_update")
    @login_required
    def api_projects_update(project_id: int):
        try:
            data = request.get_json(silent=True) or {}
            project = container.project_service.update_project(
                current_role=session_role(), project_id=project_id, data=data
            )
            return ok("Project updated successfully", project=project.to_dict())
        except Exception as e:
            return error_response(e, "Error updating project")

    @app.route("/api/projects/<int:project_id>", methods=["DELETE"], endpoint="api_projects_delete")
    @login_required
    def api_projects_delete(project_id: int):
        try:
            container.project_service.delete_project(current_role=session_role(), project_id=project_id)
            return ok("Project deleted successfully")
        except Exception as e:
            return error_response(e, "Error deleting project")
