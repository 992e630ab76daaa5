from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_employee_id, domain_error_response, employee_required
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employee/tasks", methods=["GET"], endpoint="employee_tasks")
    @employee_required
    def employee_tasks():
        tasks = container.task_service.list_tasks(current_employee_id())
        return jsonify({"tasks": [t.to_dict() for t in tasks]}), 200

    @app.route("/api/employee/tasks", methods=["POST"], endpoint="employee_create_task")
    @employee_required
    def employee_create_task():
        body = request.get_json(silent=True) or {}
        try:
            try:
                project_id = int(body.get("projectId"))
                work_date = parse_iso_date(str(body.get("date", ""))[:10])
            except (TypeError, ValueError):
                raise ValidationError("projectId and date (YYYY-MM-DD) are required") from None

            task = container.task_service.create_task(
                current_employee_id(),
                name=body.get("name") or "",
                project_id=project_id,
                work_date=work_date,
                description=body.get("description"),
            )
        except DomainError as e:
            return domain_error_response(e)
        return jsonify(task.to_dict()), 201

    @app.route("/api/employee/tasks", methods=["PUT"], endpoint="employee_task_action")
    @employee_required
    def employee_task_action():
        body = request.get_json(silent=True) or {}
        task_id = body.get("taskId")
        action = body.get("action") or body.get("accion")
        if not task_id or not action:
            return jsonify({"success": False, "error": "taskId and action are required"}), 400

        try:
            task = container.task_service.apply_task_action(int(task_id), current_employee_id(), str(action))
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "invalid taskId"}), 400
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "task": task.to_dict()}), 200
