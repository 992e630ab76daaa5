from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_employee_id, domain_error_response, employee_required
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employee/attendance", methods=["GET"], endpoint="employee_attendance")
    @employee_required
    def employee_attendance():
        employee_id = current_employee_id()

        if request.args.get("tipo") == "activa":
            active = container.attendance_service.get_active_attendance(employee_id)
            return jsonify({"attendance": active.to_dict() if active else None}), 200

        history = container.attendance_service.get_history(employee_id)
        return jsonify({"attendances": [r.to_dict() for r in history]}), 200

    @app.route("/api/employee/attendance", methods=["POST"], endpoint="employee_check_in")
    @employee_required
    def employee_check_in():
        try:
            record = container.attendance_service.check_in(current_employee_id())
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "message": "check-in recorded", "attendance": record.to_dict()}), 201

    @app.route("/api/employee/attendance", methods=["PATCH"], endpoint="employee_check_out")
    @employee_required
    def employee_check_out():
        try:
            record = container.attendance_service.check_out(current_employee_id())
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "message": "check-out recorded", "attendance": record.to_dict()}), 200
