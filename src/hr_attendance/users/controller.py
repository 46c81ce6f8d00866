from __future__ import annotations

import logging

from flask import Flask, session

from ..common.http import json_body, ok
from ..container import Container
from ..core.exceptions import NotFoundError
from ..permissions.decorators import current_viewer, login_required, permission_required
from ..permissions.matrix import Action, Module, allowed_modules
from .model import Employee

logger = logging.getLogger(__name__)


def _employee_dto(e: Employee) -> dict:
    return {
        "employeeNo": e.employee_no,
        "fullName": e.full_name,
        "username": e.username,
        "role": e.role.value,
        "roleLabel": e.role.label,
        "roleNameAr": e.role.label_ar,
        "deptCode": e.dept_code,
        "projectCode": e.project_code,
        "isActive": e.is_active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        body = json_body()
        user = container.auth_service.authenticate(body.get("username") or "", body.get("password") or "")

        session.clear()
        session.update(user.to_session())
        logger.info("Employee %s logged in as %s", user.employee_no, user.role.value)

        return ok(
            {
                "employeeNo": user.employee_no,
                "fullName": user.full_name,
                "role": user.role.value,
                "roleLabel": user.role.label,
                "deptCode": user.dept_code,
                "projectCode": user.project_code,
                "permissions": {m.value: level.value for m, level in allowed_modules(user.role).items()},
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return ok()

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def api_me():
        viewer = current_viewer()
        employee = container.employees_repo.get_by_no(viewer.employee_no)
        if not employee:
            raise NotFoundError("الموظف غير موجود")

        data = _employee_dto(employee)
        data["permissions"] = {m.value: level.value for m, level in allowed_modules(viewer.role).items()}
        return ok(data)

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    @permission_required(Module.EMPLOYEES, Action.READ)
    def api_employees():
        viewer = current_viewer()
        return ok([_employee_dto(e) for e in container.employee_service.list_for(viewer)])
