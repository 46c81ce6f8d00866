from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, optional_int
from ..container import Container
from ..permissions.decorators import current_viewer, login_required


def _schedule_fields(body: dict) -> dict:
    return {
        "schedule_name": body.get("scheduleName"),
        "entry_time": body.get("entryTime") or "",
        "exit_time": body.get("exitTime") or "",
        "required_hours": body.get("requiredHours"),
        "dept_code": optional_int(body.get("deptCode")),
        "project_code": optional_int(body.get("projectCode")),
        "grace_period_minutes": body.get("gracePeriodMinutes"),
        "is_active": bool(body.get("isActive", True)),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-schedules", methods=["GET"], endpoint="api_schedules")
    @login_required
    def api_schedules():
        active_only = request.args.get("active") in {"1", "true", "Y"}
        return ok(container.schedule_service.list_schedules(active_only=active_only))

    @app.route("/api/time-schedules/mine", methods=["GET"], endpoint="api_my_schedule")
    @login_required
    def api_my_schedule():
        viewer = current_viewer()
        return ok(container.schedule_service.schedule_for(project_code=viewer.project_code, dept_code=viewer.dept_code))

    @app.route("/api/time-schedules", methods=["POST"], endpoint="api_schedules_create")
    @login_required
    def api_schedules_create():
        schedule_id = container.schedule_service.create(current_role=current_viewer().role, **_schedule_fields(json_body()))
        return ok({"scheduleId": schedule_id}, 201)

    @app.route("/api/time-schedules/<int:schedule_id>", methods=["PUT"], endpoint="api_schedules_update")
    @login_required
    def api_schedules_update(schedule_id: int):
        container.schedule_service.update(
            current_role=current_viewer().role,
            schedule_id=schedule_id,
            **_schedule_fields(json_body()),
        )
        return ok({"scheduleId": schedule_id})

    @app.route("/api/time-schedules/<int:schedule_id>", methods=["DELETE"], endpoint="api_schedules_delete")
    @login_required
    def api_schedules_delete(schedule_id: int):
        container.schedule_service.delete(current_role=current_viewer().role, schedule_id=schedule_id)
        return ok()
