from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import arg_date, body_date, json_body, ok, optional_int
from ..common.validators import require_int, require_positive_number
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..permissions.decorators import current_viewer, level_required, login_required, permission_required
from ..permissions.matrix import Action, Module, PermissionLevel
from .calculations import ScheduleTimes, calculate_attendance, parse_clock_time


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    @login_required
    def api_check_in():
        body = json_body()
        viewer = current_viewer()
        transaction = container.attendance_service.check_in(
            viewer.employee_no,
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            project_code=optional_int(body.get("projectCode")),
            notes=body.get("notes"),
        )
        return ok(transaction, message="تم تسجيل الحضور بنجاح")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    @login_required
    def api_check_out():
        body = json_body()
        viewer = current_viewer()
        transaction = container.attendance_service.check_out(
            viewer.employee_no,
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            notes=body.get("notes"),
        )
        return ok(transaction, message="تم تسجيل الانصراف بنجاح")

    @app.route("/api/attendance/my-attendance", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    def api_my_attendance():
        limit = require_int(request.args.get("limit") or DEFAULT_HISTORY_LIMIT, "limit")
        rows = container.attendance_service.get_my_attendance(current_viewer().employee_no, limit=limit)
        return ok(rows)

    @app.route("/api/attendance/daily-overview", methods=["GET"], endpoint="api_daily_overview")
    @login_required
    def api_daily_overview():
        now = now_local()
        day = arg_date("date", now.date())
        overview = container.attendance_service.daily_overview(current_viewer().employee_no, day=day, now=now)
        return ok(overview)

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_list")
    @permission_required(Module.ATTENDANCE, Action.READ)
    def api_attendance_list():
        today = now_local().date()
        start = arg_date("start", today - timedelta(days=7))
        end = arg_date("end", today)
        rows = container.attendance_service.list_attendance(current_viewer(), start=start, end=end)
        return ok(rows)

    @app.route("/api/attendance/calculate", methods=["POST"], endpoint="api_attendance_calculate")
    @login_required
    def api_attendance_calculate():
        """Preview the figures for an entry/exit pair against a schedule."""

        body = json_body()
        schedule = ScheduleTimes(
            entry_time=parse_clock_time(body.get("scheduledEntryTime") or ""),
            exit_time=parse_clock_time(body.get("scheduledExitTime") or ""),
            required_hours=require_positive_number(body.get("requiredHours"), "requiredHours"),
        )
        grace = body.get("gracePeriodMinutes")
        calculation = calculate_attendance(
            parse_clock_time(body.get("entryTime") or ""),
            parse_clock_time(body.get("exitTime") or ""),
            schedule,
            is_holiday_work=bool(body.get("isHolidayWork")),
            grace_minutes=require_int(grace, "gracePeriodMinutes") if grace is not None else None,
        )
        return ok(calculation)

    @app.route("/api/attendance/auto-checkout", methods=["POST"], endpoint="api_auto_checkout")
    @level_required(Module.ATTENDANCE, PermissionLevel.FULL, PermissionLevel.MANAGE)
    def api_auto_checkout():
        body = json_body()
        now = now_local()
        before = body_date(body, "beforeDate") if body.get("beforeDate") else now.date()
        closed = container.attendance_service.auto_checkout(before_date=before, now=now)
        return ok({"closedTransactions": closed, "count": len(closed)})
