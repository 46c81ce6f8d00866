from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import arg_date, body_date, json_body, ok, optional_int
from ..container import Container
from ..permissions.decorators import current_viewer, login_required
from .service import get_upcoming_holidays


def _holiday_fields(body: dict) -> dict:
    return {
        "holiday_type": body.get("holidayType"),
        "hijri_year": body.get("hijriYear"),
        "from_date": body_date(body, "fromDate"),
        "to_date": body_date(body, "toDate"),
        "holiday_name": body.get("holidayName"),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="api_holidays")
    @login_required
    def api_holidays():
        year = optional_int(request.args.get("year"))
        return ok(container.holiday_service.list_holidays(year=year))

    @app.route("/api/holidays/upcoming", methods=["GET"], endpoint="api_holidays_upcoming")
    @login_required
    def api_holidays_upcoming():
        today = now_local().date()
        start = arg_date("from", today)
        end = arg_date("to", start + timedelta(days=90))
        holidays = container.holiday_service.holidays_between(start, end)
        return ok(get_upcoming_holidays(start, end, holidays))

    @app.route("/api/holidays", methods=["POST"], endpoint="api_holidays_create")
    @login_required
    def api_holidays_create():
        ser_no = container.holiday_service.create(current_role=current_viewer().role, **_holiday_fields(json_body()))
        return ok({"serNo": ser_no}, 201)

    @app.route("/api/holidays/<int:ser_no>", methods=["PUT"], endpoint="api_holidays_update")
    @login_required
    def api_holidays_update(ser_no: int):
        container.holiday_service.update(current_role=current_viewer().role, ser_no=ser_no, **_holiday_fields(json_body()))
        return ok({"serNo": ser_no})

    @app.route("/api/holidays/<int:ser_no>", methods=["DELETE"], endpoint="api_holidays_delete")
    @login_required
    def api_holidays_delete(ser_no: int):
        container.holiday_service.delete(current_role=current_viewer().role, ser_no=ser_no)
        return ok()
