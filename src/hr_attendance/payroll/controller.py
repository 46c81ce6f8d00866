from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.http import arg_date, ok
from ..container import Container
from ..permissions.decorators import current_viewer, permission_required
from ..permissions.matrix import Action, Module

TIMESHEET_FIELDS = [
    "employee_no",
    "full_name",
    "attendance_date",
    "entry_time",
    "exit_time",
    "working_hours",
    "overtime_hours",
    "late_minutes",
    "early_minutes",
    "is_holiday_work",
    "is_weekend_work",
    "overtime_amount",
    "deduction_amount",
]


def register(app: Flask, container: Container) -> None:
    def _period() -> tuple[date, date]:
        today = now_local().date()
        start = arg_date("start", today.replace(day=1))
        end = arg_date("end", today)
        return start, end

    def _write_timesheet_csv(*, data, filename: str):
        """Write timesheet rows to a CSV download (BOM so Excel shows Arabic names)."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=TIMESHEET_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow({field: getattr(row, field) for field in TIMESHEET_FIELDS})

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/payroll/timesheets", methods=["GET"], endpoint="api_payroll_timesheets")
    @permission_required(Module.PAYROLL, Action.READ)
    def api_payroll_timesheets():
        start, end = _period()
        data = container.payroll_report_service.build_timesheet(start=start, end=end, viewer=current_viewer())
        return ok({"start": start, "end": end, "rows": data.rows, "summary": data.summary})

    @app.route("/api/payroll/timesheets.csv", methods=["GET"], endpoint="api_payroll_timesheets_csv")
    @permission_required(Module.PAYROLL, Action.READ)
    def api_payroll_timesheets_csv():
        start, end = _period()
        data = container.payroll_report_service.build_timesheet(start=start, end=end, viewer=current_viewer())
        filename = f"timesheet_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_timesheet_csv(data=data, filename=filename)
