from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.calculations import minutes_to_time, time_to_minutes
from ..attendance.repository import AttendanceRepository
from ..core.exceptions import ValidationError
from ..core.messages import error_message
from ..permissions.filters import Viewer, filter_attendance_by_role
from ..permissions.matrix import Action, Module, Role, require_permission
from ..users.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator


@dataclass(frozen=True)
class TimesheetRow:
    employee_no: int
    full_name: str
    attendance_date: date
    entry_time: str
    exit_time: str
    working_hours: str
    overtime_hours: str
    late_minutes: int
    early_minutes: int
    is_holiday_work: bool
    is_weekend_work: bool
    overtime_amount: float
    deduction_amount: float


@dataclass(frozen=True)
class TimesheetSummary:
    employee_no: int
    full_name: str
    days_worked: int
    total_hours: str
    total_overtime: str
    total_late_minutes: int
    total_early_minutes: int
    overtime_amount: float
    deduction_amount: float
    net_adjustment: float


@dataclass(frozen=True)
class TimesheetData:
    rows: list[TimesheetRow]
    summary: list[TimesheetSummary]


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def build_timesheet(self, *, start: date, end: date, viewer: Viewer) -> TimesheetData:
        require_permission(viewer.role, Module.PAYROLL, Action.READ)
        if end < start:
            raise ValidationError(error_message("end_date_after_start_date"))

        employee_no = viewer.employee_no if viewer.role == Role.EMPLOYEE else None
        project_code = viewer.project_code if viewer.role == Role.PROJECT_MANAGER else None
        transactions = filter_attendance_by_role(
            self._attendance.list_range(start=start, end=end, employee_no=employee_no, project_code=project_code),
            viewer,
        )
        employees = {e.employee_no: e for e in self._employees.list_all(active_only=False)}

        out_rows: list[TimesheetRow] = []
        summary_map: dict[int, dict] = {}

        for t in transactions:
            employee = employees.get(t.employee_no)
            full_name = employee.full_name if employee else "-"
            salary = employee.monthly_salary if employee else 0.0

            minutes = self._calculator.worked_minutes(t)
            overtime = t.overtime_hours or "00:00"
            overtime_amount = self._calculator.overtime_amount(t, salary)
            deduction_amount = self._calculator.deduction_amount(t, salary)

            out_rows.append(
                TimesheetRow(
                    employee_no=t.employee_no,
                    full_name=full_name,
                    attendance_date=t.attendance_date,
                    entry_time=t.entry_time.strftime("%H:%M"),
                    exit_time=t.exit_time.strftime("%H:%M") if t.exit_time else "-",
                    working_hours=minutes_to_time(minutes),
                    overtime_hours=overtime,
                    late_minutes=t.late_minutes,
                    early_minutes=t.early_minutes,
                    is_holiday_work=t.is_holiday_work,
                    is_weekend_work=t.is_weekend_work,
                    overtime_amount=round(overtime_amount, 2),
                    deduction_amount=round(deduction_amount, 2),
                )
            )

            s = summary_map.get(t.employee_no)
            if not s:
                s = {
                    "full_name": full_name,
                    "days": 0,
                    "minutes": 0,
                    "overtime_minutes": 0,
                    "late": 0,
                    "early": 0,
                    "overtime_amount": 0.0,
                    "deduction_amount": 0.0,
                }
                summary_map[t.employee_no] = s
            s["days"] += 1
            s["minutes"] += minutes
            s["overtime_minutes"] += time_to_minutes(overtime)
            s["late"] += t.late_minutes
            s["early"] += t.early_minutes
            s["overtime_amount"] += overtime_amount
            s["deduction_amount"] += deduction_amount

        summary = [
            TimesheetSummary(
                employee_no=employee_no,
                full_name=s["full_name"],
                days_worked=s["days"],
                total_hours=minutes_to_time(s["minutes"]),
                total_overtime=minutes_to_time(s["overtime_minutes"]),
                total_late_minutes=s["late"],
                total_early_minutes=s["early"],
                overtime_amount=round(s["overtime_amount"], 2),
                deduction_amount=round(s["deduction_amount"], 2),
                net_adjustment=round(s["overtime_amount"] - s["deduction_amount"], 2),
            )
            for employee_no, s in sorted(summary_map.items())
        ]
        return TimesheetData(rows=out_rows, summary=summary)
