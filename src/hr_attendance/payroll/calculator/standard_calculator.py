from __future__ import annotations

from ...attendance.calculations import (
    ZERO_DURATION,
    calculate_deduction_amount,
    calculate_overtime_amount,
    time_to_minutes,
)
from ...attendance.model import AttendanceTransaction
from ...core.constants import DEFAULT_REQUIRED_HOURS
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: hourly rate = salary / 30 / daily hours.

    Overtime is paid at 1.5x; late arrival and early departure minutes are
    deducted at the plain hourly rate. Off-day work carries no deduction.
    """

    @staticmethod
    def _daily_hours(row: AttendanceTransaction) -> float:
        return float(row.scheduled_hours or DEFAULT_REQUIRED_HOURS)

    def worked_minutes(self, row: AttendanceTransaction) -> int:
        if row.working_hours:
            return time_to_minutes(row.working_hours)
        if not row.exit_time:
            return 0
        minutes = int((row.exit_time - row.entry_time).total_seconds() // 60)
        return max(minutes, 0)

    def deducted_minutes(self, row: AttendanceTransaction) -> int:
        if row.is_holiday_work or row.is_weekend_work or not row.exit_time:
            return 0
        return int(row.late_minutes or 0) + int(row.early_minutes or 0)

    def overtime_amount(self, row: AttendanceTransaction, monthly_salary: float) -> float:
        overtime = row.overtime_hours or ZERO_DURATION
        if overtime == ZERO_DURATION:
            return 0.0
        return calculate_overtime_amount(monthly_salary, self._daily_hours(row), overtime)

    def deduction_amount(self, row: AttendanceTransaction, monthly_salary: float) -> float:
        minutes = self.deducted_minutes(row)
        if not minutes:
            return 0.0
        return calculate_deduction_amount(monthly_salary, self._daily_hours(row), minutes)
