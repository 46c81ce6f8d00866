from datetime import date, datetime

import pytest

from hr_attendance.attendance.model import AttendanceTransaction
from hr_attendance.payroll.calculator.standard_calculator import StandardPayrollCalculator

DAY = date(2026, 10, 14)


def _row(**overrides) -> AttendanceTransaction:
    fields = dict(
        transaction_id=1,
        employee_no=4,
        attendance_date=DAY,
        entry_time=datetime(2026, 10, 14, 7, 30),
        exit_time=datetime(2026, 10, 14, 17, 0),
        scheduled_hours=8.0,
        working_hours="09:30",
        overtime_hours="01:30",
        late_minutes=30,
        early_minutes=0,
    )
    fields.update(overrides)
    return AttendanceTransaction(**fields)


def test_worked_minutes_prefers_stored_working_hours():
    calc = StandardPayrollCalculator()
    assert calc.worked_minutes(_row()) == 570
    assert calc.worked_minutes(_row(working_hours=None)) == 570
    assert calc.worked_minutes(_row(working_hours=None, exit_time=None)) == 0


def test_overtime_and_deduction_amounts():
    calc = StandardPayrollCalculator()
    row = _row()

    # hourly rate = 6000 / 30 / 8 = 25
    assert calc.overtime_amount(row, 6000) == pytest.approx(25 * 1.5 * 1.5)
    assert calc.deduction_amount(row, 6000) == pytest.approx(12.5)


def test_no_overtime_no_amount():
    calc = StandardPayrollCalculator()
    assert calc.overtime_amount(_row(overtime_hours="00:00"), 6000) == 0.0
    assert calc.overtime_amount(_row(overtime_hours=None), 6000) == 0.0


def test_off_day_work_has_no_deduction():
    calc = StandardPayrollCalculator()
    assert calc.deduction_amount(_row(is_holiday_work=True), 6000) == 0.0
    assert calc.deduction_amount(_row(is_weekend_work=True, early_minutes=60), 6000) == 0.0


def test_open_transaction_has_no_deduction():
    calc = StandardPayrollCalculator()
    assert calc.deduction_amount(_row(exit_time=None, working_hours=None), 6000) == 0.0


def test_missing_scheduled_hours_uses_default_day():
    calc = StandardPayrollCalculator()
    assert calc.deduction_amount(_row(scheduled_hours=None, late_minutes=60), 4800) == pytest.approx(20.0)
