"""Attendance time arithmetic.

Working hours, overtime, late arrival and early departure over "HH:MM"
time-of-day strings, plus the salary formulas that price overtime and
deductions. Everything here is pure and stateless.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_CHECKOUT_OFFSET_MINUTES,
    DEFAULT_GRACE_MINUTES,
    OVERTIME_RATE,
    SALARY_DAYS_PER_MONTH,
)
from ..core.exceptions import ValidationError
from ..core.messages import error_message

MINUTES_PER_DAY = 24 * 60
ZERO_DURATION = "00:00"

_TIME_RE = re.compile(r"^(\d{1,3}):(\d{2})(?::\d{2})?$")


@dataclass(frozen=True)
class ScheduleTimes:
    """Minimal schedule shape the calculations need."""

    entry_time: str
    exit_time: str
    required_hours: float


@dataclass(frozen=True)
class AttendanceCalculation:
    working_hours: str
    overtime_hours: str
    late_minutes: int
    early_minutes: int
    is_holiday: bool
    is_overtime: bool


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" (or "HH:MM:SS") to minutes since midnight.

    Durations such as "25:30" are accepted so overtime totals round-trip.
    """

    match = _TIME_RE.match((value or "").strip())
    if not match:
        raise ValidationError(error_message("invalid_time"))
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60:
        raise ValidationError(error_message("invalid_time"))
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    minutes = int(minutes)
    if minutes < 0:
        raise ValidationError(error_message("invalid_time"))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_clock_time(value: str) -> str:
    """Normalize a time of day to "HH:MM"; durations past 23:59 are rejected."""
    minutes = time_to_minutes(value)
    if minutes >= MINUTES_PER_DAY:
        raise ValidationError(error_message("invalid_time"))
    return minutes_to_time(minutes)


def calculate_working_hours(entry_time: str, exit_time: str) -> str:
    """Duration between entry and exit; an earlier exit means the next day."""
    entry_minutes = time_to_minutes(entry_time)
    exit_minutes = time_to_minutes(exit_time)

    if exit_minutes < entry_minutes:
        return minutes_to_time(MINUTES_PER_DAY - entry_minutes + exit_minutes)
    return minutes_to_time(exit_minutes - entry_minutes)


def calculate_overtime(working_hours: str, scheduled_hours: float) -> str:
    working_minutes = time_to_minutes(working_hours)
    scheduled_minutes = int(round(float(scheduled_hours) * 60))

    if working_minutes <= scheduled_minutes:
        return ZERO_DURATION
    return minutes_to_time(working_minutes - scheduled_minutes)


def calculate_late_arrival(entry_time: str, scheduled_entry_time: str, grace_period_minutes: int = DEFAULT_GRACE_MINUTES) -> int:
    """Late minutes counted from the scheduled entry, 0 inside the grace window."""
    entry_minutes = time_to_minutes(entry_time)
    scheduled_minutes = time_to_minutes(scheduled_entry_time)

    if entry_minutes <= scheduled_minutes + int(grace_period_minutes):
        return 0
    return entry_minutes - scheduled_minutes


def calculate_early_departure(exit_time: str, scheduled_exit_time: str) -> int:
    # No grace period on departure; grace only applies to arrival.
    exit_minutes = time_to_minutes(exit_time)
    scheduled_minutes = time_to_minutes(scheduled_exit_time)

    if exit_minutes >= scheduled_minutes:
        return 0
    return scheduled_minutes - exit_minutes


def apply_grace_period(actual_time: str, scheduled_time: str, grace_period_minutes: int, is_entry: bool) -> bool:
    """True when the punch is acceptable once the grace window is applied."""
    actual_minutes = time_to_minutes(actual_time)
    scheduled_minutes = time_to_minutes(scheduled_time)

    if is_entry:
        return actual_minutes <= scheduled_minutes + grace_period_minutes
    return actual_minutes >= scheduled_minutes - grace_period_minutes


def _hourly_rate(monthly_salary: float, daily_hours: float) -> float:
    if float(daily_hours) <= 0:
        raise ValidationError(error_message("must_be_positive"))
    return float(monthly_salary) / SALARY_DAYS_PER_MONTH / float(daily_hours)


def calculate_overtime_amount(monthly_salary: float, daily_hours: float, overtime_hours: str) -> float:
    """(salary / 30 / daily hours) x overtime hours x 1.5"""
    overtime_decimal_hours = time_to_minutes(overtime_hours) / 60
    return _hourly_rate(monthly_salary, daily_hours) * overtime_decimal_hours * OVERTIME_RATE


def calculate_deduction_amount(monthly_salary: float, daily_hours: float, deducted_minutes: int) -> float:
    """(salary / 30 / daily hours) x deducted hours"""
    return _hourly_rate(monthly_salary, daily_hours) * (int(deducted_minutes) / 60)


def get_default_checkout_time(scheduled_exit_time: str) -> str:
    exit_minutes = time_to_minutes(scheduled_exit_time) + DEFAULT_CHECKOUT_OFFSET_MINUTES
    return minutes_to_time(exit_minutes % MINUTES_PER_DAY)


def calculate_attendance(
    entry_time: str,
    exit_time: str,
    schedule: ScheduleTimes,
    is_holiday_work: bool = False,
    grace_minutes: Optional[int] = None,
) -> AttendanceCalculation:
    """Full calculation for one attendance transaction.

    Holiday work counts entirely as overtime. ``grace_minutes`` defaults to
    the schedule's own grace period when it has one, else 15 minutes.
    """

    if grace_minutes is None:
        grace_minutes = getattr(schedule, "grace_period_minutes", DEFAULT_GRACE_MINUTES)

    working_hours = calculate_working_hours(entry_time, exit_time)
    overtime_hours = calculate_overtime(working_hours, schedule.required_hours)
    late_minutes = calculate_late_arrival(entry_time, schedule.entry_time, grace_minutes)
    early_minutes = calculate_early_departure(exit_time, schedule.exit_time)

    return AttendanceCalculation(
        working_hours=working_hours,
        overtime_hours=working_hours if is_holiday_work else overtime_hours,
        late_minutes=late_minutes,
        early_minutes=early_minutes,
        is_holiday=is_holiday_work,
        is_overtime=is_holiday_work or overtime_hours != ZERO_DURATION,
    )
