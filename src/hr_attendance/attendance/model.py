from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceTransaction:
    """One working day of an employee: GPS check-in, check-out and the computed figures."""

    transaction_id: int
    employee_no: int
    attendance_date: date
    entry_time: datetime
    exit_time: Optional[datetime] = None
    project_code: Optional[int] = None
    entry_latitude: Optional[float] = None
    entry_longitude: Optional[float] = None
    entry_distance_meters: Optional[float] = None
    exit_latitude: Optional[float] = None
    exit_longitude: Optional[float] = None
    exit_distance_meters: Optional[float] = None
    scheduled_hours: Optional[float] = None
    working_hours: Optional[str] = None
    overtime_hours: Optional[str] = None
    late_minutes: int = 0
    early_minutes: int = 0
    is_holiday_work: bool = False
    is_weekend_work: bool = False
    is_manual_entry: bool = False
    is_auto_checkout: bool = False
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.exit_time is None


@dataclass(frozen=True)
class DailyOverview:
    """Read-model for the self-service attendance card."""

    day: date
    day_name: str
    status: AttendanceStatus
    status_label: str
    holiday_name: Optional[str] = None
    scheduled_entry: Optional[str] = None
    scheduled_exit: Optional[str] = None
    transaction: Optional[AttendanceTransaction] = None
