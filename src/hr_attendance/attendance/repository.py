from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .calculations import AttendanceCalculation
from .model import AttendanceTransaction


class AttendanceRepository(Protocol):
    def get_by_id(self, transaction_id: int) -> Optional[AttendanceTransaction]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_no: int, attendance_date: date) -> Optional[AttendanceTransaction]:
        raise NotImplementedError

    def list_for_employee(self, employee_no: int, *, limit: int) -> Sequence[AttendanceTransaction]:
        """Most recent first."""

        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_no: Optional[int] = None,
        project_code: Optional[int] = None,
    ) -> Sequence[AttendanceTransaction]:
        raise NotImplementedError

    def list_open_before(self, day: date) -> Sequence[AttendanceTransaction]:
        """Transactions without an exit time dated strictly before ``day``."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_no: int,
        attendance_date: date,
        entry_time: datetime,
        project_code: Optional[int],
        latitude: Optional[float],
        longitude: Optional[float],
        distance_meters: Optional[float],
        scheduled_hours: float,
        is_holiday_work: bool,
        is_weekend_work: bool,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def complete_checkout(
        self,
        *,
        transaction_id: int,
        exit_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
        distance_meters: Optional[float],
        calculation: AttendanceCalculation,
        is_auto_checkout: bool = False,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def save_manual(
        self,
        *,
        employee_no: int,
        attendance_date: date,
        entry_time: datetime,
        exit_time: Optional[datetime],
        project_code: Optional[int],
        scheduled_hours: float,
        calculation: Optional[AttendanceCalculation],
        is_holiday_work: bool,
        is_weekend_work: bool,
        notes: Optional[str] = None,
    ) -> int:
        """Create or overwrite the employee's transaction for the day (approved manual entry).

        Returns transaction_id.
        """

        raise NotImplementedError
