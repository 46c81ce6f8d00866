from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import arabic_day_name, now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_WEEKEND_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import GeofenceError, NotFoundError, ValidationError
from ..holidays.repository import HolidayRepository
from ..holidays.service import get_holiday
from ..permissions.filters import Viewer, filter_attendance_by_role
from ..permissions.matrix import Role
from ..projects.repository import ProjectRepository
from ..schedules.model import TimeSchedule
from ..schedules.repository import ScheduleRepository
from ..schedules.service import get_employee_schedule
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from .calculations import (
    MINUTES_PER_DAY,
    AttendanceCalculation,
    calculate_attendance,
    get_default_checkout_time,
    time_to_minutes,
)
from .geo import Location, distance_to_project, format_distance, validate_location
from .model import AttendanceTransaction, DailyOverview
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")


def _combine(day: date, hhmm: str) -> datetime:
    hours, minutes = hhmm.split(":")[:2]
    return datetime.combine(day, time(int(hours), int(minutes)))


def _minutes_into_shift(clock: str, shift_start: int, shift_length: int) -> int:
    """Signed minutes from the shift start.

    Punches in the off-shift gap belong to the nearer edge, so a 21:50 entry
    on a 22:00 shift is -10 rather than 1430.
    """
    offset = (time_to_minutes(clock) - shift_start) % MINUTES_PER_DAY
    if offset > shift_length + (MINUTES_PER_DAY - shift_length) // 2:
        offset -= MINUTES_PER_DAY
    return offset


class AttendanceService:
    """GPS check-in / check-out and the attendance figures derived from them."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        projects: ProjectRepository,
        schedules: ScheduleRepository,
        holidays: HolidayRepository,
        *,
        grace_minutes: Optional[int] = None,
        weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._projects = projects
        self._schedules = schedules
        self._holidays = holidays
        # None: use each schedule's own grace period.
        self._grace_minutes = grace_minutes
        self._weekend_days = frozenset(int(d) for d in weekend_days)

    def _get_employee(self, employee_no: int) -> Employee:
        employee = self._employees.get_by_no(int(employee_no))
        if not employee:
            raise NotFoundError("الموظف غير موجود")
        if not employee.is_active:
            raise ValidationError("حساب الموظف غير نشط")
        return employee

    def _schedule_for(self, employee: Employee, project_code: Optional[int] = None) -> TimeSchedule:
        return get_employee_schedule(
            project_code or employee.project_code,
            employee.dept_code,
            self._schedules.list_all(active_only=True),
        )

    def _holiday_on(self, day: date):
        return get_holiday(day, self._holidays.list_between(start=day, end=day))

    def is_weekend(self, day: date) -> bool:
        return day.weekday() in self._weekend_days

    def _check_geofence(self, project_code: Optional[int], latitude, longitude) -> tuple[Location, Optional[float]]:
        """Validate the position against the project's radius. Returns (location, distance)."""

        location = validate_location(latitude, longitude)
        if not project_code:
            raise ValidationError("لا يوجد مشروع مرتبط بالموظف")

        project = self._projects.get_by_code(int(project_code))
        if not project or not project.is_active:
            raise NotFoundError("المشروع غير موجود أو غير نشط")

        site = project.to_location()
        if site is None:
            raise ValidationError("لم يتم تحديد موقع المشروع")

        distance = distance_to_project(location, site)
        if distance > site.radius:
            logger.warning(
                "Geofence rejected for project %s: %.1fm away (radius %.0fm)",
                project_code,
                distance,
                site.radius,
            )
            raise GeofenceError(
                f"أنت خارج نطاق موقع المشروع. المسافة الحالية {format_distance(distance)} "
                f"والمسموح {format_distance(site.radius)}",
                distance_meters=distance,
                radius_meters=site.radius,
            )
        return location, distance

    def _calculate(self, entry_time: str, exit_time: str, schedule: TimeSchedule, *, is_off_day: bool) -> AttendanceCalculation:
        # Off-day work (holiday or weekend) is paid entirely as overtime.
        calculation = calculate_attendance(
            entry_time,
            exit_time,
            schedule,
            is_holiday_work=is_off_day,
            grace_minutes=self._grace_minutes,
        )
        if not schedule.crosses_midnight:
            return calculation

        # Overnight shifts: measure both punches from the shift start, not the clock face.
        start = time_to_minutes(schedule.entry_time)
        length = (time_to_minutes(schedule.exit_time) - start) % MINUTES_PER_DAY
        grace = self._grace_minutes if self._grace_minutes is not None else schedule.grace_period_minutes

        entry_offset = _minutes_into_shift(entry_time, start, length)
        exit_offset = _minutes_into_shift(exit_time, start, length)
        return replace(
            calculation,
            late_minutes=entry_offset if entry_offset > grace else 0,
            early_minutes=length - exit_offset if exit_offset < length else 0,
        )

    def _calculate_record(self, record: AttendanceTransaction, exit_time: datetime, schedule: TimeSchedule) -> AttendanceCalculation:
        return self._calculate(
            _hhmm(record.entry_time),
            _hhmm(exit_time),
            schedule,
            is_off_day=record.is_holiday_work or record.is_weekend_work,
        )

    def check_in(
        self,
        employee_no: int,
        *,
        latitude,
        longitude,
        project_code: Optional[int] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceTransaction:
        now = now or now_local()
        today = now.date()

        employee = self._get_employee(employee_no)
        project_code = project_code or employee.project_code

        if self._attendance.get_for_employee_and_date(employee.employee_no, today):
            raise ValidationError("تم تسجيل الحضور لهذا اليوم مسبقاً")
        yesterday = self._attendance.get_for_employee_and_date(employee.employee_no, today - timedelta(days=1))
        if yesterday and yesterday.is_open and self._schedule_for(employee, yesterday.project_code).crosses_midnight:
            raise ValidationError("لم يتم تسجيل الانصراف من الوردية الليلية السابقة")

        location, distance = self._check_geofence(project_code, latitude, longitude)
        schedule = self._schedule_for(employee, project_code)
        holiday = self._holiday_on(today)

        transaction_id = self._attendance.create_checkin(
            employee_no=employee.employee_no,
            attendance_date=today,
            entry_time=now,
            project_code=int(project_code),
            latitude=location.latitude,
            longitude=location.longitude,
            distance_meters=round(distance, 2) if distance is not None else None,
            scheduled_hours=float(schedule.required_hours),
            is_holiday_work=holiday is not None,
            is_weekend_work=self.is_weekend(today),
            notes=(notes or "").strip() or None,
        )
        logger.info("Employee %s checked in at project %s (transaction %s)", employee.employee_no, project_code, transaction_id)

        created = self._attendance.get_by_id(transaction_id)
        if not created:
            raise NotFoundError("سجل الحضور غير موجود")
        return created

    def _open_transaction(self, employee: Employee, now: datetime) -> AttendanceTransaction:
        today = now.date()
        record = self._attendance.get_for_employee_and_date(employee.employee_no, today)
        if record:
            if not record.is_open:
                raise ValidationError("تم تسجيل الانصراف لهذا اليوم مسبقاً")
            return record

        # Overnight shifts are checked out on the following calendar day.
        yesterday = self._attendance.get_for_employee_and_date(employee.employee_no, today - timedelta(days=1))
        if yesterday and yesterday.is_open:
            schedule = self._schedule_for(employee, yesterday.project_code)
            if schedule.crosses_midnight:
                return yesterday

        raise ValidationError("لم يتم تسجيل الحضور لهذا اليوم")

    def check_out(
        self,
        employee_no: int,
        *,
        latitude,
        longitude,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceTransaction:
        now = now or now_local()
        employee = self._get_employee(employee_no)
        record = self._open_transaction(employee, now)

        location, distance = self._check_geofence(record.project_code or employee.project_code, latitude, longitude)
        schedule = self._schedule_for(employee, record.project_code)
        calculation = self._calculate_record(record, now, schedule)

        ok = self._attendance.complete_checkout(
            transaction_id=record.transaction_id,
            exit_time=now,
            latitude=location.latitude,
            longitude=location.longitude,
            distance_meters=round(distance, 2) if distance is not None else None,
            calculation=calculation,
            notes=(notes or "").strip() or None,
        )
        if not ok:
            raise ValidationError("تم تسجيل الانصراف لهذا اليوم مسبقاً")

        logger.info(
            "Employee %s checked out (transaction %s): worked %s, overtime %s, late %s min, early %s min",
            employee.employee_no,
            record.transaction_id,
            calculation.working_hours,
            calculation.overtime_hours,
            calculation.late_minutes,
            calculation.early_minutes,
        )
        updated = self._attendance.get_by_id(record.transaction_id)
        if not updated:
            raise NotFoundError("سجل الحضور غير موجود")
        return updated

    def auto_checkout(self, *, before_date: Optional[date] = None, now: Optional[datetime] = None) -> list[int]:
        """Close transactions left open on earlier days at the default checkout time.

        The default checkout is the scheduled exit plus two hours. Overnight
        transactions whose default checkout is still in the future stay open.
        Returns the ids of the closed transactions.
        """

        now = now or now_local()
        before_date = before_date or now.date()

        closed: list[int] = []
        for record in self._attendance.list_open_before(before_date):
            employee = self._employees.get_by_no(record.employee_no)
            if not employee:
                logger.warning("Skipping auto checkout of transaction %s: employee %s missing", record.transaction_id, record.employee_no)
                continue

            schedule = self._schedule_for(employee, record.project_code)
            exit_time = _combine(record.attendance_date, get_default_checkout_time(schedule.exit_time))
            if exit_time <= record.entry_time:
                exit_time += timedelta(days=1)
            if exit_time > now:
                continue

            calculation = self._calculate_record(record, exit_time, schedule)
            if self._attendance.complete_checkout(
                transaction_id=record.transaction_id,
                exit_time=exit_time,
                latitude=None,
                longitude=None,
                distance_meters=None,
                calculation=calculation,
                is_auto_checkout=True,
            ):
                closed.append(record.transaction_id)

        if closed:
            logger.info("Auto checkout closed %d transaction(s) before %s", len(closed), before_date)
        return closed

    def record_manual(
        self,
        *,
        employee_no: int,
        attendance_date: date,
        entry_time: str,
        exit_time: Optional[str] = None,
        project_code: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Write an attendance transaction from an approved manual attendance request."""

        employee = self._get_employee(employee_no)
        project_code = project_code or employee.project_code
        schedule = self._schedule_for(employee, project_code)

        is_holiday_work = self._holiday_on(attendance_date) is not None
        is_weekend_work = self.is_weekend(attendance_date)

        entry_dt = _combine(attendance_date, entry_time)
        exit_dt = None
        calculation = None
        if exit_time:
            exit_dt = _combine(attendance_date, exit_time)
            if exit_dt < entry_dt:
                exit_dt += timedelta(days=1)
            calculation = self._calculate(entry_time, exit_time, schedule, is_off_day=is_holiday_work or is_weekend_work)

        transaction_id = self._attendance.save_manual(
            employee_no=employee.employee_no,
            attendance_date=attendance_date,
            entry_time=entry_dt,
            exit_time=exit_dt,
            project_code=project_code,
            scheduled_hours=float(schedule.required_hours),
            calculation=calculation,
            is_holiday_work=is_holiday_work,
            is_weekend_work=is_weekend_work,
            notes=notes,
        )
        logger.info("Manual attendance stored for employee %s on %s (transaction %s)", employee.employee_no, attendance_date, transaction_id)
        return transaction_id

    def get_my_attendance(self, employee_no: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceTransaction]:
        return self._attendance.list_for_employee(int(employee_no), limit=int(limit))

    def list_attendance(self, viewer: Viewer, *, start: date, end: date) -> list[AttendanceTransaction]:
        if end < start:
            raise ValidationError("تاريخ النهاية يجب أن يكون بعد تاريخ البداية")

        employee_no = viewer.employee_no if viewer.role == Role.EMPLOYEE else None
        project_code = viewer.project_code if viewer.role == Role.PROJECT_MANAGER else None
        rows = self._attendance.list_range(start=start, end=end, employee_no=employee_no, project_code=project_code)
        return filter_attendance_by_role(rows, viewer)

    def daily_overview(self, employee_no: int, *, day: Optional[date] = None, now: Optional[datetime] = None) -> DailyOverview:
        now = now or now_local()
        day = day or now.date()

        employee = self._get_employee(employee_no)
        schedule = self._schedule_for(employee)
        holiday = self._holiday_on(day)
        record = self._attendance.get_for_employee_and_date(employee.employee_no, day)

        if record:
            status = AttendanceStatus.CHECKED_IN if record.is_open else AttendanceStatus.PRESENT
        elif holiday:
            status = AttendanceStatus.HOLIDAY
        elif self.is_weekend(day):
            status = AttendanceStatus.WEEKEND
        elif day > now.date():
            status = AttendanceStatus.UPCOMING
        else:
            status = AttendanceStatus.ABSENT

        return DailyOverview(
            day=day,
            day_name=arabic_day_name(day),
            status=status,
            status_label=status.label_ar,
            holiday_name=holiday.display_name if holiday else None,
            scheduled_entry=schedule.entry_time,
            scheduled_exit=schedule.exit_time,
            transaction=record,
        )
