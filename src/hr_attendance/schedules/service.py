from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..attendance.calculations import parse_clock_time
from ..core.constants import DEFAULT_ENTRY_TIME, DEFAULT_EXIT_TIME, DEFAULT_GRACE_MINUTES, DEFAULT_REQUIRED_HOURS
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.messages import error_message
from ..permissions.matrix import Role, can_manage_settings
from .model import TimeSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE = TimeSchedule(
    schedule_id=None,
    schedule_name="Default Schedule",
    entry_time=DEFAULT_ENTRY_TIME,
    exit_time=DEFAULT_EXIT_TIME,
    required_hours=DEFAULT_REQUIRED_HOURS,
)


def get_employee_schedule(
    project_code: Optional[int],
    dept_code: Optional[int],
    schedules: Iterable[TimeSchedule],
) -> TimeSchedule:
    """Pick the schedule that applies to an employee.

    Priority: project schedule > department schedule (without project) > default.
    """

    active = [s for s in schedules if s.is_active]

    if project_code:
        for schedule in active:
            if schedule.project_code == project_code:
                return schedule

    if dept_code:
        for schedule in active:
            if schedule.dept_code == dept_code and not schedule.project_code:
                return schedule

    return DEFAULT_SCHEDULE


def generate_schedule_name(dept_code: Optional[int] = None, project_code: Optional[int] = None) -> str:
    if project_code:
        return f"Project {project_code} - Default Schedule"
    if dept_code:
        return f"Department {dept_code} - Default Schedule"
    return "Default Schedule"


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    @staticmethod
    def _require_manager(role: Role) -> None:
        if not can_manage_settings(role, "time-schedules"):
            raise AuthorizationError(error_message("no_permission"))

    @staticmethod
    def _build(
        *,
        schedule_id: Optional[int],
        schedule_name: Optional[str],
        entry_time: str,
        exit_time: str,
        required_hours,
        dept_code: Optional[int],
        project_code: Optional[int],
        grace_period_minutes,
        is_active: bool,
    ) -> TimeSchedule:
        entry_time = parse_clock_time(entry_time)
        exit_time = parse_clock_time(exit_time)

        try:
            hours = float(required_hours)
        except (TypeError, ValueError):
            raise ValidationError(error_message("must_be_number"))
        if not 0 < hours <= 24:
            raise ValidationError("عدد الساعات المطلوبة يجب أن يكون بين 0 و 24")

        try:
            grace = int(DEFAULT_GRACE_MINUTES if grace_period_minutes is None else grace_period_minutes)
        except (TypeError, ValueError):
            raise ValidationError(error_message("must_be_number"))
        if grace < 0:
            raise ValidationError("فترة السماح لا يمكن أن تكون سالبة")

        name = (schedule_name or "").strip() or generate_schedule_name(dept_code, project_code)
        return TimeSchedule(
            schedule_id=schedule_id,
            schedule_name=name,
            entry_time=entry_time,
            exit_time=exit_time,
            required_hours=hours,
            dept_code=dept_code,
            project_code=project_code,
            grace_period_minutes=grace,
            is_active=bool(is_active),
        )

    def list_schedules(self, *, active_only: bool = False) -> Sequence[TimeSchedule]:
        return self._schedules.list_all(active_only=active_only)

    def schedule_for(self, *, project_code: Optional[int], dept_code: Optional[int]) -> TimeSchedule:
        return get_employee_schedule(project_code, dept_code, self._schedules.list_all(active_only=True))

    def create(
        self,
        *,
        current_role: Role,
        entry_time: str,
        exit_time: str,
        required_hours,
        schedule_name: Optional[str] = None,
        dept_code: Optional[int] = None,
        project_code: Optional[int] = None,
        grace_period_minutes=None,
        is_active: bool = True,
    ) -> int:
        self._require_manager(current_role)
        schedule = self._build(
            schedule_id=None,
            schedule_name=schedule_name,
            entry_time=entry_time,
            exit_time=exit_time,
            required_hours=required_hours,
            dept_code=dept_code,
            project_code=project_code,
            grace_period_minutes=grace_period_minutes,
            is_active=is_active,
        )
        schedule_id = self._schedules.create(schedule)
        logger.info("Time schedule %s created: %s", schedule_id, schedule.schedule_name)
        return schedule_id

    def update(
        self,
        *,
        current_role: Role,
        schedule_id: int,
        entry_time: str,
        exit_time: str,
        required_hours,
        schedule_name: Optional[str] = None,
        dept_code: Optional[int] = None,
        project_code: Optional[int] = None,
        grace_period_minutes=None,
        is_active: bool = True,
    ) -> None:
        self._require_manager(current_role)
        if not self._schedules.get_by_id(int(schedule_id)):
            raise NotFoundError("الجدول الزمني غير موجود")

        schedule = self._build(
            schedule_id=int(schedule_id),
            schedule_name=schedule_name,
            entry_time=entry_time,
            exit_time=exit_time,
            required_hours=required_hours,
            dept_code=dept_code,
            project_code=project_code,
            grace_period_minutes=grace_period_minutes,
            is_active=is_active,
        )
        if not self._schedules.update(schedule):
            raise ValidationError("فشل تحديث الجدول الزمني")

    def delete(self, *, current_role: Role, schedule_id: int) -> None:
        self._require_manager(current_role)
        if not self._schedules.delete(int(schedule_id)):
            raise NotFoundError("الجدول الزمني غير موجود")
        logger.info("Time schedule %s deleted", schedule_id)
