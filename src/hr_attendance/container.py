from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_WEEKEND_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .payroll.service import PayrollReportService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    projects_repo: ProjectRepository
    schedules_repo: ScheduleRepository
    holidays_repo: HolidayRepository
    attendance_repo: AttendanceRepository
    requests_repo: RequestRepository

    auth_service: AuthService
    employee_service: EmployeeService
    schedule_service: ScheduleService
    holiday_service: HolidayService
    attendance_service: AttendanceService
    request_service: RequestService
    payroll_report_service: PayrollReportService


def wire_container(
    *,
    employees_repo: EmployeeRepository,
    projects_repo: ProjectRepository,
    schedules_repo: ScheduleRepository,
    holidays_repo: HolidayRepository,
    attendance_repo: AttendanceRepository,
    requests_repo: RequestRepository,
    conn: Optional[DatabaseConnection] = None,
    grace_minutes: Optional[int] = None,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
) -> Container:
    """Build the services on top of any repository implementations (MySQL or in-memory)."""

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        projects_repo,
        schedules_repo,
        holidays_repo,
        grace_minutes=grace_minutes,
        weekend_days=weekend_days,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        projects_repo=projects_repo,
        schedules_repo=schedules_repo,
        holidays_repo=holidays_repo,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(employees_repo),
        schedule_service=ScheduleService(schedules_repo),
        holiday_service=HolidayService(holidays_repo),
        attendance_service=attendance_service,
        request_service=RequestService(requests_repo, attendance_service),
        payroll_report_service=PayrollReportService(attendance_repo, employees_repo),
    )


def build_container(
    *,
    db_config: dict,
    grace_minutes: Optional[int] = None,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        grace_minutes=grace_minutes,
        weekend_days=weekend_days,
    )
