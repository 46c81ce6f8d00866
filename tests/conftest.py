from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from hr_attendance.attendance.model import AttendanceTransaction
from hr_attendance.container import wire_container
from hr_attendance.core.enums import RequestKind, TransactionStatus
from hr_attendance.holidays.model import Holiday, HolidayType
from hr_attendance.permissions.filters import Viewer
from hr_attendance.permissions.matrix import Role
from hr_attendance.projects.model import Project
from hr_attendance.requests.model import AllowanceRequest, LeaveRequest, LoanRequest, ManualAttendanceRequest
from hr_attendance.schedules.model import TimeSchedule
from hr_attendance.users.model import Employee

PASSWORD = "secret123"
PASSWORD_HASH = generate_password_hash(PASSWORD)

# Riyadh site used by project 101
SITE_LAT = 24.7136
SITE_LON = 46.6753


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self._by_no = {e.employee_no: e for e in employees}

    def get_by_no(self, employee_no: int) -> Optional[Employee]:
        return self._by_no.get(int(employee_no))

    def get_by_username(self, username: str) -> Optional[Employee]:
        for e in self._by_no.values():
            if e.username == username:
                return e
        return None

    def list_all(self, *, active_only: bool = True):
        rows = sorted(self._by_no.values(), key=lambda e: e.employee_no)
        return [e for e in rows if e.is_active or not active_only]


class InMemoryProjects:
    def __init__(self, projects: list[Project]):
        self._by_code = {p.project_code: p for p in projects}

    def get_by_code(self, project_code: int) -> Optional[Project]:
        return self._by_code.get(int(project_code))

    def list_active(self):
        return [p for p in self._by_code.values() if p.is_active]


class InMemorySchedules:
    def __init__(self, schedules: list[TimeSchedule]):
        self._rows = {s.schedule_id: s for s in schedules}
        self._next_id = max(self._rows, default=0) + 1

    def list_all(self, *, active_only: bool = False):
        return [s for s in self._rows.values() if s.is_active or not active_only]

    def get_by_id(self, schedule_id: int):
        return self._rows.get(int(schedule_id))

    def create(self, schedule: TimeSchedule) -> int:
        sid = self._next_id
        self._next_id += 1
        self._rows[sid] = replace(schedule, schedule_id=sid)
        return sid

    def update(self, schedule: TimeSchedule) -> bool:
        if schedule.schedule_id not in self._rows:
            return False
        self._rows[schedule.schedule_id] = schedule
        return True

    def delete(self, schedule_id: int) -> bool:
        return self._rows.pop(int(schedule_id), None) is not None


class InMemoryHolidays:
    def __init__(self, holidays: list[Holiday]):
        self._rows = {h.ser_no: h for h in holidays}
        self._next_id = max(self._rows, default=0) + 1

    def list_all(self, *, year: Optional[int] = None):
        return [h for h in self._rows.values() if year is None or h.greg_year == year]

    def list_between(self, *, start: date, end: date):
        return [h for h in self._rows.values() if h.from_date <= end and h.to_date >= start]

    def get_by_id(self, ser_no: int):
        return self._rows.get(int(ser_no))

    def create(self, *, holiday_type, greg_year, hijri_year, from_date, to_date, holiday_name=None) -> int:
        ser_no = self._next_id
        self._next_id += 1
        self._rows[ser_no] = Holiday(
            ser_no=ser_no,
            holiday_type=holiday_type,
            greg_year=greg_year,
            hijri_year=hijri_year,
            from_date=from_date,
            to_date=to_date,
            holiday_name=holiday_name,
        )
        return ser_no

    def update(self, holiday: Holiday) -> bool:
        if holiday.ser_no not in self._rows:
            return False
        self._rows[holiday.ser_no] = holiday
        return True

    def delete(self, ser_no: int) -> bool:
        return self._rows.pop(int(ser_no), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self._rows: dict[int, AttendanceTransaction] = {}
        self._next_id = 1

    def add(self, transaction: AttendanceTransaction) -> AttendanceTransaction:
        self._rows[transaction.transaction_id] = transaction
        self._next_id = max(self._next_id, transaction.transaction_id + 1)
        return transaction

    def get_by_id(self, transaction_id: int):
        return self._rows.get(int(transaction_id))

    def get_for_employee_and_date(self, employee_no: int, attendance_date: date):
        for t in self._rows.values():
            if t.employee_no == employee_no and t.attendance_date == attendance_date:
                return t
        return None

    def list_for_employee(self, employee_no: int, *, limit: int):
        rows = [t for t in self._rows.values() if t.employee_no == employee_no]
        rows.sort(key=lambda t: t.attendance_date, reverse=True)
        return rows[:limit]

    def list_range(self, *, start, end, employee_no=None, project_code=None):
        rows = [
            t
            for t in self._rows.values()
            if start <= t.attendance_date <= end
            and (employee_no is None or t.employee_no == employee_no)
            and (project_code is None or t.project_code == project_code)
        ]
        return sorted(rows, key=lambda t: (t.attendance_date, t.employee_no))

    def list_open_before(self, day: date):
        return [t for t in self._rows.values() if t.exit_time is None and t.attendance_date < day]

    def create_checkin(
        self,
        *,
        employee_no,
        attendance_date,
        entry_time,
        project_code,
        latitude,
        longitude,
        distance_meters,
        scheduled_hours,
        is_holiday_work,
        is_weekend_work,
        notes=None,
    ) -> int:
        tid = self._next_id
        self._next_id += 1
        self._rows[tid] = AttendanceTransaction(
            transaction_id=tid,
            employee_no=employee_no,
            attendance_date=attendance_date,
            entry_time=entry_time,
            project_code=project_code,
            entry_latitude=latitude,
            entry_longitude=longitude,
            entry_distance_meters=distance_meters,
            scheduled_hours=scheduled_hours,
            is_holiday_work=is_holiday_work,
            is_weekend_work=is_weekend_work,
            notes=notes,
        )
        return tid

    def complete_checkout(
        self,
        *,
        transaction_id,
        exit_time,
        latitude,
        longitude,
        distance_meters,
        calculation,
        is_auto_checkout=False,
        notes=None,
    ) -> bool:
        row = self._rows.get(int(transaction_id))
        if not row or row.exit_time is not None:
            return False
        self._rows[row.transaction_id] = replace(
            row,
            exit_time=exit_time,
            exit_latitude=latitude,
            exit_longitude=longitude,
            exit_distance_meters=distance_meters,
            working_hours=calculation.working_hours,
            overtime_hours=calculation.overtime_hours,
            late_minutes=calculation.late_minutes,
            early_minutes=calculation.early_minutes,
            is_auto_checkout=is_auto_checkout,
            notes=notes or row.notes,
        )
        return True

    def save_manual(
        self,
        *,
        employee_no,
        attendance_date,
        entry_time,
        exit_time,
        project_code,
        scheduled_hours,
        calculation,
        is_holiday_work,
        is_weekend_work,
        notes=None,
    ) -> int:
        existing = self.get_for_employee_and_date(employee_no, attendance_date)
        tid = existing.transaction_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self._rows[tid] = AttendanceTransaction(
            transaction_id=tid,
            employee_no=employee_no,
            attendance_date=attendance_date,
            entry_time=entry_time,
            exit_time=exit_time,
            project_code=project_code,
            scheduled_hours=scheduled_hours,
            working_hours=calculation.working_hours if calculation else None,
            overtime_hours=calculation.overtime_hours if calculation else None,
            late_minutes=calculation.late_minutes if calculation else 0,
            early_minutes=calculation.early_minutes if calculation else 0,
            is_holiday_work=is_holiday_work,
            is_weekend_work=is_weekend_work,
            is_manual_entry=True,
            notes=notes,
        )
        return tid


class InMemoryRequests:
    def __init__(self):
        self._rows: dict[RequestKind, dict[int, object]] = {kind: {} for kind in RequestKind}
        self._next_id = 1

    def _store(self, kind: RequestKind, build) -> int:
        rid = self._next_id
        self._next_id += 1
        self._rows[kind][rid] = build(rid)
        return rid

    def create_leave(self, *, employee_no, from_date, to_date, leave_days, reason, request_date) -> int:
        return self._store(
            RequestKind.LEAVE,
            lambda rid: LeaveRequest(
                request_id=rid,
                employee_no=employee_no,
                from_date=from_date,
                to_date=to_date,
                leave_days=leave_days,
                reason=reason,
                status=TransactionStatus.NEW,
                request_date=request_date,
            ),
        )

    def create_loan(self, *, employee_no, loan_amount, no_of_installments, first_installment_date, installment_amount, request_date) -> int:
        return self._store(
            RequestKind.LOAN,
            lambda rid: LoanRequest(
                request_id=rid,
                employee_no=employee_no,
                loan_amount=loan_amount,
                no_of_installments=no_of_installments,
                first_installment_date=first_installment_date,
                installment_amount=installment_amount,
                status=TransactionStatus.NEW,
                request_date=request_date,
            ),
        )

    def create_allowance(self, *, employee_no, adjustment_type, trans_type_code, amount, trans_date, notes, request_date) -> int:
        return self._store(
            RequestKind.ALLOWANCE,
            lambda rid: AllowanceRequest(
                request_id=rid,
                employee_no=employee_no,
                adjustment_type=adjustment_type,
                trans_type_code=trans_type_code,
                amount=amount,
                trans_date=trans_date,
                status=TransactionStatus.NEW,
                request_date=request_date,
                notes=notes,
            ),
        )

    def create_manual_attendance(self, *, employee_no, attendance_date, entry_time, exit_time, project_code, reason, request_date) -> int:
        return self._store(
            RequestKind.MANUAL_ATTENDANCE,
            lambda rid: ManualAttendanceRequest(
                request_id=rid,
                employee_no=employee_no,
                attendance_date=attendance_date,
                entry_time=entry_time,
                exit_time=exit_time,
                reason=reason,
                status=TransactionStatus.NEW,
                request_date=request_date,
                project_code=project_code,
            ),
        )

    def get(self, kind: RequestKind, request_id: int):
        return self._rows[kind].get(int(request_id))

    def list_requests(self, kind, *, status=None, employee_no=None, limit=200):
        rows = [
            r
            for r in self._rows[kind].values()
            if (status is None or r.status == status) and (employee_no is None or r.employee_no == employee_no)
        ]
        return rows[:limit]

    def decide(self, kind, *, request_id, status, decided_by, decided_at, note=None) -> bool:
        req = self._rows[kind].get(int(request_id))
        if not req or req.status != TransactionStatus.NEW:
            return False
        self._rows[kind][req.request_id] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=decided_at,
            decision_note=note,
        )
        return True


def _employee(no, username, role, dept, project, salary=6000.0, active=True) -> Employee:
    return Employee(
        employee_no=no,
        full_name=f"موظف {no}",
        username=username,
        password_hash=PASSWORD_HASH,
        role=role,
        dept_code=dept,
        project_code=project,
        monthly_salary=salary,
        is_active=active,
    )


EMPLOYEES = [
    _employee(1, "admin", Role.ADMIN, 1, None, 15000.0),
    _employee(2, "hr", Role.HR_MANAGER, 1, None, 12000.0),
    _employee(3, "pm", Role.PROJECT_MANAGER, 2, 101, 13000.0),
    _employee(4, "employee", Role.EMPLOYEE, 2, 101),
    _employee(5, "remote", Role.EMPLOYEE, 2, 102),
    _employee(6, "former", Role.EMPLOYEE, 2, 101, active=False),
    _employee(7, "secretary", Role.PROJECT_SECRETARY, 2, 101),
    _employee(8, "finance", Role.FINANCE_MANAGER, 1, None, 12000.0),
    _employee(9, "night", Role.EMPLOYEE, 2, 104),
    _employee(10, "store", Role.WAREHOUSE_MANAGER, 1, None),
    _employee(11, "closed", Role.EMPLOYEE, 2, 103),
]

PROJECTS = [
    Project(101, "مشروع الرياض", "Riyadh Tower", latitude=SITE_LAT, longitude=SITE_LON, radius_meters=200),
    Project(102, "مشروع بدون موقع", "No Site"),
    Project(103, "مشروع مغلق", "Closed", latitude=SITE_LAT, longitude=SITE_LON, is_active=False),
    Project(104, "مشروع ليلي", "Night Works", latitude=SITE_LAT, longitude=SITE_LON, radius_meters=300),
]

SCHEDULES = [
    TimeSchedule(1, "Department 2 - Default Schedule", "08:00", "17:00", 8, dept_code=2),
    TimeSchedule(2, "Project 101 - Default Schedule", "07:00", "16:00", 8, project_code=101),
    TimeSchedule(3, "Project 104 - Night Shift", "22:00", "06:00", 8, project_code=104),
]

HOLIDAYS = [
    Holiday(1, HolidayType.NATIONAL, 2026, 1448, date(2026, 9, 23), date(2026, 9, 24)),
    Holiday(2, HolidayType.FOUNDATION, 2026, 1447, date(2026, 2, 22), date(2026, 2, 22), "يوم التأسيس السعودي"),
]


@pytest.fixture()
def repos():
    return {
        "employees_repo": InMemoryEmployees(EMPLOYEES),
        "projects_repo": InMemoryProjects(PROJECTS),
        "schedules_repo": InMemorySchedules(SCHEDULES),
        "holidays_repo": InMemoryHolidays(HOLIDAYS),
        "attendance_repo": InMemoryAttendance(),
        "requests_repo": InMemoryRequests(),
    }


@pytest.fixture()
def container(repos):
    return wire_container(**repos)


@pytest.fixture()
def viewer_for():
    by_no = {e.employee_no: e for e in EMPLOYEES}

    def _viewer(employee_no: int) -> Viewer:
        e = by_no[employee_no]
        return Viewer(employee_no=e.employee_no, role=e.role, dept_code=e.dept_code, project_code=e.project_code)

    return _viewer


@pytest.fixture()
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from hr_attendance.main import create_app

    return create_app(container)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login_as(client):
    by_no = {e.employee_no: e for e in EMPLOYEES}

    def _login(employee_no: int):
        e = by_no[employee_no]
        with client.session_transaction() as sess:
            sess["employee_no"] = e.employee_no
            sess["name"] = e.full_name
            sess["role"] = e.role.value
            sess["dept_code"] = e.dept_code
            sess["project_code"] = e.project_code
        return client

    return _login


@pytest.fixture()
def fixed_now(monkeypatch):
    """Pin the service clock to ``value`` (defaults to Wednesday 2026-10-14 07:10)."""

    def _pin(value: datetime = datetime(2026, 10, 14, 7, 10)):
        monkeypatch.setattr("hr_attendance.attendance.service.now_local", lambda: value)
        monkeypatch.setattr("hr_attendance.requests.service.now_local", lambda: value)
        monkeypatch.setattr("hr_attendance.attendance.controller.now_local", lambda: value)
        return value

    return _pin
