from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_yn, yn
from .calculations import AttendanceCalculation
from .model import AttendanceTransaction
from .repository import AttendanceRepository

_COLUMNS = """
    transaction_id, employee_no, attendance_date, project_code,
    entry_time, entry_latitude, entry_longitude, entry_distance_meters,
    exit_time, exit_latitude, exit_longitude, exit_distance_meters,
    scheduled_hours, working_hours, overtime_calc, delayed_calc, early_out_calc,
    is_holiday_work, is_weekend_work, is_manual_entry, is_auto_checkout, notes
"""


def _float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _row_to_transaction(r: dict) -> AttendanceTransaction:
    return AttendanceTransaction(
        transaction_id=int(r["transaction_id"]),
        employee_no=int(r["employee_no"]),
        attendance_date=r["attendance_date"],
        entry_time=r["entry_time"],
        exit_time=r.get("exit_time"),
        project_code=r.get("project_code"),
        entry_latitude=_float(r.get("entry_latitude")),
        entry_longitude=_float(r.get("entry_longitude")),
        entry_distance_meters=_float(r.get("entry_distance_meters")),
        exit_latitude=_float(r.get("exit_latitude")),
        exit_longitude=_float(r.get("exit_longitude")),
        exit_distance_meters=_float(r.get("exit_distance_meters")),
        scheduled_hours=_float(r.get("scheduled_hours")),
        working_hours=r.get("working_hours"),
        overtime_hours=r.get("overtime_calc"),
        late_minutes=int(r.get("delayed_calc") or 0),
        early_minutes=int(r.get("early_out_calc") or 0),
        is_holiday_work=yn(r.get("is_holiday_work")),
        is_weekend_work=yn(r.get("is_weekend_work")),
        is_manual_entry=yn(r.get("is_manual_entry")),
        is_auto_checkout=yn(r.get("is_auto_checkout")),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, transaction_id: int) -> Optional[AttendanceTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_transactions WHERE transaction_id=%s",
                (int(transaction_id),),
            )
            r = fetchone(cur)
            return _row_to_transaction(r) if r else None

    def get_for_employee_and_date(self, employee_no: int, attendance_date: date) -> Optional[AttendanceTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_transactions
                WHERE employee_no=%s AND attendance_date=%s
                """,
                (int(employee_no), attendance_date),
            )
            r = fetchone(cur)
            return _row_to_transaction(r) if r else None

    def list_for_employee(self, employee_no: int, *, limit: int) -> Sequence[AttendanceTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_transactions
                WHERE employee_no=%s
                ORDER BY attendance_date DESC
                LIMIT %s
                """,
                (int(employee_no), int(limit)),
            )
            return [_row_to_transaction(r) for r in fetchall(cur)]

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_no: Optional[int] = None,
        project_code: Optional[int] = None,
    ) -> Sequence[AttendanceTransaction]:
        clauses = ["attendance_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_no is not None:
            clauses.append("employee_no=%s")
            params.append(int(employee_no))
        if project_code is not None:
            clauses.append("project_code=%s")
            params.append(int(project_code))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_transactions
                WHERE {where}
                ORDER BY attendance_date ASC, employee_no ASC
                """,
                tuple(params),
            )
            return [_row_to_transaction(r) for r in fetchall(cur)]

    def list_open_before(self, day: date) -> Sequence[AttendanceTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_transactions
                WHERE exit_time IS NULL AND attendance_date < %s
                ORDER BY attendance_date ASC
                """,
                (day,),
            )
            return [_row_to_transaction(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_transactions(
                    employee_no, attendance_date, project_code, entry_time,
                    entry_latitude, entry_longitude, entry_distance_meters,
                    scheduled_hours, is_holiday_work, is_weekend_work, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_no),
                    attendance_date,
                    project_code,
                    entry_time,
                    latitude,
                    longitude,
                    distance_meters,
                    scheduled_hours,
                    to_yn(is_holiday_work),
                    to_yn(is_weekend_work),
                    notes,
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_transactions
                SET exit_time=%s, exit_latitude=%s, exit_longitude=%s, exit_distance_meters=%s,
                    working_hours=%s, overtime_calc=%s, delayed_calc=%s, early_out_calc=%s,
                    is_auto_checkout=%s, notes=COALESCE(%s, notes)
                WHERE transaction_id=%s AND exit_time IS NULL
                """,
                (
                    exit_time,
                    latitude,
                    longitude,
                    distance_meters,
                    calculation.working_hours,
                    calculation.overtime_hours,
                    calculation.late_minutes,
                    calculation.early_minutes,
                    to_yn(is_auto_checkout),
                    notes,
                    int(transaction_id),
                ),
            )
            return cur.rowcount > 0

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
        calc = calculation
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_transactions(
                    employee_no, attendance_date, project_code, entry_time, exit_time,
                    scheduled_hours, working_hours, overtime_calc, delayed_calc, early_out_calc,
                    is_holiday_work, is_weekend_work, is_manual_entry, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,'Y',%s)
                ON DUPLICATE KEY UPDATE
                    project_code=VALUES(project_code), entry_time=VALUES(entry_time), exit_time=VALUES(exit_time),
                    scheduled_hours=VALUES(scheduled_hours), working_hours=VALUES(working_hours),
                    overtime_calc=VALUES(overtime_calc), delayed_calc=VALUES(delayed_calc),
                    early_out_calc=VALUES(early_out_calc), is_holiday_work=VALUES(is_holiday_work),
                    is_weekend_work=VALUES(is_weekend_work), is_manual_entry='Y', notes=VALUES(notes)
                """,
                (
                    int(employee_no),
                    attendance_date,
                    project_code,
                    entry_time,
                    exit_time,
                    scheduled_hours,
                    calc.working_hours if calc else None,
                    calc.overtime_hours if calc else None,
                    calc.late_minutes if calc else 0,
                    calc.early_minutes if calc else 0,
                    to_yn(is_holiday_work),
                    to_yn(is_weekend_work),
                    notes,
                ),
            )

            # If it was an update, lastrowid can be 0; fetch transaction_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT transaction_id FROM attendance_transactions WHERE employee_no=%s AND attendance_date=%s",
                (int(employee_no), attendance_date),
            )
            r = fetchone(cur)
            return int(r["transaction_id"]) if r else 0
