from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, mysql_time_to_hhmm, to_yn, yn
from .model import TimeSchedule
from .repository import ScheduleRepository

_COLUMNS = """
    schedule_id, schedule_name, dept_code, project_code,
    scheduled_start_time, scheduled_end_time, required_hours,
    grace_period_minutes, is_active
"""


def _row_to_schedule(r: dict) -> TimeSchedule:
    return TimeSchedule(
        schedule_id=int(r["schedule_id"]),
        schedule_name=r["schedule_name"],
        entry_time=mysql_time_to_hhmm(r["scheduled_start_time"]),
        exit_time=mysql_time_to_hhmm(r["scheduled_end_time"]),
        required_hours=float(r["required_hours"]),
        dept_code=int(r["dept_code"]) if r.get("dept_code") is not None else None,
        project_code=int(r["project_code"]) if r.get("project_code") is not None else None,
        grace_period_minutes=int(r.get("grace_period_minutes") or 0),
        is_active=yn(r.get("is_active")),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, active_only: bool = False) -> Sequence[TimeSchedule]:
        where = "WHERE is_active='Y'" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_schedules {where} ORDER BY schedule_id")
            return [_row_to_schedule(r) for r in fetchall(cur)]

    def get_by_id(self, schedule_id: int) -> Optional[TimeSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_schedules WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _row_to_schedule(r) if r else None

    def create(self, schedule: TimeSchedule) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_schedules(
                    schedule_name, dept_code, project_code, scheduled_start_time,
                    scheduled_end_time, required_hours, grace_period_minutes, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    schedule.schedule_name,
                    schedule.dept_code,
                    schedule.project_code,
                    schedule.entry_time,
                    schedule.exit_time,
                    schedule.required_hours,
                    schedule.grace_period_minutes,
                    to_yn(schedule.is_active),
                ),
            )
            return int(cur.lastrowid)

    def update(self, schedule: TimeSchedule) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_schedules
                SET schedule_name=%s, dept_code=%s, project_code=%s, scheduled_start_time=%s,
                    scheduled_end_time=%s, required_hours=%s, grace_period_minutes=%s, is_active=%s
                WHERE schedule_id=%s
                """,
                (
                    schedule.schedule_name,
                    schedule.dept_code,
                    schedule.project_code,
                    schedule.entry_time,
                    schedule.exit_time,
                    schedule.required_hours,
                    schedule.grace_period_minutes,
                    to_yn(schedule.is_active),
                    int(schedule.schedule_id),
                ),
            )
            # MySQL reports 0 rows for an update that changes nothing.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM time_schedules WHERE schedule_id=%s", (int(schedule.schedule_id),))
            return fetchone(cur) is not None

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0
