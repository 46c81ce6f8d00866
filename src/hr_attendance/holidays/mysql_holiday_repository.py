from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday, HolidayType
from .repository import HolidayRepository

_COLUMNS = "ser_no, holiday_type, greg_year, hijri_year, from_date, to_date, holiday_name"


def _row_to_holiday(r: dict) -> Holiday:
    return Holiday(
        ser_no=int(r["ser_no"]),
        holiday_type=HolidayType(r["holiday_type"]),
        greg_year=int(r["greg_year"]),
        hijri_year=int(r["hijri_year"]),
        from_date=r["from_date"],
        to_date=r["to_date"],
        holiday_name=r.get("holiday_name"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, year: Optional[int] = None) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            if year is None:
                cur.execute(f"SELECT {_COLUMNS} FROM holidays ORDER BY from_date")
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE greg_year=%s ORDER BY from_date", (int(year),))
            return [_row_to_holiday(r) for r in fetchall(cur)]

    def list_between(self, *, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM holidays
                WHERE from_date <= %s AND to_date >= %s
                ORDER BY from_date
                """,
                (end, start),
            )
            return [_row_to_holiday(r) for r in fetchall(cur)]

    def get_by_id(self, ser_no: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE ser_no=%s", (int(ser_no),))
            r = fetchone(cur)
            return _row_to_holiday(r) if r else None

    def create(
        self,
        *,
        holiday_type: HolidayType,
        greg_year: int,
        hijri_year: int,
        from_date: date,
        to_date: date,
        holiday_name: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(holiday_type, greg_year, hijri_year, from_date, to_date, holiday_name)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (holiday_type.value, int(greg_year), int(hijri_year), from_date, to_date, holiday_name),
            )
            return int(cur.lastrowid)

    def update(self, holiday: Holiday) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE holidays
                SET holiday_type=%s, greg_year=%s, hijri_year=%s, from_date=%s, to_date=%s, holiday_name=%s
                WHERE ser_no=%s
                """,
                (
                    holiday.holiday_type.value,
                    holiday.greg_year,
                    holiday.hijri_year,
                    holiday.from_date,
                    holiday.to_date,
                    holiday.holiday_name,
                    holiday.ser_no,
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM holidays WHERE ser_no=%s", (holiday.ser_no,))
            return fetchone(cur) is not None

    def delete(self, ser_no: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE ser_no=%s", (int(ser_no),))
            return cur.rowcount > 0
