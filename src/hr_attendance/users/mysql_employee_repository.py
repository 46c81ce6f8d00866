from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, yn
from ..permissions.matrix import normalize_role
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_no, full_name, username, password_hash, role,
    dept_code, project_code, monthly_salary, is_active
"""


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        employee_no=int(row["employee_no"]),
        full_name=row["full_name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=normalize_role(row["role"]),
        dept_code=row.get("dept_code"),
        project_code=row.get("project_code"),
        monthly_salary=float(row.get("monthly_salary") or 0),
        is_active=yn(row.get("is_active", "Y")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_no(self, employee_no: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_no=%s", (int(employee_no),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_username(self, username: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE username=%s", (username,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_all(self, *, active_only: bool = True) -> Sequence[Employee]:
        where = "WHERE is_active='Y'" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY employee_no")
            return [_row_to_employee(r) for r in fetchall(cur)]
