from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from ..core.messages import error_message
from ..permissions.filters import Viewer, filter_employees_by_role
from ..permissions.matrix import Role
from .model import Employee
from .repository import EmployeeRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    employee_no: int
    full_name: str
    role: Role
    dept_code: Optional[int]
    project_code: Optional[int]

    def to_session(self) -> dict:
        return {
            "employee_no": self.employee_no,
            "name": self.full_name,
            "role": self.role.value,
            "dept_code": self.dept_code,
            "project_code": self.project_code,
        }


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = require_non_empty(username, "اسم المستخدم")
        employee = self._employees.get_by_username(username)
        if not employee or not employee.is_active:
            raise AuthenticationError(error_message("invalid_credentials"))

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            raise AuthenticationError(error_message("invalid_credentials"))

        return SessionUser(
            employee_no=employee.employee_no,
            full_name=employee.full_name,
            role=employee.role,
            dept_code=employee.dept_code,
            project_code=employee.project_code,
        )


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_for(self, viewer: Viewer) -> Sequence[Employee]:
        return filter_employees_by_role(self._employees.list_all(), viewer)
