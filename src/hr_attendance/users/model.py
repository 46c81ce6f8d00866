from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..permissions.matrix import Role


@dataclass(frozen=True)
class Employee:
    """Employee record, which is also the login account."""

    employee_no: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    dept_code: Optional[int] = None
    project_code: Optional[int] = None
    monthly_salary: float = 0.0
    is_active: bool = True
