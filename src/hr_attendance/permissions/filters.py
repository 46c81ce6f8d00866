"""Role-based view filtering for lists shown in the dashboard.

Each filter receives the records already loaded for a screen and narrows
them to what the viewer's role may see:

- Employee: only their own records.
- Project Manager: records of their project.
- HR Manager: employees of their department (all when no department).
- Everyone else with access: everything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, TypeVar

from .matrix import Role

T = TypeVar("T")


@dataclass(frozen=True)
class Viewer:
    """The authenticated user a list is being rendered for."""

    employee_no: int
    role: Role
    dept_code: Optional[int] = None
    project_code: Optional[int] = None


def _own(items: Iterable[T], viewer: Viewer) -> list[T]:
    return [i for i in items if getattr(i, "employee_no", None) == viewer.employee_no]


def filter_employees_by_role(employees: Iterable[T], viewer: Optional[Viewer]) -> list[T]:
    if viewer is None:
        return []
    if viewer.role == Role.EMPLOYEE:
        return _own(employees, viewer)
    if viewer.role == Role.PROJECT_MANAGER:
        if not viewer.project_code:
            return []
        return [e for e in employees if getattr(e, "project_code", None) == viewer.project_code]
    if viewer.role == Role.HR_MANAGER and viewer.dept_code:
        return [e for e in employees if getattr(e, "dept_code", None) == viewer.dept_code]
    return list(employees)


def filter_attendance_by_role(transactions: Iterable[T], viewer: Optional[Viewer]) -> list[T]:
    if viewer is None:
        return []
    if viewer.role == Role.EMPLOYEE:
        return _own(transactions, viewer)
    if viewer.role == Role.PROJECT_MANAGER:
        if not viewer.project_code:
            return []
        return [t for t in transactions if getattr(t, "project_code", None) == viewer.project_code]
    return list(transactions)


def filter_requests_by_role(requests: Iterable[T], viewer: Optional[Viewer]) -> list[T]:
    """Leave, loan, allowance and manual attendance requests."""
    if viewer is None:
        return []
    if viewer.role == Role.EMPLOYEE:
        return _own(requests, viewer)
    return list(requests)
