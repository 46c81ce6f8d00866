from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceTransaction


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_minutes(self, row: AttendanceTransaction) -> int:
        raise NotImplementedError

    @abstractmethod
    def overtime_amount(self, row: AttendanceTransaction, monthly_salary: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def deduction_amount(self, row: AttendanceTransaction, monthly_salary: float) -> float:
        raise NotImplementedError
