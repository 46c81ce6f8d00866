from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..core.enums import AdjustmentType, RequestKind, TransactionStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_no: int
    from_date: date
    to_date: date
    leave_days: int
    reason: str
    status: TransactionStatus
    request_date: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_note: Optional[str] = None

    kind = RequestKind.LEAVE


@dataclass(frozen=True)
class LoanInstallment:
    installment_no: int
    due_date: date
    amount: Decimal


@dataclass(frozen=True)
class LoanRequest:
    request_id: int
    employee_no: int
    loan_amount: Decimal
    no_of_installments: int
    first_installment_date: date
    installment_amount: Decimal
    status: TransactionStatus
    request_date: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_note: Optional[str] = None

    kind = RequestKind.LOAN

    @property
    def installments(self) -> list[LoanInstallment]:
        return build_installment_schedule(self.loan_amount, self.no_of_installments, self.first_installment_date)


@dataclass(frozen=True)
class AllowanceRequest:
    """Payroll adjustment: an allowance or a deduction."""

    request_id: int
    employee_no: int
    adjustment_type: AdjustmentType
    trans_type_code: int
    amount: Decimal
    trans_date: date
    status: TransactionStatus
    request_date: datetime
    notes: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_note: Optional[str] = None

    kind = RequestKind.ALLOWANCE


@dataclass(frozen=True)
class ManualAttendanceRequest:
    """A forgotten punch, entered by hand and applied once approved."""

    request_id: int
    employee_no: int
    attendance_date: date
    entry_time: str
    exit_time: Optional[str]
    reason: str
    status: TransactionStatus
    request_date: datetime
    project_code: Optional[int] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_note: Optional[str] = None

    kind = RequestKind.MANUAL_ATTENDANCE


AnyRequest = Union[LeaveRequest, LoanRequest, AllowanceRequest, ManualAttendanceRequest]

_CENT = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def add_months(day: date, months: int) -> date:
    """Same day-of-month ``months`` later, clamped to the month's last day."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def installment_amount(loan_amount, no_of_installments: int) -> Decimal:
    # Rounded down so the final installment never goes negative.
    share = Decimal(str(loan_amount)) / int(no_of_installments)
    return share.quantize(_CENT, rounding=ROUND_DOWN)


def build_installment_schedule(loan_amount, no_of_installments: int, first_installment_date: date) -> list[LoanInstallment]:
    """Monthly installments; the last one absorbs the remainder left by rounding down."""
    total = money(loan_amount)
    count = int(no_of_installments)
    regular = installment_amount(total, count)

    schedule: list[LoanInstallment] = []
    for i in range(count):
        amount = regular if i < count - 1 else total - regular * (count - 1)
        schedule.append(
            LoanInstallment(
                installment_no=i + 1,
                due_date=add_months(first_installment_date, i),
                amount=amount,
            )
        )
    return schedule
