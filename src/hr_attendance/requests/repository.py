from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AdjustmentType, RequestKind, TransactionStatus
from .model import AnyRequest


class RequestRepository(Protocol):
    def create_leave(
        self,
        *,
        employee_no: int,
        from_date: date,
        to_date: date,
        leave_days: int,
        reason: str,
        request_date: datetime,
    ) -> int:
        raise NotImplementedError

    def create_loan(
        self,
        *,
        employee_no: int,
        loan_amount: Decimal,
        no_of_installments: int,
        first_installment_date: date,
        installment_amount: Decimal,
        request_date: datetime,
    ) -> int:
        raise NotImplementedError

    def create_allowance(
        self,
        *,
        employee_no: int,
        adjustment_type: AdjustmentType,
        trans_type_code: int,
        amount: Decimal,
        trans_date: date,
        notes: Optional[str],
        request_date: datetime,
    ) -> int:
        raise NotImplementedError

    def create_manual_attendance(
        self,
        *,
        employee_no: int,
        attendance_date: date,
        entry_time: str,
        exit_time: Optional[str],
        project_code: Optional[int],
        reason: str,
        request_date: datetime,
    ) -> int:
        raise NotImplementedError

    def get(self, kind: RequestKind, request_id: int) -> Optional[AnyRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        kind: RequestKind,
        *,
        status: Optional[TransactionStatus] = None,
        employee_no: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[AnyRequest]:
        raise NotImplementedError

    def decide(
        self,
        kind: RequestKind,
        *,
        request_id: int,
        status: TransactionStatus,
        decided_by: int,
        decided_at: datetime,
        note: Optional[str] = None,
    ) -> bool:
        """Move a request out of NEW. Returns False when it was not NEW."""

        raise NotImplementedError
