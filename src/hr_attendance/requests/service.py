from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..attendance.calculations import parse_clock_time
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.validators import require_int, require_non_empty
from ..core.constants import MAX_LOAN_INSTALLMENTS
from ..core.enums import AdjustmentType, RequestKind, TransactionStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.messages import error_message
from ..permissions.filters import Viewer, filter_requests_by_role
from ..permissions.matrix import Action, Module, PermissionLevel, Role, has_permission, permission_level
from .model import AnyRequest, ManualAttendanceRequest, installment_amount, money
from .repository import RequestRepository

logger = logging.getLogger(__name__)

KIND_MODULES = {
    RequestKind.LEAVE: Module.LEAVE,
    RequestKind.LOAN: Module.LOANS,
    RequestKind.ALLOWANCE: Module.PAYROLL,
    RequestKind.MANUAL_ATTENDANCE: Module.ATTENDANCE,
}

# Kinds the generic approvals inbox may decide; financial kinds need the module's own approve.
_APPROVALS_INBOX_KINDS = frozenset({RequestKind.LEAVE, RequestKind.MANUAL_ATTENDANCE})
_MANAGING_LEVELS = frozenset({PermissionLevel.FULL, PermissionLevel.MANAGE})


def parse_kind(value) -> RequestKind:
    try:
        return RequestKind(value)
    except ValueError:
        raise NotFoundError(error_message("not_found"))


def can_submit_for_others(role: Role, kind: RequestKind) -> bool:
    # SELF grants create on one's own data only.
    return permission_level(role, KIND_MODULES[kind]) in _MANAGING_LEVELS


def can_decide(role: Role, kind: RequestKind) -> bool:
    if has_permission(role, KIND_MODULES[kind], Action.APPROVE):
        return True
    if kind in _APPROVALS_INBOX_KINDS and has_permission(role, Module.APPROVALS, Action.APPROVE):
        return True
    # Attendance managers correct attendance data directly.
    return kind == RequestKind.MANUAL_ATTENDANCE and permission_level(role, Module.ATTENDANCE) in _MANAGING_LEVELS


def _to_decimal(value, field_name: str) -> Decimal:
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name}: {error_message('must_be_number')}")
    if not number.is_finite():
        raise ValidationError(f"{field_name}: {error_message('must_be_number')}")
    if number <= 0:
        raise ValidationError(f"{field_name}: {error_message('must_be_positive')}")
    return money(number)


class RequestService:
    """Use cases: submit leave / loan / allowance / manual attendance requests and decide them."""

    def __init__(self, requests: RequestRepository, attendance: AttendanceService):
        self._requests = requests
        self._attendance = attendance

    @staticmethod
    def _target_employee(viewer: Viewer, kind: RequestKind, employee_no: Optional[int]) -> int:
        target = int(employee_no) if employee_no else viewer.employee_no
        if target != viewer.employee_no and not can_submit_for_others(viewer.role, kind):
            raise AuthorizationError("لا يمكنك تقديم طلب نيابة عن موظف آخر")
        return target

    def submit_leave(
        self,
        viewer: Viewer,
        *,
        from_date: date,
        to_date: date,
        reason: str,
        employee_no: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        target = self._target_employee(viewer, RequestKind.LEAVE, employee_no)
        if to_date < from_date:
            raise ValidationError(error_message("end_date_after_start_date"))
        reason = require_non_empty(reason, "سبب الإجازة")

        request_id = self._requests.create_leave(
            employee_no=target,
            from_date=from_date,
            to_date=to_date,
            leave_days=(to_date - from_date).days + 1,
            reason=reason,
            request_date=now or now_local(),
        )
        logger.info("Leave request %s submitted for employee %s", request_id, target)
        return request_id

    def submit_loan(
        self,
        viewer: Viewer,
        *,
        loan_amount,
        no_of_installments,
        first_installment_date: date,
        employee_no: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        target = self._target_employee(viewer, RequestKind.LOAN, employee_no)
        amount = _to_decimal(loan_amount, "مبلغ السلفة")
        count = require_int(no_of_installments, "عدد الأقساط")
        if count < 1 or count > MAX_LOAN_INSTALLMENTS:
            raise ValidationError(f"عدد الأقساط يجب أن يكون بين 1 و {MAX_LOAN_INSTALLMENTS}")
        installment = installment_amount(amount, count)
        if installment <= 0:
            raise ValidationError("مبلغ السلفة أقل من أن يقسم على عدد الأقساط")

        request_id = self._requests.create_loan(
            employee_no=target,
            loan_amount=amount,
            no_of_installments=count,
            first_installment_date=first_installment_date,
            installment_amount=installment,
            request_date=now or now_local(),
        )
        logger.info("Loan request %s submitted for employee %s (%s over %d installments)", request_id, target, amount, count)
        return request_id

    def submit_allowance(
        self,
        viewer: Viewer,
        *,
        adjustment_type,
        trans_type_code,
        amount,
        trans_date: date,
        notes: Optional[str] = None,
        employee_no: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        target = self._target_employee(viewer, RequestKind.ALLOWANCE, employee_no)
        try:
            adjustment = AdjustmentType(str(adjustment_type or "").strip().upper())
        except ValueError:
            raise ValidationError("نوع الحركة يجب أن يكون بدل أو خصم")

        request_id = self._requests.create_allowance(
            employee_no=target,
            adjustment_type=adjustment,
            trans_type_code=require_int(trans_type_code, "نوع الحركة"),
            amount=_to_decimal(amount, "المبلغ"),
            trans_date=trans_date,
            notes=(notes or "").strip() or None,
            request_date=now or now_local(),
        )
        logger.info("%s request %s submitted for employee %s", adjustment.value.title(), request_id, target)
        return request_id

    def submit_manual_attendance(
        self,
        viewer: Viewer,
        *,
        attendance_date: date,
        entry_time: str,
        reason: str,
        exit_time: Optional[str] = None,
        project_code: Optional[int] = None,
        employee_no: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        now = now or now_local()
        target = self._target_employee(viewer, RequestKind.MANUAL_ATTENDANCE, employee_no)
        if attendance_date > now.date():
            raise ValidationError("لا يمكن تسجيل حضور يدوي لتاريخ مستقبلي")

        entry_time = parse_clock_time(entry_time)
        exit_time = parse_clock_time(exit_time) if (exit_time or "").strip() else None

        request_id = self._requests.create_manual_attendance(
            employee_no=target,
            attendance_date=attendance_date,
            entry_time=entry_time,
            exit_time=exit_time,
            project_code=int(project_code) if project_code else None,
            reason=require_non_empty(reason, "السبب"),
            request_date=now,
        )
        logger.info("Manual attendance request %s submitted for employee %s on %s", request_id, target, attendance_date)
        return request_id

    def _pending_request(self, viewer: Viewer, kind: RequestKind, request_id: int) -> AnyRequest:
        if not can_decide(viewer.role, kind):
            raise AuthorizationError(error_message("no_permission"))

        req = self._requests.get(kind, int(request_id))
        if not req:
            raise NotFoundError("الطلب غير موجود")
        if req.employee_no == viewer.employee_no:
            raise AuthorizationError("لا يمكنك اعتماد طلبك الخاص")
        if req.status != TransactionStatus.NEW:
            raise ValidationError("تمت معالجة هذا الطلب مسبقاً")
        return req

    def _decide(
        self,
        viewer: Viewer,
        kind: RequestKind,
        request_id: int,
        status: TransactionStatus,
        note: Optional[str],
        now: Optional[datetime],
    ) -> None:
        ok = self._requests.decide(
            kind,
            request_id=int(request_id),
            status=status,
            decided_by=viewer.employee_no,
            decided_at=now or now_local(),
            note=note,
        )
        if not ok:
            raise ValidationError("تمت معالجة هذا الطلب مسبقاً")
        logger.info("%s request %s %s by employee %s", kind.value, request_id, status.name.lower(), viewer.employee_no)

    def approve(
        self,
        viewer: Viewer,
        kind: RequestKind,
        request_id: int,
        *,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        req = self._pending_request(viewer, kind, request_id)
        self._decide(viewer, kind, request_id, TransactionStatus.APPROVED, (note or "").strip() or None, now)

        # Only the decider that won the N -> A transition writes the attendance row.
        if isinstance(req, ManualAttendanceRequest):
            self._attendance.record_manual(
                employee_no=req.employee_no,
                attendance_date=req.attendance_date,
                entry_time=req.entry_time,
                exit_time=req.exit_time,
                project_code=req.project_code,
                notes=req.reason,
            )

    def reject(
        self,
        viewer: Viewer,
        kind: RequestKind,
        request_id: int,
        *,
        reason: str,
        now: Optional[datetime] = None,
    ) -> None:
        reason = require_non_empty(reason, "سبب الرفض")
        self._pending_request(viewer, kind, request_id)
        self._decide(viewer, kind, request_id, TransactionStatus.REJECTED, reason, now)

    def get_request(self, viewer: Viewer, kind: RequestKind, request_id: int) -> AnyRequest:
        req = self._requests.get(kind, int(request_id))
        if not req or not filter_requests_by_role([req], viewer):
            raise NotFoundError("الطلب غير موجود")
        if req.employee_no != viewer.employee_no and not (
            has_permission(viewer.role, KIND_MODULES[kind], Action.READ) or can_decide(viewer.role, kind)
        ):
            raise NotFoundError("الطلب غير موجود")
        return req

    def list_pending(self, viewer: Viewer) -> dict[str, list[AnyRequest]]:
        """NEW requests the viewer may decide, grouped by kind (own requests excluded)."""

        out: dict[str, list[AnyRequest]] = {}
        for kind in RequestKind:
            if not can_decide(viewer.role, kind):
                continue
            rows = self._requests.list_requests(kind, status=TransactionStatus.NEW, limit=500)
            out[kind.value] = [r for r in filter_requests_by_role(rows, viewer) if r.employee_no != viewer.employee_no]
        return out

    def list_mine(self, employee_no: int) -> dict[str, list[AnyRequest]]:
        return {
            kind.value: list(self._requests.list_requests(kind, employee_no=int(employee_no), limit=200))
            for kind in RequestKind
        }
