from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AdjustmentType, RequestKind, TransactionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, mysql_time_to_hhmm
from .model import AllowanceRequest, AnyRequest, LeaveRequest, LoanRequest, ManualAttendanceRequest
from .repository import RequestRepository

_DECISION_COLUMNS = "trans_status, request_date, decided_by, decided_at, decision_note"


def _decision(r: dict) -> dict:
    return {
        "status": TransactionStatus(r["trans_status"]),
        "request_date": r["request_date"],
        "decided_by": r.get("decided_by"),
        "decided_at": r.get("decided_at"),
        "decision_note": r.get("decision_note"),
    }


def _leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_no=int(r["employee_no"]),
        from_date=r["from_date"],
        to_date=r["to_date"],
        leave_days=int(r["leave_days"]),
        reason=r["reason"],
        **_decision(r),
    )


def _loan(r: dict) -> LoanRequest:
    return LoanRequest(
        request_id=int(r["request_id"]),
        employee_no=int(r["employee_no"]),
        loan_amount=Decimal(str(r["loan_amount"])),
        no_of_installments=int(r["no_of_installments"]),
        first_installment_date=r["first_installment_date"],
        installment_amount=Decimal(str(r["installment_amount"])),
        **_decision(r),
    )


def _allowance(r: dict) -> AllowanceRequest:
    return AllowanceRequest(
        request_id=int(r["request_id"]),
        employee_no=int(r["employee_no"]),
        adjustment_type=AdjustmentType(r["adjustment_type"]),
        trans_type_code=int(r["trans_type_code"]),
        amount=Decimal(str(r["amount"])),
        trans_date=r["trans_date"],
        notes=r.get("notes"),
        **_decision(r),
    )


def _manual(r: dict) -> ManualAttendanceRequest:
    return ManualAttendanceRequest(
        request_id=int(r["request_id"]),
        employee_no=int(r["employee_no"]),
        attendance_date=r["attendance_date"],
        entry_time=mysql_time_to_hhmm(r["entry_time"]),
        exit_time=mysql_time_to_hhmm(r.get("exit_time")),
        project_code=r.get("project_code"),
        reason=r["reason"],
        **_decision(r),
    )


# kind -> (table, columns, row mapper)
_TABLES = {
    RequestKind.LEAVE: (
        "leave_requests",
        "request_id, employee_no, from_date, to_date, leave_days, reason",
        _leave,
    ),
    RequestKind.LOAN: (
        "loan_requests",
        "request_id, employee_no, loan_amount, no_of_installments, first_installment_date, installment_amount",
        _loan,
    ),
    RequestKind.ALLOWANCE: (
        "allowance_requests",
        "request_id, employee_no, adjustment_type, trans_type_code, amount, trans_date, notes",
        _allowance,
    ),
    RequestKind.MANUAL_ATTENDANCE: (
        "manual_attendance_requests",
        "request_id, employee_no, attendance_date, entry_time, exit_time, project_code, reason",
        _manual,
    ),
}


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _insert(self, sql: str, params: tuple) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return int(cur.lastrowid)

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
        return self._insert(
            """
            INSERT INTO leave_requests(employee_no, from_date, to_date, leave_days, reason, trans_status, request_date)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (int(employee_no), from_date, to_date, int(leave_days), reason, TransactionStatus.NEW.value, request_date),
        )

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
        return self._insert(
            """
            INSERT INTO loan_requests(
                employee_no, loan_amount, no_of_installments, first_installment_date,
                installment_amount, trans_status, request_date
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                int(employee_no),
                loan_amount,
                int(no_of_installments),
                first_installment_date,
                installment_amount,
                TransactionStatus.NEW.value,
                request_date,
            ),
        )

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
        return self._insert(
            """
            INSERT INTO allowance_requests(
                employee_no, adjustment_type, trans_type_code, amount, trans_date, notes, trans_status, request_date
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                int(employee_no),
                adjustment_type.value,
                int(trans_type_code),
                amount,
                trans_date,
                notes,
                TransactionStatus.NEW.value,
                request_date,
            ),
        )

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
        return self._insert(
            """
            INSERT INTO manual_attendance_requests(
                employee_no, attendance_date, entry_time, exit_time, project_code, reason, trans_status, request_date
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                int(employee_no),
                attendance_date,
                entry_time,
                exit_time,
                project_code,
                reason,
                TransactionStatus.NEW.value,
                request_date,
            ),
        )

    def get(self, kind: RequestKind, request_id: int) -> Optional[AnyRequest]:
        table, columns, mapper = _TABLES[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {columns}, {_DECISION_COLUMNS} FROM {table} WHERE request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            return mapper(r) if r else None

    def list_requests(
        self,
        kind: RequestKind,
        *,
        status: Optional[TransactionStatus] = None,
        employee_no: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[AnyRequest]:
        table, columns, mapper = _TABLES[kind]

        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("trans_status=%s")
            params.append(status.value)
        if employee_no is not None:
            clauses.append("employee_no=%s")
            params.append(int(employee_no))
        params.append(int(limit))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {columns}, {_DECISION_COLUMNS}
                FROM {table}
                WHERE {where}
                ORDER BY request_date DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [mapper(r) for r in fetchall(cur)]

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
        table = _TABLES[kind][0]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {table}
                SET trans_status=%s, decided_by=%s, decided_at=%s, decision_note=%s
                WHERE request_id=%s AND trans_status=%s
                """,
                (status.value, int(decided_by), decided_at, note, int(request_id), TransactionStatus.NEW.value),
            )
            return cur.rowcount > 0
