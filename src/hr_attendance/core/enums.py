from __future__ import annotations

from enum import Enum


class TransactionStatus(str, Enum):
    """Approval state shared by every request workflow."""

    NEW = "N"
    APPROVED = "A"
    REJECTED = "R"

    @property
    def label_ar(self) -> str:
        return {
            TransactionStatus.NEW: "جديد",
            TransactionStatus.APPROVED: "معتمد",
            TransactionStatus.REJECTED: "مرفوض",
        }[self]


class RequestKind(str, Enum):
    LEAVE = "leave"
    LOAN = "loan"
    ALLOWANCE = "allowance"
    MANUAL_ATTENDANCE = "manual-attendance"


class AdjustmentType(str, Enum):
    """Payroll adjustment transaction types."""

    ALLOWANCE = "ALLOWANCE"
    DEDUCTION = "DEDUCTION"


class AttendanceStatus(str, Enum):
    """Day status shown on the daily overview card."""

    PRESENT = "PRESENT"
    CHECKED_IN = "CHECKED_IN"
    ABSENT = "ABSENT"
    HOLIDAY = "HOLIDAY"
    WEEKEND = "WEEKEND"
    UPCOMING = "UPCOMING"

    @property
    def label_ar(self) -> str:
        return {
            AttendanceStatus.PRESENT: "حاضر",
            AttendanceStatus.CHECKED_IN: "داخل الدوام",
            AttendanceStatus.ABSENT: "غائب",
            AttendanceStatus.HOLIDAY: "إجازة رسمية",
            AttendanceStatus.WEEKEND: "عطلة نهاية الأسبوع",
            AttendanceStatus.UPCOMING: "لم يبدأ بعد",
        }[self]
