"""Arabic display strings for errors surfaced to the dashboard."""

from __future__ import annotations

ERRORS = {
    "required": "هذا الحقل مطلوب",
    "invalid_format": "تنسيق غير صحيح",
    "invalid_time": "تنسيق الوقت غير صحيح (HH:MM)",
    "invalid_date": "تاريخ غير صحيح",
    "must_be_number": "يجب أن يكون رقماً",
    "must_be_positive": "يجب أن يكون أكبر من 0",
    "end_date_after_start_date": "تاريخ الانتهاء يجب أن يكون بعد تاريخ البدء",
    "network_error": "خطأ في الشبكة",
    "server_error": "خطأ في الخادم",
    "request_timeout": "انتهت مهلة الطلب",
    "unauthorized": "غير مصرح",
    "forbidden": "ممنوع",
    "not_found": "غير موجود",
    "bad_request": "طلب غير صحيح",
    "validation_error": "خطأ في التحقق",
    "session_expired": "انتهت الجلسة. يرجى تسجيل الدخول مرة أخرى",
    "invalid_credentials": "اسم المستخدم أو كلمة المرور غير صحيحة",
    "no_permission": "ليس لديك صلاحية لتنفيذ هذا الإجراء",
    "unknown_role": "دور المستخدم غير معروف",
    "invalid_location": "إحداثيات الموقع غير صحيحة",
}

_STATUS_KEYS = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    408: "request_timeout",
    422: "validation_error",
}


def error_message(key: str) -> str:
    return ERRORS.get(key, ERRORS["server_error"])


def http_error_message(status_code: int) -> str:
    """Map an HTTP status to the Arabic text shown in toasts."""
    if status_code == 0:
        return ERRORS["network_error"]
    key = _STATUS_KEYS.get(int(status_code))
    if key:
        return ERRORS[key]
    if int(status_code) >= 500:
        return ERRORS["server_error"]
    return ERRORS["bad_request"]
