from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from hr_attendance.common.datetime_utils import arabic_day_name, as_date, parse_iso_date
from hr_attendance.common.serialization import to_json
from hr_attendance.common.validators import require_int, require_min_length, require_non_empty, require_positive_number
from hr_attendance.core.enums import TransactionStatus
from hr_attendance.core.exceptions import GeofenceError, ValidationError
from hr_attendance.core.messages import ERRORS, error_message, http_error_message
from hr_attendance.database.mysql_base import mysql_time_to_hhmm, normalize_mysql_time, to_yn, yn


def test_error_message_falls_back_to_server_error():
    assert error_message("invalid_credentials") == ERRORS["invalid_credentials"]
    assert error_message("no-such-key") == "خطأ في الخادم"


@pytest.mark.parametrize(
    "status, key",
    [
        (0, "network_error"),
        (400, "bad_request"),
        (401, "unauthorized"),
        (403, "forbidden"),
        (404, "not_found"),
        (408, "request_timeout"),
        (500, "server_error"),
        (503, "server_error"),
        (418, "bad_request"),
    ],
)
def test_http_error_message(status, key):
    assert http_error_message(status) == ERRORS[key]


def test_exception_status_codes():
    error = GeofenceError("بعيد", distance_meters=350.0, radius_meters=200.0)
    assert isinstance(error, ValidationError)
    assert error.status_code == 400
    assert error.distance_meters == 350.0


def test_transaction_status_labels():
    assert TransactionStatus("N") == TransactionStatus.NEW
    assert TransactionStatus.APPROVED.label_ar == "معتمد"
    assert TransactionStatus.REJECTED.label_ar == "مرفوض"


def test_date_helpers():
    assert parse_iso_date(" 2026-10-14 ") == date(2026, 10, 14)
    with pytest.raises(ValidationError):
        parse_iso_date("14/10/2026")
    assert as_date(datetime(2026, 10, 14, 9, 0)) == date(2026, 10, 14)
    assert arabic_day_name(date(2026, 10, 16)) == "الجمعة"


def test_validators():
    assert require_non_empty("  x ", "f") == "x"
    with pytest.raises(ValidationError):
        require_non_empty("   ", "f")
    with pytest.raises(ValidationError):
        require_min_length("abc", "f", 4)
    assert require_positive_number("2.5", "f") == 2.5
    with pytest.raises(ValidationError):
        require_positive_number(0, "f")
    assert require_int("7", "f") == 7
    with pytest.raises(ValidationError):
        require_int("seven", "f")


@dataclass(frozen=True)
class Sample:
    employee_no: int
    attendance_date: date
    entry_time: datetime
    scheduled_entry: time
    status: TransactionStatus
    amount: Decimal


def test_to_json_camel_cases_dataclasses():
    sample = Sample(4, date(2026, 10, 14), datetime(2026, 10, 14, 7, 5, 30), time(7, 0), TransactionStatus.NEW, Decimal("10.50"))
    assert to_json([sample]) == [
        {
            "employeeNo": 4,
            "attendanceDate": "2026-10-14",
            "entryTime": "2026-10-14T07:05:30",
            "scheduledEntry": "07:00",
            "status": "N",
            "amount": 10.5,
        }
    ]


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(None) is None
    assert normalize_mysql_time(time(8, 30)) == time(8, 30)
    assert normalize_mysql_time(timedelta(hours=8, minutes=30)) == time(8, 30)
    assert normalize_mysql_time("17:00:00") == time(17, 0)
    assert normalize_mysql_time("07:45") == time(7, 45)
    assert mysql_time_to_hhmm(timedelta(hours=22)) == "22:00"
    with pytest.raises(ValueError):
        normalize_mysql_time("0800")
    with pytest.raises(TypeError):
        normalize_mysql_time(800)


def test_yes_no_flags():
    assert yn("Y") and yn(" y ")
    assert not yn("N")
    assert not yn(None)
    assert yn(1)
    assert to_yn(True) == "Y"
    assert to_yn(False) == "N"
