from datetime import date, datetime

import pytest

from hr_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hr_attendance.holidays.model import Holiday, HolidayType
from hr_attendance.holidays.service import (
    get_holiday,
    get_holiday_type,
    get_holidays_for_year,
    get_upcoming_holidays,
    is_holiday,
    is_holiday_work,
)
from hr_attendance.permissions.matrix import Role

EID = Holiday(1, HolidayType.FITR, 2026, 1447, date(2026, 3, 20), date(2026, 3, 23))
NATIONAL = Holiday(2, HolidayType.NATIONAL, 2026, 1448, date(2026, 9, 23), date(2026, 9, 23), "اليوم الوطني 96")
OLD = Holiday(3, HolidayType.NATIONAL, 2025, 1447, date(2025, 9, 23), date(2025, 9, 23))
ALL = [EID, NATIONAL, OLD]


def test_holiday_range_is_inclusive():
    assert get_holiday(date(2026, 3, 20), ALL) == EID
    assert get_holiday(date(2026, 3, 23), ALL) == EID
    assert get_holiday(date(2026, 3, 24), ALL) is None


def test_lookup_accepts_datetimes():
    assert is_holiday(datetime(2026, 9, 23, 22, 30), ALL)
    assert is_holiday_work(datetime(2026, 9, 23, 8, 0), ALL)
    assert get_holiday_type(date(2026, 3, 21), ALL) == HolidayType.FITR
    assert get_holiday_type(date(2026, 3, 25), ALL) is None


def test_holidays_for_year_and_upcoming_window():
    assert get_holidays_for_year(2026, ALL) == [EID, NATIONAL]
    assert get_upcoming_holidays(date(2026, 3, 22), date(2026, 9, 1), ALL) == [EID]
    assert get_upcoming_holidays(date(2026, 10, 1), date(2026, 12, 31), ALL) == []


def test_display_name_falls_back_to_type_label():
    assert NATIONAL.display_name == "اليوم الوطني 96"
    assert EID.display_name == "عيد الفطر"


@pytest.fixture()
def holiday_service(container):
    return container.holiday_service


def test_hr_can_create_and_update_holiday(holiday_service):
    ser_no = holiday_service.create(
        current_role=Role.HR_MANAGER,
        holiday_type="Adha",
        hijri_year="1447",
        from_date=date(2026, 5, 26),
        to_date=date(2026, 5, 29),
    )
    created = [h for h in holiday_service.list_holidays(year=2026) if h.ser_no == ser_no][0]
    assert created.holiday_type == HolidayType.ADHA
    assert created.greg_year == 2026
    assert created.hijri_year == 1447

    holiday_service.update(
        current_role=Role.ADMIN,
        ser_no=ser_no,
        holiday_type="Adha",
        hijri_year=1447,
        from_date=date(2026, 5, 26),
        to_date=date(2026, 5, 30),
        holiday_name="عيد الأضحى المبارك",
    )
    updated = holiday_service.holidays_between(date(2026, 5, 30), date(2026, 5, 30))
    assert [h.holiday_name for h in updated] == ["عيد الأضحى المبارك"]


def test_holiday_settings_are_restricted(holiday_service):
    with pytest.raises(AuthorizationError):
        holiday_service.create(
            current_role=Role.FINANCE_MANAGER,
            holiday_type="National",
            hijri_year=1448,
            from_date=date(2026, 9, 23),
            to_date=date(2026, 9, 23),
        )
    with pytest.raises(AuthorizationError):
        holiday_service.delete(current_role=Role.EMPLOYEE, ser_no=1)


def test_holiday_validation(holiday_service):
    with pytest.raises(ValidationError):
        holiday_service.create(
            current_role=Role.ADMIN,
            holiday_type="Christmas",
            hijri_year=1448,
            from_date=date(2026, 12, 25),
            to_date=date(2026, 12, 25),
        )
    with pytest.raises(ValidationError):
        holiday_service.create(
            current_role=Role.ADMIN,
            holiday_type="National",
            hijri_year=1448,
            from_date=date(2026, 9, 24),
            to_date=date(2026, 9, 23),
        )


def test_update_and_delete_missing_holiday(holiday_service):
    with pytest.raises(NotFoundError):
        holiday_service.update(
            current_role=Role.ADMIN,
            ser_no=404,
            holiday_type="National",
            hijri_year=1448,
            from_date=date(2026, 9, 23),
            to_date=date(2026, 9, 23),
        )
    with pytest.raises(NotFoundError):
        holiday_service.delete(current_role=Role.ADMIN, ser_no=404)
