from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import as_date
from ..common.validators import require_int
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.messages import error_message
from ..permissions.matrix import Role, can_manage_settings
from .model import Holiday, HolidayType
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


def get_holiday(day: date | datetime, holidays: Iterable[Holiday]) -> Optional[Holiday]:
    day = as_date(day)
    for holiday in holidays:
        if holiday.covers(day):
            return holiday
    return None


def is_holiday(day: date | datetime, holidays: Iterable[Holiday]) -> bool:
    return get_holiday(day, holidays) is not None


def get_holiday_type(day: date | datetime, holidays: Iterable[Holiday]) -> Optional[HolidayType]:
    holiday = get_holiday(day, holidays)
    return holiday.holiday_type if holiday else None


def is_holiday_work(day: date | datetime, holidays: Iterable[Holiday]) -> bool:
    """Work on a holiday is paid entirely as overtime."""
    return is_holiday(day, holidays)


def get_holidays_for_year(year: int, holidays: Iterable[Holiday]) -> list[Holiday]:
    return [h for h in holidays if h.greg_year == year]


def get_upcoming_holidays(from_date: date | datetime, to_date: date | datetime, holidays: Iterable[Holiday]) -> list[Holiday]:
    """Holidays that overlap the [from_date, to_date] window."""
    start, end = as_date(from_date), as_date(to_date)
    return [h for h in holidays if h.from_date <= end and h.to_date >= start]


class HolidayService:
    """Use case: maintain the official holiday calendar (settings)."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    @staticmethod
    def _require_manager(role: Role) -> None:
        if not can_manage_settings(role, "holidays"):
            raise AuthorizationError(error_message("no_permission"))

    @staticmethod
    def _parse_type(value) -> HolidayType:
        try:
            return HolidayType(value)
        except ValueError:
            raise ValidationError("نوع الإجازة غير صحيح")

    @staticmethod
    def _check_range(from_date: date, to_date: date) -> None:
        if to_date < from_date:
            raise ValidationError(error_message("end_date_after_start_date"))

    def list_holidays(self, *, year: Optional[int] = None) -> Sequence[Holiday]:
        return self._holidays.list_all(year=year)

    def holidays_between(self, start: date, end: date) -> Sequence[Holiday]:
        return self._holidays.list_between(start=start, end=end)

    def create(
        self,
        *,
        current_role: Role,
        holiday_type,
        hijri_year,
        from_date: date,
        to_date: date,
        holiday_name: Optional[str] = None,
    ) -> int:
        self._require_manager(current_role)
        htype = self._parse_type(holiday_type)
        self._check_range(from_date, to_date)

        ser_no = self._holidays.create(
            holiday_type=htype,
            greg_year=from_date.year,
            hijri_year=require_int(hijri_year, "السنة الهجرية"),
            from_date=from_date,
            to_date=to_date,
            holiday_name=(holiday_name or "").strip() or None,
        )
        logger.info("Holiday %s created (%s -> %s)", ser_no, from_date, to_date)
        return ser_no

    def update(
        self,
        *,
        current_role: Role,
        ser_no: int,
        holiday_type,
        hijri_year,
        from_date: date,
        to_date: date,
        holiday_name: Optional[str] = None,
    ) -> None:
        self._require_manager(current_role)
        existing = self._holidays.get_by_id(int(ser_no))
        if not existing:
            raise NotFoundError("الإجازة غير موجودة")

        self._check_range(from_date, to_date)
        updated = Holiday(
            ser_no=existing.ser_no,
            holiday_type=self._parse_type(holiday_type),
            greg_year=from_date.year,
            hijri_year=require_int(hijri_year, "السنة الهجرية"),
            from_date=from_date,
            to_date=to_date,
            holiday_name=(holiday_name or "").strip() or None,
        )
        if not self._holidays.update(updated):
            raise ValidationError("فشل تحديث الإجازة")

    def delete(self, *, current_role: Role, ser_no: int) -> None:
        self._require_manager(current_role)
        if not self._holidays.delete(int(ser_no)):
            raise NotFoundError("الإجازة غير موجودة")
        logger.info("Holiday %s deleted", ser_no)
