from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday, HolidayType


class HolidayRepository(Protocol):
    def list_all(self, *, year: Optional[int] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def list_between(self, *, start: date, end: date) -> Sequence[Holiday]:
        """Holidays overlapping [start, end]."""

        raise NotImplementedError

    def get_by_id(self, ser_no: int) -> Optional[Holiday]:
        raise NotImplementedError

    def create(
        self,
        *,
        holiday_type: HolidayType,
        greg_year: int,
        hijri_year: int,
        from_date: date,
        to_date: date,
        holiday_name: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, holiday: Holiday) -> bool:
        raise NotImplementedError

    def delete(self, ser_no: int) -> bool:
        raise NotImplementedError
