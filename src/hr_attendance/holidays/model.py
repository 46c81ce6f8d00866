from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class HolidayType(str, Enum):
    FITR = "Fitr"
    ADHA = "Adha"
    NATIONAL = "National"
    FOUNDATION = "Foundation"

    @property
    def label_ar(self) -> str:
        return {
            HolidayType.FITR: "عيد الفطر",
            HolidayType.ADHA: "عيد الأضحى",
            HolidayType.NATIONAL: "اليوم الوطني",
            HolidayType.FOUNDATION: "يوم التأسيس",
        }[self]


@dataclass(frozen=True)
class Holiday:
    """Official holiday period, both ends inclusive."""

    ser_no: int
    holiday_type: HolidayType
    greg_year: int
    hijri_year: int
    from_date: date
    to_date: date
    holiday_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.holiday_name or self.holiday_type.label_ar

    def covers(self, day: date) -> bool:
        return self.from_date <= day <= self.to_date
