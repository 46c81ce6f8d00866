from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.calculations import minutes_to_time, time_to_minutes
from ..core.constants import DEFAULT_GRACE_MINUTES


@dataclass(frozen=True)
class TimeSchedule:
    """Working hours for a department or a project site."""

    schedule_id: Optional[int]
    schedule_name: str
    entry_time: str
    exit_time: str
    required_hours: float
    dept_code: Optional[int] = None
    project_code: Optional[int] = None
    grace_period_minutes: int = DEFAULT_GRACE_MINUTES
    is_active: bool = True

    @property
    def crosses_midnight(self) -> bool:
        return time_to_minutes(self.exit_time) < time_to_minutes(self.entry_time)

    @property
    def grace_end_time(self) -> str:
        return minutes_to_time((time_to_minutes(self.entry_time) + self.grace_period_minutes) % (24 * 60))
