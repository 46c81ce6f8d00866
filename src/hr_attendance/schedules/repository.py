from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TimeSchedule


class ScheduleRepository(Protocol):
    def list_all(self, *, active_only: bool = False) -> Sequence[TimeSchedule]:
        raise NotImplementedError

    def get_by_id(self, schedule_id: int) -> Optional[TimeSchedule]:
        raise NotImplementedError

    def create(self, schedule: TimeSchedule) -> int:
        """Insert a schedule (``schedule_id`` ignored). Returns the new id."""

        raise NotImplementedError

    def update(self, schedule: TimeSchedule) -> bool:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError
