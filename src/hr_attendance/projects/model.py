from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.geo import ProjectLocation
from ..core.constants import DEFAULT_PROJECT_RADIUS_METERS


@dataclass(frozen=True)
class Project:
    project_code: int
    project_name_ar: str
    project_name_en: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_meters: float = DEFAULT_PROJECT_RADIUS_METERS
    is_active: bool = True

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_location(self) -> Optional[ProjectLocation]:
        if not self.has_location:
            return None
        return ProjectLocation(
            latitude=float(self.latitude),
            longitude=float(self.longitude),
            project_code=self.project_code,
            radius=float(self.radius_meters),
        )
