"""GPS geofencing: Haversine distance and project radius checks."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import ValidationError
from ..core.messages import error_message


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ProjectLocation:
    latitude: float
    longitude: float
    project_code: int
    radius: float  # meters


def validate_location(latitude, longitude) -> Location:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError(error_message("invalid_location"))
    if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lon <= 180.0):
        raise ValidationError(error_message("invalid_location"))
    return Location(latitude=lat, longitude=lon)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters (Haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def distance_to_project(location: Location, project_location: ProjectLocation) -> float:
    return calculate_distance(
        location.latitude,
        location.longitude,
        project_location.latitude,
        project_location.longitude,
    )


def is_within_radius(location: Location, project_location: ProjectLocation) -> bool:
    return distance_to_project(location, project_location) <= project_location.radius


def format_distance(distance_in_meters: float) -> str:
    if distance_in_meters < 1000:
        return f"{int(distance_in_meters + 0.5)}m"
    return f"{distance_in_meters / 1000:.2f}km"
