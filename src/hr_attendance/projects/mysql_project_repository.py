from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, yn
from .model import Project
from .repository import ProjectRepository

_COLUMNS = "project_code, project_name_ar, project_name_en, latitude, longitude, gps_radius_meters, is_active"


def _row_to_project(r: dict) -> Project:
    return Project(
        project_code=int(r["project_code"]),
        project_name_ar=r["project_name_ar"],
        project_name_en=r.get("project_name_en"),
        latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
        longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
        radius_meters=float(r["gps_radius_meters"]),
        is_active=yn(r.get("is_active")),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_code(self, project_code: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects WHERE project_code=%s", (int(project_code),))
            r = fetchone(cur)
            return _row_to_project(r) if r else None

    def list_active(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects WHERE is_active='Y' ORDER BY project_code")
            return [_row_to_project(r) for r in fetchall(cur)]
