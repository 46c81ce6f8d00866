from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project


class ProjectRepository(Protocol):
    def get_by_code(self, project_code: int) -> Optional[Project]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Project]:
        raise NotImplementedError
