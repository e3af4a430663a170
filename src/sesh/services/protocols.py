"""Protocol definitions for services."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol

from result import Result

from sesh.errors import AttachError, NotFound, SeshError
from sesh.models.projects import Project
from sesh.models.sessions import ActiveSession, SessionState

if TYPE_CHECKING:
    from sesh.services.project_service import ProjectListing


class ProjectServiceProtocol(Protocol):
    """Interface for project operations."""

    def list_projects(self) -> Result[ProjectListing, str]: ...

    def resolve(self, name: str, projects: Sequence[Project]) -> Result[Project, NotFound]: ...

    def record_visit(self, project: Project) -> None: ...


class SessionManagerProtocol(Protocol):
    """Interface for session lifecycle operations."""

    def get_or_create(
        self,
        project: Project,
        client: str | None = None,
        *,
        announce: Callable[[str], None] | None = None,
    ) -> Result[SessionState, SeshError]: ...

    def switch_to(self, name: str, client: str | None = None) -> Result[None, AttachError]: ...

    def enter(self, name: str, client: str | None = None) -> Result[SessionState, AttachError]: ...

    def list_active(self) -> list[ActiveSession]: ...
