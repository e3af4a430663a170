"""Project service — discovery, ranking, name resolution and visit tracking."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from sesh.data.discovery import find_git_projects
from sesh.errors import CacheCorrupt, NotFound
from sesh.models.projects import DiscoveryResult, DiscoveryWarning, Project
from sesh.services.session_manager import sanitize_session_name

if TYPE_CHECKING:
    from sesh.data.protocols import UsageOracleProtocol
    from sesh.data.recent_cache import RecencyCache
    from sesh.services.ranking import FrecencyRanker

logger = logging.getLogger(__name__)

Discover = Callable[[Sequence[Path]], DiscoveryResult]


@dataclass(slots=True)
class ProjectListing:
    """Ranked projects plus any directories skipped while finding them."""

    projects: list[Project] = field(default_factory=list)
    warnings: list[DiscoveryWarning] = field(default_factory=list)


class ProjectService:
    """Service for project queries."""

    def __init__(
        self,
        directories: Sequence[Path],
        ranker: FrecencyRanker,
        cache: RecencyCache,
        oracle: UsageOracleProtocol,
        discover: Discover = find_git_projects,
    ) -> None:
        self._directories = tuple(directories)
        self._ranker = ranker
        self._cache = cache
        self._oracle = oracle
        self._discover = discover

    def list_projects(self) -> Result[ProjectListing, str]:
        """Discover projects and order them by frecency."""
        try:
            found = self._discover(self._directories)
        except OSError as exc:
            return Err(f"Failed to find projects: {exc}")
        return Ok(ProjectListing(self._ranker.rank(found.projects), list(found.warnings)))

    def resolve(self, name: str, projects: Sequence[Project]) -> Result[Project, NotFound]:
        """Find a project by exact name, then session name, then name prefix.

        Matching ignores case; ``projects`` is scanned in order at each stage.
        """
        wanted = name.lower()
        for project in projects:
            if project.name.lower() == wanted:
                return Ok(project)

        wanted_session = sanitize_session_name(name)
        for project in projects:
            if sanitize_session_name(project.name) == wanted_session:
                return Ok(project)

        for project in projects:
            if project.name.lower().startswith(wanted):
                return Ok(project)

        return Err(NotFound(name, [p.name for p in projects]))

    def record_visit(self, project: Project) -> None:
        """Promote the project in the recency cache and tell zoxide about it.

        Both are best-effort; failures are logged, never raised.
        """
        self._cache.add(project.name, project.path)
        try:
            self._cache.save()
        except (OSError, CacheCorrupt) as exc:
            logger.warning("Failed to save recent projects to %s: %s", self._cache.path, exc)
        self._oracle.add(project.path)
