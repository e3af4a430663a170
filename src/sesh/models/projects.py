"""Project-level models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel


class Project(BaseModel):
    """A discovered git project. ``path`` is its identity."""

    name: str
    path: str
    score: float = 0.0

    @classmethod
    def from_path(cls, path: str | Path) -> Project:
        project_path = str(path).rstrip("/") or "/"
        return cls(name=Path(project_path).name or project_path, path=project_path)


@dataclass(frozen=True, slots=True)
class DiscoveryWarning:
    """A configured directory that was skipped during discovery."""

    directory: str
    reason: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.directory}"


@dataclass(slots=True)
class DiscoveryResult:
    """Projects found by a scan, plus the directories that had to be skipped."""

    projects: list[Project] = field(default_factory=list)
    warnings: list[DiscoveryWarning] = field(default_factory=list)
