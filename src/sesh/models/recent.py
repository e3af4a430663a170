"""Models for the persisted recent-projects cache."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator


class RecentProject(BaseModel):
    """A project that was opened recently."""

    name: str
    path: str
    last_used: datetime

    @field_validator("last_used")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class RecentProjectsFile(BaseModel):
    """On-disk shape of ``recent.json``."""

    projects: list[RecentProject] = Field(default_factory=list)
