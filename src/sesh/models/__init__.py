"""Pydantic models for sesh."""

from sesh.models.projects import DiscoveryResult, DiscoveryWarning, Project
from sesh.models.recent import RecentProject, RecentProjectsFile
from sesh.models.sessions import ActiveSession, CreationStep, SessionState, WindowSpec

__all__ = [
    "ActiveSession",
    "CreationStep",
    "DiscoveryResult",
    "DiscoveryWarning",
    "Project",
    "RecentProject",
    "RecentProjectsFile",
    "SessionState",
    "WindowSpec",
]
