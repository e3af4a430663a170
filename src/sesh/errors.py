"""Error taxonomy shared by the data layer, services and CLI.

Services hand these back inside ``result.Err`` rather than raising them, so
callers decide between degrading and surfacing.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sesh.models.sessions import CreationStep


class SeshError(Exception):
    """Base class for every error sesh reports."""


class ConfigError(SeshError):
    """The configuration file could not be read or is invalid."""


class OracleUnavailable(SeshError):
    """zoxide is missing or returned no usable data."""


class CacheCorrupt(SeshError):
    """The recency cache file could not be read, parsed or encoded."""


class QueryError(SeshError):
    """A tmux state query failed for a reason other than "not found"."""


class CreationError(SeshError):
    """One step of session creation failed.

    ``recoverable`` is set when the session exists anyway, which happens when
    a concurrent invocation won the race to create it.
    """

    def __init__(self, step: CreationStep, reason: str, *, recoverable: bool = False) -> None:
        self.step = step
        self.reason = reason
        self.recoverable = recoverable
        super().__init__(f"failed to {step.description}: {reason}")


class AttachError(SeshError):
    """tmux is missing, or attaching/switching the client failed."""


class NotFound(SeshError):
    """No discovered project matched the requested name."""

    def __init__(self, name: str, candidates: Sequence[str]) -> None:
        self.name = name
        self.candidates = list(candidates)
        listing = "\n".join(f"  - {candidate}" for candidate in self.candidates)
        super().__init__(f"project not found: {name}\n\nAvailable projects:\n{listing}")
