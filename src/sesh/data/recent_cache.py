"""Persisted cache of the most recently opened projects."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

from pydantic import ValidationError

from sesh.errors import CacheCorrupt
from sesh.models.recent import RecentProject, RecentProjectsFile

logger = logging.getLogger(__name__)

RECENT_LIMIT = 3


class RecencyCache:
    """The most recently opened projects, most recent first.

    The file on disk is the source of truth; load a fresh instance per
    invocation rather than sharing one.
    """

    def __init__(self, path: Path, entries: list[RecentProject] | None = None) -> None:
        self.path = path
        self._entries: list[RecentProject] = list(entries or [])[:RECENT_LIMIT]

    @classmethod
    def load(cls, path: Path) -> RecencyCache:
        """Load the cache from ``path``. Never fails: errors yield an empty cache."""
        try:
            entries = _read_entries(path)
        except CacheCorrupt as exc:
            logger.warning("Ignoring recent projects cache: %s", exc)
            entries = []
        return cls(path, entries)

    @property
    def entries(self) -> tuple[RecentProject, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def rank_by_path(self) -> dict[str, int]:
        """Map each cached path to its recency rank (1 = most recent)."""
        return {entry.path: rank for rank, entry in enumerate(self._entries, start=1)}

    def add(self, name: str, path: str, *, now: datetime | None = None) -> None:
        """Move ``path`` to the front, stamped with the current time."""
        remaining = [entry for entry in self._entries if entry.path != path]

        stamp = now or datetime.now(UTC)
        if remaining and stamp <= remaining[0].last_used:
            stamp = remaining[0].last_used + timedelta(microseconds=1)

        self._entries = [RecentProject(name=name, path=path, last_used=stamp), *remaining]
        del self._entries[RECENT_LIMIT:]

    def save(self) -> None:
        """Write the cache atomically.

        Raises:
            CacheCorrupt: An entry cannot be encoded as JSON, e.g. a path
                holding undecodable filename bytes.
            OSError: The cache directory or file cannot be written.
        """
        try:
            payload = RecentProjectsFile(projects=self._entries).model_dump_json(indent=2)
        except ValueError as exc:
            raise CacheCorrupt(f"cannot encode recent projects: {exc}") from exc
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".recent-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                file.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _read_entries(path: Path) -> list[RecentProject]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as exc:
        raise CacheCorrupt(f"cannot read {path}: {exc}") from exc

    try:
        data = RecentProjectsFile.model_validate_json(raw)
    except ValidationError as exc:
        raise CacheCorrupt(f"cannot parse {path}: {exc}") from exc

    # Hand-edited files may be out of order; the newest entry of a path wins.
    ordered = sorted(data.projects, key=lambda entry: entry.last_used, reverse=True)
    entries: list[RecentProject] = []
    seen: set[str] = set()
    for entry in ordered:
        if entry.path in seen:
            continue
        seen.add(entry.path)
        if entries and entry.last_used >= entries[-1].last_used:
            entry = entry.model_copy(
                update={"last_used": entries[-1].last_used - timedelta(microseconds=1)}
            )
        entries.append(entry)
        if len(entries) == RECENT_LIMIT:
            break
    return entries
