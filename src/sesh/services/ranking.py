"""Frecency ranking: zoxide usage scores plus a bonus for recently opened projects."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from result import Err

from sesh.models.projects import Project

if TYPE_CHECKING:
    from sesh.data.protocols import UsageOracleProtocol
    from sesh.data.recent_cache import RecencyCache

logger = logging.getLogger(__name__)

# Large enough that any recent project outranks any realistic zoxide score.
RECENCY_BONUS: dict[int, float] = {1: 10000.0, 2: 9000.0, 3: 8000.0}


def recency_bonus(rank: int | None) -> float:
    """Bonus for a recency rank (1 = most recent); 0 when not recent."""
    if rank is None:
        return 0.0
    return RECENCY_BONUS.get(rank, 0.0)


def sort_key(project: Project) -> tuple[float, str, str]:
    return (-project.score, project.name, project.path)


class FrecencyRanker:
    """Orders projects by combined usage and recency score."""

    def __init__(self, oracle: UsageOracleProtocol, cache: RecencyCache) -> None:
        self._oracle = oracle
        self._cache = cache

    def usage_scores(self) -> dict[str, float]:
        scores = self._oracle.query_scores()
        if isinstance(scores, Err):
            logger.debug("Usage scores unavailable: %s", scores.err_value)
            return {}
        return scores.ok_value

    def rank(self, projects: Iterable[Project]) -> list[Project]:
        """Return scored copies of ``projects``, highest score first.

        Equal scores fall back to name, then path, so the order is total.
        """
        usage = self.usage_scores()
        recency = self._cache.rank_by_path()

        scored: dict[str, Project] = {}
        for project in projects:
            if project.path in scored:
                continue
            score = usage.get(project.path, 0.0) + recency_bonus(recency.get(project.path))
            scored[project.path] = project.model_copy(update={"score": score})

        return sorted(scored.values(), key=sort_key)
