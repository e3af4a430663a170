"""Service container with DI wiring."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sesh.data.recent_cache import RecencyCache
from sesh.data.tmux import TmuxClient, inside_tmux
from sesh.data.zoxide import ZoxideClient
from sesh.services.project_service import ProjectService
from sesh.services.ranking import FrecencyRanker
from sesh.services.session_manager import SessionManager

if TYPE_CHECKING:
    from sesh.config import Config


@dataclass
class ServiceContainer:
    """Holds one invocation's services. Built per entry point, never shared."""

    config: Config
    recent: RecencyCache
    tmux: TmuxClient
    zoxide: ZoxideClient
    ranker: FrecencyRanker
    project_service: ProjectService
    session_manager: SessionManager

    @classmethod
    def create(cls, config: Config, environ: Mapping[str, str] | None = None) -> ServiceContainer:
        """Factory that wires all dependencies from a freshly loaded config."""
        env = os.environ if environ is None else environ
        recent = RecencyCache.load(config.recent_path)
        tmux = TmuxClient(config.tmux_binary, timeout=config.command_timeout)
        zoxide = ZoxideClient(config.zoxide_binary, timeout=config.command_timeout)
        ranker = FrecencyRanker(zoxide, recent)

        project_service = ProjectService(config.project_directories, ranker, recent, zoxide)
        session_manager = SessionManager(tmux, config, inside_tmux=inside_tmux(env))

        return cls(
            config=config,
            recent=recent,
            tmux=tmux,
            zoxide=zoxide,
            ranker=ranker,
            project_service=project_service,
            session_manager=session_manager,
        )
