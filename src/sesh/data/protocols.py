"""Protocol definitions for external collaborators."""

from __future__ import annotations

from typing import Protocol

from result import Result

from sesh.data.tmux import CommandFailure
from sesh.errors import OracleUnavailable
from sesh.models.sessions import ActiveSession


class UsageOracleProtocol(Protocol):
    """Source of per-path usage scores (zoxide)."""

    def query_scores(self) -> Result[dict[str, float], OracleUnavailable]: ...

    def add(self, path: str) -> None: ...


class MultiplexerProtocol(Protocol):
    """The tmux operations the session manager relies on."""

    def is_available(self) -> bool: ...

    def has_session(self, name: str) -> Result[str, CommandFailure]: ...

    def new_session(self, name: str, path: str, window: str) -> Result[str, CommandFailure]: ...

    def new_window(self, session: str, window: str, path: str) -> Result[str, CommandFailure]: ...

    def send_keys(self, session: str, window: str, keys: str) -> Result[str, CommandFailure]: ...

    def select_window(self, session: str, window: str) -> Result[str, CommandFailure]: ...

    def switch_client(
        self, name: str, client: str | None = None
    ) -> Result[str, CommandFailure]: ...

    def list_sessions(self) -> list[ActiveSession]: ...

    def exec_attach(self, name: str) -> Result[None, CommandFailure]: ...
