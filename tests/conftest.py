"""Shared fixtures for sesh tests."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from result import Err, Ok, Result

from sesh.config import Config
from sesh.data.recent_cache import RecencyCache
from sesh.data.tmux import CommandFailure
from sesh.errors import OracleUnavailable
from sesh.models.sessions import ActiveSession
from sesh.services.container import ServiceContainer
from sesh.services.project_service import ProjectService
from sesh.services.ranking import FrecencyRanker
from sesh.services.session_manager import SessionManager


def make_repo(root: Path, *parts: str) -> Path:
    """Create a directory containing a ``.git`` folder."""
    path = root.joinpath(*parts)
    (path / ".git").mkdir(parents=True)
    return path


class FakeRunner:
    """Stands in for ``subprocess.run``; replays (returncode, stdout, stderr) tuples."""

    def __init__(self, *results: tuple[int, str, str] | BaseException) -> None:
        self.results = list(results)
        self.calls: list[tuple[list[str], dict[str, object]]] = []

    def __call__(self, args: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        self.calls.append((list(args), kwargs))
        result = self.results.pop(0) if self.results else (0, "", "")
        if isinstance(result, BaseException):
            raise result
        returncode, stdout, stderr = result
        return subprocess.CompletedProcess(args, returncode, stdout, stderr)

    @property
    def argv(self) -> list[list[str]]:
        return [call[0] for call in self.calls]


class FakeOracle:
    def __init__(self, scores: dict[str, float] | None = None, available: bool = True) -> None:
        self.scores = dict(scores or {})
        self.available = available
        self.added: list[str] = []
        self.queries = 0

    def query_scores(self) -> Result[dict[str, float], OracleUnavailable]:
        self.queries += 1
        if not self.available:
            return Err(OracleUnavailable("zoxide not found in PATH"))
        return Ok(dict(self.scores))

    def add(self, path: str) -> None:
        self.added.append(path)


class FakeTmux:
    """In-memory tmux server."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.sessions: dict[str, list[str]] = {}
        self.paths: dict[str, str] = {}
        self.focused: dict[str, str] = {}
        self.sent: list[tuple[str, str, str]] = []
        self.attached: list[str] = []
        self.switched: list[tuple[str, str | None]] = []
        self.calls: list[str] = []
        self.failures: dict[str, CommandFailure] = {}

    def _failure(self, op: str) -> CommandFailure | None:
        self.calls.append(op)
        return self.failures.get(op)

    def is_available(self) -> bool:
        return self.available

    def has_session(self, name: str) -> Result[str, CommandFailure]:
        if failure := self._failure("has_session"):
            return Err(failure)
        if name in self.sessions:
            return Ok("")
        return Err(CommandFailure(("tmux", "has-session"), 1, f"can't find session: {name}"))

    def new_session(self, name: str, path: str, window: str) -> Result[str, CommandFailure]:
        if failure := self._failure("new_session"):
            return Err(failure)
        if name in self.sessions:
            return Err(CommandFailure(("tmux", "new-session"), 1, f"duplicate session: {name}"))
        self.sessions[name] = [window]
        self.paths[name] = path
        self.focused[name] = window
        return Ok("")

    def new_window(self, session: str, window: str, path: str) -> Result[str, CommandFailure]:
        if failure := self._failure("new_window"):
            return Err(failure)
        self.sessions[session].append(window)
        self.focused[session] = window
        return Ok("")

    def send_keys(self, session: str, window: str, keys: str) -> Result[str, CommandFailure]:
        if failure := self._failure("send_keys"):
            return Err(failure)
        self.sent.append((session, window, keys))
        return Ok("")

    def select_window(self, session: str, window: str) -> Result[str, CommandFailure]:
        if failure := self._failure("select_window"):
            return Err(failure)
        self.focused[session] = window
        return Ok("")

    def switch_client(self, name: str, client: str | None = None) -> Result[str, CommandFailure]:
        if failure := self._failure("switch_client"):
            return Err(failure)
        self.switched.append((name, client))
        return Ok("")

    def list_sessions(self) -> list[ActiveSession]:
        self.calls.append("list_sessions")
        return [ActiveSession(name=name, path=self.paths.get(name, "")) for name in self.sessions]

    def exec_attach(self, name: str) -> Result[None, CommandFailure]:
        if failure := self._failure("exec_attach"):
            return Err(failure)
        self.attached.append(name)
        return Ok(None)


@pytest.fixture
def dev_dir(tmp_path: Path) -> Path:
    path = tmp_path / "dev"
    path.mkdir()
    return path


@pytest.fixture
def test_config(tmp_path: Path, dev_dir: Path) -> Config:
    """Config pointing at temporary directories."""
    return Config(
        project_directories=(dev_dir,),
        config_dir=tmp_path / "config",
        cache_dir=tmp_path / "cache",
        command_timeout=1.0,
    )


@pytest.fixture
def fake_tmux() -> FakeTmux:
    return FakeTmux()


@pytest.fixture
def fake_oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def container(test_config: Config, fake_tmux: FakeTmux, fake_oracle: FakeOracle) -> ServiceContainer:
    """A service container wired to fakes instead of tmux and zoxide."""
    recent = RecencyCache.load(test_config.recent_path)
    ranker = FrecencyRanker(fake_oracle, recent)
    return ServiceContainer(
        config=test_config,
        recent=recent,
        tmux=fake_tmux,  # type: ignore[arg-type]
        zoxide=fake_oracle,  # type: ignore[arg-type]
        ranker=ranker,
        project_service=ProjectService(test_config.project_directories, ranker, recent, fake_oracle),
        session_manager=SessionManager(fake_tmux, test_config),
    )


def make_script(directory: Path, name: str, body: str) -> Path:
    """Write an executable shell script standing in for an external binary."""
    script = directory / name
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(0o755)
    return script
