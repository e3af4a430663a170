"""Thin wrapper around the tmux command line."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from result import Err, Ok, Result

from sesh.models.sessions import ActiveSession

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess[str]]
Exec = Callable[[str, list[str]], object]

# tmux sets this in every process running inside one of its panes
TMUX_ENV_VAR = "TMUX"


@dataclass(frozen=True, slots=True)
class CommandFailure:
    """A tmux command that did not exit cleanly.

    ``returncode`` is None when the process never ran or was killed on timeout.
    """

    args: tuple[str, ...]
    returncode: int | None
    stderr: str = ""

    def __str__(self) -> str:
        detail = self.stderr.strip() or (
            f"exit status {self.returncode}" if self.returncode is not None else "did not run"
        )
        return f"`{' '.join(self.args)}`: {detail}"


def exact_target(session: str, window: str | None = None) -> str:
    """Build a target that matches the session name exactly, not by prefix."""
    target = f"={session}"
    if window is not None:
        target = f"{target}:{window}"
    return target


def parse_sessions(output: str) -> list[ActiveSession]:
    """Parse ``list-sessions -F '#{session_name}:#{session_path}'`` output."""
    sessions: list[ActiveSession] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        name, _, path = line.partition(":")
        sessions.append(ActiveSession(name=name, path=path))
    return sessions


class TmuxClient:
    """Runs tmux subcommands with a bounded wait."""

    def __init__(
        self,
        binary: str = "tmux",
        timeout: float = 5.0,
        runner: Runner = subprocess.run,
        exec_fn: Exec = os.execv,
    ) -> None:
        self._binary = binary
        self._timeout = timeout
        self._run = runner
        self._exec = exec_fn

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    def run(self, *args: str) -> Result[str, CommandFailure]:
        """Run ``tmux *args`` and return its stdout."""
        argv = (self._binary, *args)
        logger.debug("Running %s", " ".join(argv))
        try:
            completed = self._run(
                list(argv),
                capture_output=True,
                text=True,
                # Undecodable bytes round-trip like os.fsdecode, so paths match discovery.
                errors="surrogateescape",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return Err(CommandFailure(argv, None, f"timed out after {self._timeout:g}s"))
        except OSError as exc:
            return Err(CommandFailure(argv, None, str(exc)))
        if completed.returncode != 0:
            return Err(CommandFailure(argv, completed.returncode, completed.stderr or ""))
        return Ok(completed.stdout or "")

    def has_session(self, name: str) -> Result[str, CommandFailure]:
        return self.run("has-session", "-t", exact_target(name))

    def new_session(self, name: str, path: str, window: str) -> Result[str, CommandFailure]:
        return self.run("new-session", "-d", "-s", name, "-c", path, "-n", window)

    def new_window(self, session: str, window: str, path: str) -> Result[str, CommandFailure]:
        # A trailing colon targets the session, so tmux picks the next free index.
        return self.run("new-window", "-t", f"{exact_target(session)}:", "-n", window, "-c", path)

    def send_keys(self, session: str, window: str, keys: str) -> Result[str, CommandFailure]:
        """Type ``keys`` literally into the window, then press Enter."""
        target = exact_target(session, window)
        return self.run("send-keys", "-t", target, "-l", keys).and_then(
            lambda _: self.run("send-keys", "-t", target, "Enter")
        )

    def select_window(self, session: str, window: str) -> Result[str, CommandFailure]:
        return self.run("select-window", "-t", exact_target(session, window))

    def switch_client(self, name: str, client: str | None = None) -> Result[str, CommandFailure]:
        args = ["switch-client"]
        if client:
            args += ["-c", client]
        args += ["-t", exact_target(name)]
        return self.run(*args)

    def list_sessions(self) -> list[ActiveSession]:
        """Return running sessions; empty when no server is running."""
        listed = self.run("list-sessions", "-F", "#{session_name}:#{session_path}")
        if isinstance(listed, Err):
            logger.debug("No tmux sessions: %s", listed.err_value)
            return []
        return parse_sessions(listed.ok_value)

    def exec_attach(self, name: str) -> Result[None, CommandFailure]:
        """Replace this process with ``tmux attach-session``.

        On success the call does not return; ``Ok`` is only observed when the
        exec function has been replaced (tests).
        """
        argv = [self._binary, "attach-session", "-t", exact_target(name)]
        executable = shutil.which(self._binary)
        if executable is None:
            return Err(CommandFailure(tuple(argv), None, f"{self._binary} not found in PATH"))
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            self._exec(executable, argv)
        except OSError as exc:
            return Err(CommandFailure(tuple(argv), None, str(exc)))
        return Ok(None)


def inside_tmux(environ: Mapping[str, str] | None = None) -> bool:
    """True when running inside a tmux client."""
    env = os.environ if environ is None else environ
    return bool(env.get(TMUX_ENV_VAR))
