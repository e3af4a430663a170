"""Session lifecycle: reconcile the tmux session for a project and move the user into it."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from sesh.errors import AttachError, CreationError, QueryError, SeshError
from sesh.models.sessions import ActiveSession, CreationStep, SessionState

if TYPE_CHECKING:
    from sesh.config import Config
    from sesh.data.protocols import MultiplexerProtocol
    from sesh.data.tmux import CommandFailure
    from sesh.models.projects import Project

logger = logging.getLogger(__name__)

_INVALID_SESSION_CHARS = re.compile(r"[^a-zA-Z0-9_-]+")


def sanitize_session_name(name: str) -> str:
    """Turn a project name into a tmux-safe session name.

    Runs of characters outside ``[a-zA-Z0-9_-]`` become one hyphen, outer
    hyphens are trimmed and the result is lowercased. May return ``""``.
    """
    return _INVALID_SESSION_CHARS.sub("-", name).strip("-").lower()


class SessionManager:
    """Creates, attaches to and switches between project sessions.

    Session state lives in tmux only; every operation queries it afresh.
    """

    def __init__(
        self,
        tmux: MultiplexerProtocol,
        config: Config,
        *,
        inside_tmux: bool = False,
    ) -> None:
        self._tmux = tmux
        self._config = config
        self._inside_tmux = inside_tmux

    @property
    def inside_tmux(self) -> bool:
        return self._inside_tmux

    def session_exists(self, name: str) -> Result[bool, QueryError]:
        checked = self._tmux.has_session(name)
        if isinstance(checked, Ok):
            return Ok(True)
        failure = checked.err_value
        # has-session exits 1 both for "no such session" and "no server running"
        if failure.returncode == 1:
            return Ok(False)
        return Err(QueryError(f"error checking session '{name}': {failure}"))

    def create_session(self, project: Project) -> Result[str, CreationError]:
        """Create the session with editor, assistant and shell windows.

        Steps are not rolled back on failure; a half-built session is reused by
        the next invocation.
        """
        name = sanitize_session_name(project.name)
        editor = self._config.editor_window
        assistant = self._config.assistant_window
        shell = self._config.shell_window
        tmux = self._tmux

        steps: list[tuple[CreationStep, Callable[[], Result[str, CommandFailure]]]] = [
            (CreationStep.NEW_SESSION, lambda: tmux.new_session(name, project.path, editor.name)),
        ]
        if editor.command:
            steps.append(
                (
                    CreationStep.SEND_EDITOR_COMMAND,
                    lambda: tmux.send_keys(name, editor.name, editor.command),
                )
            )
        steps.append(
            (
                CreationStep.NEW_ASSISTANT_WINDOW,
                lambda: tmux.new_window(name, assistant.name, project.path),
            )
        )
        if assistant.command:
            steps.append(
                (
                    CreationStep.SEND_ASSISTANT_COMMAND,
                    lambda: tmux.send_keys(name, assistant.name, assistant.command),
                )
            )
        steps.append(
            (CreationStep.NEW_SHELL_WINDOW, lambda: tmux.new_window(name, shell.name, project.path))
        )
        if shell.command:
            steps.append(
                (
                    CreationStep.SEND_SHELL_COMMAND,
                    lambda: tmux.send_keys(name, shell.name, shell.command),
                )
            )
        # Window creation order does not decide focus, so pick the editor last.
        steps.append(
            (CreationStep.SELECT_EDITOR_WINDOW, lambda: tmux.select_window(name, editor.name))
        )

        for step, action in steps:
            outcome = action()
            if isinstance(outcome, Err):
                return Err(self._creation_error(name, step, outcome.err_value))
        logger.info("Created session %s at %s", name, project.path)
        return Ok(name)

    def _creation_error(
        self, name: str, step: CreationStep, failure: CommandFailure
    ) -> CreationError:
        recoverable = False
        if step is CreationStep.NEW_SESSION:
            # Another invocation may have created it between our check and now.
            recheck = self.session_exists(name)
            recoverable = isinstance(recheck, Ok) and recheck.ok_value
        return CreationError(step, str(failure), recoverable=recoverable)

    def attach(self, name: str) -> Result[None, AttachError]:
        """Replace the current process with a tmux client attached to ``name``.

        Only returns on failure, unless exec has been stubbed out.
        """
        attached = self._tmux.exec_attach(name)
        if isinstance(attached, Err):
            return Err(AttachError(f"failed to attach to session '{name}': {attached.err_value}"))
        return Ok(None)

    def switch_to(self, name: str, client: str | None = None) -> Result[None, AttachError]:
        """Point an existing tmux client at ``name``.

        ``client`` names a specific client, for pickers launched outside the
        client they should redirect; otherwise tmux uses the current one.
        """
        switched = self._tmux.switch_client(name, client)
        if isinstance(switched, Err):
            return Err(AttachError(f"failed to switch to session '{name}': {switched.err_value}"))
        return Ok(None)

    def enter(self, name: str, client: str | None = None) -> Result[SessionState, AttachError]:
        """Switch when already inside tmux (or given a client), attach otherwise."""
        if self._inside_tmux or client:
            entered = self.switch_to(name, client)
        else:
            entered = self.attach(name)
        if isinstance(entered, Err):
            return entered
        return Ok(SessionState.ATTACHED)

    def get_or_create(
        self,
        project: Project,
        client: str | None = None,
        *,
        announce: Callable[[str], None] | None = None,
    ) -> Result[SessionState, SeshError]:
        """Make sure the project's session exists, then move the user into it.

        Calling this twice for the same project creates the session once.
        """
        if not self._tmux.is_available():
            return Err(AttachError("tmux is not installed. Please install tmux first"))

        name = sanitize_session_name(project.name)
        exists = self.session_exists(name)
        if isinstance(exists, Err):
            return exists

        if exists.ok_value:
            _announce(announce, f"Attaching to existing session '{name}'...")
        else:
            _announce(announce, f"Creating new session '{name}'...")
            created = self.create_session(project)
            if isinstance(created, Err):
                error = created.err_value
                if not error.recoverable:
                    return created
                logger.warning("Session '%s' was created concurrently (%s); reusing it", name, error)

        return self.enter(name, client)

    def list_active(self) -> list[ActiveSession]:
        return self._tmux.list_sessions()


def _announce(announce: Callable[[str], None] | None, message: str) -> None:
    logger.info("%s", message)
    if announce is not None:
        announce(message)
