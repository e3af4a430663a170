"""Session-level models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class SessionState(Enum):
    """Where reconciliation stands for one project within an invocation."""

    NO_SESSION = "no_session"
    SESSION_READY = "session_ready"
    ATTACHED = "attached"


class CreationStep(Enum):
    """Ordered steps of building a new session."""

    NEW_SESSION = ("new_session", "create tmux session")
    SEND_EDITOR_COMMAND = ("send_editor_command", "send editor command")
    NEW_ASSISTANT_WINDOW = ("new_assistant_window", "create assistant window")
    SEND_ASSISTANT_COMMAND = ("send_assistant_command", "send assistant command")
    NEW_SHELL_WINDOW = ("new_shell_window", "create shell window")
    SEND_SHELL_COMMAND = ("send_shell_command", "send shell command")
    SELECT_EDITOR_WINDOW = ("select_editor_window", "select editor window")

    def __init__(self, key: str, description: str) -> None:
        self.key = key
        self.description = description


@dataclass(frozen=True, slots=True)
class WindowSpec:
    """A named window and the command typed into it on creation."""

    name: str
    command: str = ""


class ActiveSession(BaseModel):
    """A tmux session reported by ``list-sessions``."""

    name: str
    path: str = ""
