"""Configuration for sesh."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sesh.errors import ConfigError
from sesh.models.sessions import WindowSpec

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"

DEFAULT_CONFIG_YAML = """\
# sesh configuration
# List directories where your Git projects are located

project_directories:
  - ~/dev

# Seconds to wait for any tmux or zoxide command before giving up.
# command_timeout: 5

# Windows created for every new session. The editor window is focused.
# windows:
#   editor:
#     name: neovim
#     command: nvim .
#   assistant:
#     name: opencode
#     command: opencode .
#   shell:
#     name: zsh
"""


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "sesh"


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    project_directories: tuple[Path, ...] = field(default_factory=lambda: (Path.home() / "dev",))
    config_dir: Path = field(default_factory=_default_config_dir)
    cache_dir: Path = field(default_factory=lambda: Path.home() / ".cache" / "sesh")
    command_timeout: float = 5.0
    editor_window: WindowSpec = WindowSpec("neovim", "nvim .")
    assistant_window: WindowSpec = WindowSpec("opencode", "opencode .")
    shell_window: WindowSpec = WindowSpec("zsh")
    tmux_binary: str = "tmux"
    zoxide_binary: str = "zoxide"

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    @property
    def recent_path(self) -> Path:
        return self.cache_dir / "recent.json"


class _WindowSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    command: str | None = None

    def merged(self, default: WindowSpec) -> WindowSpec:
        return WindowSpec(
            name=self.name if self.name else default.name,
            command=default.command if self.command is None else self.command,
        )


class _WindowsSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    editor: _WindowSettings = Field(default_factory=_WindowSettings)
    assistant: _WindowSettings = Field(default_factory=_WindowSettings)
    shell: _WindowSettings = Field(default_factory=_WindowSettings)


class ConfigFile(BaseModel):
    """Validated contents of ``config.yaml``."""

    model_config = ConfigDict(extra="ignore")

    project_directories: list[str] = Field(default_factory=lambda: ["~/dev"])
    command_timeout: float = Field(default=5.0, gt=0)
    windows: _WindowsSettings = Field(default_factory=_WindowsSettings)


def expand_path(path: str) -> Path:
    """Expand a leading ``~`` to the user's home directory."""
    return Path(path).expanduser()


def load_config(config_dir: Path | None = None, cache_dir: Path | None = None) -> Config:
    """Read ``config.yaml``, writing the default file on first run.

    Raises:
        ConfigError: The file cannot be created, read or parsed, or holds
            invalid values.
    """
    config_dir = config_dir or _default_config_dir()
    config_path = config_dir / CONFIG_FILENAME

    if not config_path.exists():
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            config_path.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"failed to create default config {config_path}: {exc}") from exc
        logger.info("Wrote default config to %s", config_path)

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"failed to read config {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse config {config_path}: {exc}") from exc

    try:
        settings = ConfigFile.model_validate(raw or {})
    except ValidationError as exc:
        raise ConfigError(f"invalid config {config_path}: {exc}") from exc

    defaults = Config()
    return Config(
        project_directories=tuple(expand_path(d) for d in settings.project_directories),
        config_dir=config_dir,
        cache_dir=cache_dir or defaults.cache_dir,
        command_timeout=settings.command_timeout,
        editor_window=settings.windows.editor.merged(defaults.editor_window),
        assistant_window=settings.windows.assistant.merged(defaults.assistant_window),
        shell_window=settings.windows.shell.merged(defaults.shell_window),
    )
