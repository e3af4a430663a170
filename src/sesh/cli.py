"""Typer CLI for sesh — interactive picker, list, connect and switch commands."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Sequence
from typing import Annotated, NoReturn

import typer
from result import Err, Ok, Result

from sesh import __version__
from sesh.config import load_config
from sesh.errors import ConfigError, SeshError
from sesh.models.projects import DiscoveryWarning, Project
from sesh.services.container import ServiceContainer
from sesh.services.protocols import ProjectServiceProtocol, SessionManagerProtocol
from sesh.ui.selector import select_project

# Set by launchers (e.g. a global hotkey) that run the picker outside the
# tmux client it should redirect.
CLIENT_ENV_VAR = "SESH_TMUX_CLIENT"

COMMANDS = ("list", "connect", "switch", "help", "version")

# Global options that consume the following argument.
VALUE_OPTIONS = ("--client",)

app = typer.Typer(
    name="sesh",
    help="Smart tmux session manager — pick a project and land in its session.",
    invoke_without_command=True,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=(
        "Examples: `sesh` opens the picker; `sesh my-api` connects directly; "
        "`sesh list | fzf` feeds an external finder; `sesh switch` jumps between open sessions."
    ),
)

ClientOption = Annotated[
    str | None,
    typer.Option(
        "--client",
        envvar=CLIENT_ENV_VAR,
        help="tmux client to switch instead of the current one",
    ),
]

Outcome = Result[None, SeshError | str]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sesh v{__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def interactive(
    ctx: typer.Context,
    client: ClientOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show debug logging")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = False,
) -> None:
    """Pick a project interactively and open its tmux session."""
    _configure_logging(verbose)
    ctx.obj = client
    if ctx.invoked_subcommand is not None:
        return
    container = _build_container()
    _exit_on_err(_run_interactive(container, client))


@app.command("list")
def list_command(
    tmux_only: Annotated[
        bool, typer.Option("-t", "--tmux", help="List only active tmux sessions")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="List projects as JSON")] = False,
) -> None:
    """List all projects (one per line)."""
    container = _build_container()
    if tmux_only:
        for session in container.session_manager.list_active():
            typer.echo(session.name)
        return

    listed = container.project_service.list_projects()
    if isinstance(listed, Err):
        _fail(listed.err_value)
    _echo_warnings(listed.ok_value.warnings)
    projects = listed.ok_value.projects

    if json_output:
        payload = [project.model_dump(include={"name", "path"}) for project in projects]
        typer.echo(json.dumps(payload, indent=2))
        return
    for project in projects:
        typer.echo(project.name)


@app.command()
def connect(
    ctx: typer.Context,
    name: Annotated[list[str], typer.Argument(help="Project name (exact, session name or prefix)")],
    client: ClientOption = None,
) -> None:
    """Connect to a project by name."""
    container = _build_container()
    _exit_on_err(
        _run_connect(
            container.project_service,
            container.session_manager,
            " ".join(name),
            client or ctx.obj,
        )
    )


@app.command()
def switch(ctx: typer.Context, client: ClientOption = None) -> None:
    """Pick among active tmux sessions only."""
    container = _build_container()
    _exit_on_err(_run_switch(container.session_manager, client or ctx.obj))


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show this help."""
    parent = ctx.parent or ctx
    typer.echo(parent.get_help())


@app.command()
def version() -> None:
    """Show the version."""
    typer.echo(f"sesh v{__version__}")


def _run_interactive(container: ServiceContainer, client: str | None) -> Outcome:
    listed = container.project_service.list_projects()
    if isinstance(listed, Err):
        return listed
    _echo_warnings(listed.ok_value.warnings)
    projects = listed.ok_value.projects

    if not projects:
        config = container.config
        directories = "\n".join(f"  - {d}" for d in config.project_directories)
        return Err(
            "no Git projects found in configured directories.\n\n"
            f"Configured directories:\n{directories}\n\n"
            f"Edit your config at: {config.config_path}"
        )

    selected = select_project(projects)
    if selected is None:
        return Ok(None)
    return _open_project(container.project_service, container.session_manager, selected, client)


def _run_connect(
    projects: ProjectServiceProtocol,
    sessions: SessionManagerProtocol,
    name: str,
    client: str | None,
) -> Outcome:
    listed = projects.list_projects()
    if isinstance(listed, Err):
        return listed
    _echo_warnings(listed.ok_value.warnings)

    resolved = projects.resolve(name, listed.ok_value.projects)
    if isinstance(resolved, Err):
        return resolved
    return _open_project(projects, sessions, resolved.ok_value, client)


def _run_switch(sessions: SessionManagerProtocol, client: str | None) -> Outcome:
    active = sessions.list_active()
    if not active:
        return Err("no active tmux sessions")

    choices = [Project(name=session.name, path=session.path) for session in active]
    selected = select_project(choices, title="Select a session", empty_message="No sessions!")
    if selected is None:
        return Ok(None)

    entered = sessions.enter(selected.name, client)
    if isinstance(entered, Err):
        return entered
    return Ok(None)


def _open_project(
    projects: ProjectServiceProtocol,
    sessions: SessionManagerProtocol,
    project: Project,
    client: str | None,
) -> Outcome:
    # Record first: attaching replaces this process.
    projects.record_visit(project)
    reconciled = sessions.get_or_create(project, client, announce=typer.echo)
    if isinstance(reconciled, Err):
        return reconciled
    return Ok(None)


def _build_container() -> ServiceContainer:
    try:
        config = load_config()
    except ConfigError as exc:
        _fail(f"failed to load config: {exc}")
    return ServiceContainer.create(config)


def _echo_warnings(warnings: Sequence[DiscoveryWarning]) -> None:
    for warning in warnings:
        typer.echo(f"Warning: {warning}", err=True)


def _exit_on_err(outcome: Outcome) -> None:
    if isinstance(outcome, Err):
        _fail(outcome.err_value)


def _fail(error: SeshError | str) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def route_args(args: Sequence[str]) -> list[str]:
    """Treat ``sesh [options] <name>`` as ``sesh [options] connect <name>``."""
    routed = list(args)
    index = 0
    while index < len(routed) and routed[index].startswith("-"):
        if routed[index] == "--":
            return routed
        index += 2 if routed[index] in VALUE_OPTIONS else 1
    if index < len(routed) and routed[index] not in COMMANDS:
        routed.insert(index, "connect")
    return routed


def main() -> None:
    """Console-script entry point."""
    app(args=route_args(sys.argv[1:]), prog_name="sesh")
