"""Keyboard-driven picker for projects and sessions."""

from __future__ import annotations

from collections.abc import Sequence

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from sesh.models.projects import Project
from sesh.ui.fuzzy import fuzzy_filter

HELP_TEXT = "↑/ctrl+p up • ↓/ctrl+n down • enter select • esc quit"


def project_label(project: Project) -> Text:
    return Text.assemble((project.name, "bold"), "  ", (project.path, "italic #888888"))


class ProjectSelector(App[Project | None]):
    """Fuzzy-filtered project list that exits with the chosen project or None."""

    CSS = """
    Screen {
        padding: 1 2;
    }
    #title {
        color: #7D56F4;
        text-style: bold;
        margin-bottom: 1;
    }
    #results {
        height: 1fr;
    }
    #status {
        color: #FF0000;
        text-style: bold;
    }
    #help {
        color: #626262;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("ctrl+c", "cancel", "Cancel", show=False, priority=True),
        Binding("up", "cursor_up", show=False, priority=True),
        Binding("ctrl+p", "cursor_up", show=False, priority=True),
        Binding("down", "cursor_down", show=False, priority=True),
        Binding("ctrl+n", "cursor_down", show=False, priority=True),
    ]

    def __init__(
        self,
        projects: Sequence[Project],
        *,
        title: str = "Select a project",
        empty_message: str = "No Git projects found!",
    ) -> None:
        super().__init__()
        self._projects = list(projects)
        self._filtered = list(projects)
        self._title = title
        self._empty_message = empty_message

    @property
    def filtered(self) -> list[Project]:
        return list(self._filtered)

    def compose(self) -> ComposeResult:
        yield Static(self._title, id="title")
        yield Input(placeholder="Search projects...", id="search")
        yield Static("", id="status")
        yield OptionList(id="results")
        yield Static(HELP_TEXT, id="help")

    def on_mount(self) -> None:
        self._show(self._projects)
        self.query_one("#search", Input).focus()

    @on(Input.Changed, "#search")
    def _search_changed(self, event: Input.Changed) -> None:
        self._show(fuzzy_filter(event.value, self._projects))

    @on(Input.Submitted, "#search")
    def _search_submitted(self, _event: Input.Submitted) -> None:
        self.action_choose()

    @on(OptionList.OptionSelected, "#results")
    def _option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(self._filtered[event.option_index])

    def _show(self, projects: list[Project]) -> None:
        self._filtered = projects
        results = self.query_one("#results", OptionList)
        results.clear_options()
        results.add_options([Option(project_label(p)) for p in projects])
        if projects:
            results.highlighted = 0

        status = self.query_one("#status", Static)
        if not self._projects:
            status.update(self._empty_message)
        elif not projects:
            status.update("No matches found")
        else:
            status.update("")

    def action_cursor_up(self) -> None:
        self.query_one("#results", OptionList).action_cursor_up()

    def action_cursor_down(self) -> None:
        self.query_one("#results", OptionList).action_cursor_down()

    def action_choose(self) -> None:
        highlighted = self.query_one("#results", OptionList).highlighted
        if highlighted is None or highlighted >= len(self._filtered):
            return
        self.exit(self._filtered[highlighted])

    def action_cancel(self) -> None:
        self.exit(None)


def select_project(
    projects: Sequence[Project],
    *,
    title: str = "Select a project",
    empty_message: str = "No Git projects found!",
) -> Project | None:
    """Run the picker; return the chosen project, or None when cancelled."""
    return ProjectSelector(projects, title=title, empty_message=empty_message).run()
