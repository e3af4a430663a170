"""Tests for the project service."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import pytest
from conftest import FakeOracle, make_repo
from result import Err, Ok

from sesh.data.recent_cache import RecencyCache
from sesh.errors import NotFound
from sesh.models.projects import DiscoveryResult, Project
from sesh.services.container import ServiceContainer
from sesh.services.project_service import ProjectService
from sesh.services.ranking import FrecencyRanker


def _service(tmp_path: Path, oracle: FakeOracle | None = None) -> ProjectService:
    oracle = oracle or FakeOracle()
    cache = RecencyCache(tmp_path / "cache" / "recent.json")
    return ProjectService([tmp_path], FrecencyRanker(oracle, cache), cache, oracle)


def _projects(*names: str) -> list[Project]:
    return [Project(name=name, path=f"/dev/{name}") for name in names]


def test_list_projects_is_ranked(container: ServiceContainer, dev_dir: Path) -> None:
    make_repo(dev_dir, "alpha")
    beta = make_repo(dev_dir, "beta")
    gamma = make_repo(dev_dir, "gamma")
    container.zoxide.scores = {str(beta): 5.0}  # type: ignore[attr-defined]
    container.recent.add("gamma", str(gamma))

    listed = container.project_service.list_projects()

    assert isinstance(listed, Ok)
    ranked = listed.ok_value.projects
    assert [p.name for p in ranked] == ["gamma", "beta", "alpha"]
    assert [p.score for p in ranked] == [10000.0, 5.0, 0.0]
    assert listed.ok_value.warnings == []


def test_list_projects_reports_warnings(tmp_path: Path) -> None:
    oracle = FakeOracle()
    cache = RecencyCache(tmp_path / "recent.json")
    missing = tmp_path / "missing"
    service = ProjectService([missing], FrecencyRanker(oracle, cache), cache, oracle)

    listed = service.list_projects()

    assert isinstance(listed, Ok)
    assert listed.ok_value.projects == []
    assert [w.directory for w in listed.ok_value.warnings] == [str(missing)]


def test_list_projects_discovery_failure(tmp_path: Path) -> None:
    def broken(_directories: Sequence[Path]) -> DiscoveryResult:
        raise PermissionError(13, "Permission denied")

    oracle = FakeOracle()
    cache = RecencyCache(tmp_path / "recent.json")
    service = ProjectService([tmp_path], FrecencyRanker(oracle, cache), cache, oracle, broken)

    listed = service.list_projects()

    assert isinstance(listed, Err)
    assert listed.err_value.startswith("Failed to find projects:")


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("api", "api"),
        ("API", "api"),
        ("my-project", "My Project"),
        ("my project", "My Project"),
        ("we", "web-app"),
        ("WEB", "web-app"),
    ],
)
def test_resolve(tmp_path: Path, query: str, expected: str) -> None:
    projects = _projects("api-gateway", "api", "My Project", "web-app")
    resolved = _service(tmp_path).resolve(query, projects)
    assert isinstance(resolved, Ok)
    assert resolved.ok_value.name == expected


def test_resolve_prefix_takes_first_in_order(tmp_path: Path) -> None:
    projects = _projects("api-v2", "api-v1")
    resolved = _service(tmp_path).resolve("api", projects)
    assert isinstance(resolved, Ok)
    assert resolved.ok_value.name == "api-v2"


def test_resolve_not_found_lists_candidates(tmp_path: Path) -> None:
    resolved = _service(tmp_path).resolve("zzz", _projects("api", "web"))

    assert isinstance(resolved, Err)
    error = resolved.err_value
    assert isinstance(error, NotFound)
    assert error.candidates == ["api", "web"]
    assert str(error) == "project not found: zzz\n\nAvailable projects:\n  - api\n  - web"


def test_record_visit_saves_cache_and_tells_oracle(tmp_path: Path) -> None:
    oracle = FakeOracle()
    service = _service(tmp_path, oracle)

    service.record_visit(Project(name="api", path="/dev/api"))

    reloaded = RecencyCache.load(tmp_path / "cache" / "recent.json")
    assert [e.path for e in reloaded.entries] == ["/dev/api"]
    assert oracle.added == ["/dev/api"]


def test_record_visit_survives_unwritable_cache(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    oracle = FakeOracle()
    cache = RecencyCache(blocker / "recent.json")
    service = ProjectService([tmp_path], FrecencyRanker(oracle, cache), cache, oracle)

    service.record_visit(Project(name="api", path="/dev/api"))

    assert [e.path for e in cache.entries] == ["/dev/api"]
    assert oracle.added == ["/dev/api"]


def test_record_visit_survives_undecodable_project_name(tmp_path: Path) -> None:
    oracle = FakeOracle()
    service = _service(tmp_path, oracle)
    path = os.fsdecode(b"/dev/caf\xe9")

    service.record_visit(Project.from_path(path))

    assert oracle.added == [path]
    assert not (tmp_path / "cache" / "recent.json").exists()
