"""Discover git projects under the configured directories."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from sesh.models.projects import DiscoveryResult, DiscoveryWarning, Project

logger = logging.getLogger(__name__)

SKIP_DIRS = frozenset(
    {
        "node_modules",
        "vendor",
        "target",
        "build",
        "dist",
        ".next",
        ".cache",
        "__pycache__",
        ".venv",
        "venv",
    }
)


def find_git_projects(directories: Iterable[Path]) -> DiscoveryResult:
    """Walk each directory and collect every folder that holds a ``.git`` directory.

    Missing or unreadable roots are reported as warnings and skipped; unreadable
    subdirectories are skipped silently.
    """
    result = DiscoveryResult()
    by_path: dict[str, Project] = {}

    for directory in directories:
        root = Path(directory)
        if not root.is_dir():
            logger.info("Directory does not exist: %s", root)
            result.warnings.append(DiscoveryWarning(str(root), "directory does not exist"))
            continue
        if not os.access(root, os.R_OK | os.X_OK):
            logger.info("Directory is not readable: %s", root)
            result.warnings.append(DiscoveryWarning(str(root), "directory is not readable"))
            continue

        for project in _walk(root):
            by_path.setdefault(project.path, project)

    result.projects = sorted(by_path.values(), key=lambda p: p.path)
    return result


def _walk(root: Path) -> Iterable[Project]:
    def on_error(exc: OSError) -> None:
        logger.debug("Skipping unreadable directory %s: %s", exc.filename, exc)

    for dirpath, dirnames, _filenames in os.walk(root, onerror=on_error):
        if ".git" in dirnames:
            yield Project.from_path(dirpath)
        # Prune in place so os.walk never descends into these.
        dirnames[:] = sorted(d for d in dirnames if d != ".git" and d not in SKIP_DIRS)
