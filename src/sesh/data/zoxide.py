"""Client for the zoxide frecency database."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable

from result import Err, Ok, Result

from sesh.errors import OracleUnavailable

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess[str]]


def parse_scores(output: str) -> dict[str, float]:
    """Parse ``zoxide query -l -s`` output (``"<score> <path>"`` per line)."""
    scores: dict[str, float] = {}
    for line in output.splitlines():
        parts = line.strip().split(maxsplit=1)
        if len(parts) != 2:
            continue
        try:
            score = float(parts[0])
        except ValueError:
            continue
        scores[parts[1]] = score
    return scores


class ZoxideClient:
    """Reads path scores from zoxide and records visits.

    Both operations are best-effort: zoxide is optional.
    """

    def __init__(
        self,
        binary: str = "zoxide",
        timeout: float = 5.0,
        runner: Runner = subprocess.run,
    ) -> None:
        self._binary = binary
        self._timeout = timeout
        self._run = runner

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    def query_scores(self) -> Result[dict[str, float], OracleUnavailable]:
        """Return every tracked path with its score."""
        if not self.is_available():
            return Err(OracleUnavailable(f"{self._binary} not found in PATH"))
        try:
            completed = self._invoke("query", "-l", "-s")
        except (OSError, subprocess.TimeoutExpired) as exc:
            return Err(OracleUnavailable(f"{self._binary} query failed: {exc}"))
        if completed.returncode != 0:
            # zoxide exits non-zero when its database is still empty
            return Err(OracleUnavailable(f"{self._binary} query exited {completed.returncode}"))
        return Ok(parse_scores(completed.stdout))

    def add(self, path: str) -> None:
        """Record a visit to ``path``. Failures are logged and ignored."""
        if not self.is_available():
            return
        try:
            completed = self._invoke("add", path)
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("zoxide add %s failed: %s", path, exc)
            return
        if completed.returncode != 0:
            logger.debug("zoxide add %s exited %d", path, completed.returncode)

    def _invoke(self, *args: str) -> subprocess.CompletedProcess[str]:
        return self._run(
            [self._binary, *args],
            capture_output=True,
            text=True,
            # Undecodable bytes round-trip like os.fsdecode, so paths match discovery.
            errors="surrogateescape",
            timeout=self._timeout,
        )
