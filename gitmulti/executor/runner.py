from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Sequence
from pathlib import Path

from .types import RepoResult

logger = logging.getLogger(__name__)


class ProcessGroup:
    """Live child processes of one run, so fail-fast can stop them."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._procs: set[subprocess.Popen[str]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, proc: subprocess.Popen[str]) -> bool:
        """Track ``proc``. Returns False once the group has been terminated."""
        with self._lock:
            if self._closed:
                return False
            self._procs.add(proc)
            return True

    def discard(self, proc: subprocess.Popen[str]) -> None:
        with self._lock:
            self._procs.discard(proc)

    def terminate_all(self) -> int:
        with self._lock:
            self._closed = True
            procs = list(self._procs)

        terminated = 0
        for proc in procs:
            if proc.poll() is None:
                proc.terminate()
                terminated += 1
        return terminated


def run_command(
    repo: str | Path,
    args: Sequence[str],
    *,
    executable: str = "git",
    group: ProcessGroup | None = None,
) -> RepoResult:
    repo = Path(repo)
    cmd = [executable, *args]
    logger.debug("Running %s in %s", cmd, repo)

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=repo,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        logger.debug("Could not start %s in %s: %s", executable, repo, exc)
        return RepoResult(repo, repo.name, False, "", error=str(exc))

    if group is not None and not group.add(proc):
        proc.terminate()

    try:
        stdout, stderr = proc.communicate()
    finally:
        if group is not None:
            group.discard(proc)

    output = _combine(stdout, stderr)
    if proc.returncode == 0:
        return RepoResult(repo, repo.name, True, output, returncode=0)

    return RepoResult(
        repo,
        repo.name,
        False,
        output,
        error=_describe_exit(proc.returncode),
        returncode=proc.returncode,
    )


def _combine(stdout: str, stderr: str) -> str:
    output = stdout
    if stderr:
        if output:
            output += "\n"
        output += stderr
    return output.strip()


def _describe_exit(returncode: int) -> str:
    if returncode < 0:
        return f"terminated by signal {-returncode}"
    return f"exit status {returncode}"
