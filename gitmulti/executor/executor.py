from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from pathlib import Path

from .runner import ProcessGroup, run_command
from .types import RepoResult, RunResult

logger = logging.getLogger(__name__)

Runner = Callable[..., RepoResult]


class ParallelExecutor:
    """Run one command in many repositories at once.

    The worker pool is the permit pool: ``workers`` threads when a limit is
    given, one per repository otherwise. With ``fail_fast`` the first failure
    cancels every task that has not started yet and terminates the child
    processes still running; their slots stay ``None``.
    """

    def __init__(
        self,
        args: Sequence[str],
        *,
        workers: int = 0,
        fail_fast: bool = False,
        executable: str = "git",
        runner: Runner = run_command,
    ):
        if workers < 0:
            raise ValueError(f"workers must be >= 0, got {workers}")

        self.args = list(args)
        self.workers = workers
        self.fail_fast = fail_fast
        self.executable = executable
        self.runner = runner

    def run(self, repos: Sequence[Path]) -> RunResult:
        repos = list(repos)
        results: list[RepoResult | None] = [None] * len(repos)

        if not repos:
            return RunResult(repos, results)

        pool_size = self.workers if self.workers > 0 else len(repos)
        cancel = threading.Event()
        slots_lock = threading.Lock()
        group = ProcessGroup()
        futures: list[Future[None]] = []

        def task(idx: int, repo: Path) -> None:
            if cancel.is_set():
                return

            result = self.runner(
                repo, self.args, executable=self.executable, group=group
            )

            with slots_lock:
                if cancel.is_set():
                    return
                results[idx] = result
                if result.success or not self.fail_fast:
                    return
                cancel.set()

            for future in list(futures):
                future.cancel()
            terminated = group.terminate_all()
            logger.info(
                "Fail-fast triggered by %s, terminated %d running command(s)",
                result.name,
                terminated,
            )

        logger.debug(
            "Running %s in %d repositories with %d workers",
            [self.executable, *self.args],
            len(repos),
            pool_size,
        )
        with ThreadPoolExecutor(
            max_workers=pool_size, thread_name_prefix="gitmulti"
        ) as pool:
            for i, repo in enumerate(repos):
                futures.append(pool.submit(task, i, repo))

            try:
                for future in futures:
                    try:
                        future.result()
                    except CancelledError:
                        continue
            except KeyboardInterrupt:
                cancel.set()
                pool.shutdown(wait=False, cancel_futures=True)
                group.terminate_all()
                raise

        return RunResult(repos, results, stopped_early=cancel.is_set())
