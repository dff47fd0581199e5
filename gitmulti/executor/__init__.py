from .executor import ParallelExecutor
from .runner import ProcessGroup, run_command
from .types import RepoResult, RunResult

__all__ = ["ParallelExecutor", "ProcessGroup", "run_command", "RepoResult", "RunResult"]
