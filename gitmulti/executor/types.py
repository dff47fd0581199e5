from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RepoResult:
    path: Path
    name: str
    success: bool
    output: str
    error: str | None = None
    returncode: int | None = None


@dataclass(frozen=True)
class RunResult:
    repos: list[Path]
    # One slot per repository, in discovery order. ``None`` means the command
    # never ran or was cut short by fail-fast.
    results: list[RepoResult | None]
    stopped_early: bool = False

    @property
    def completed(self) -> list[RepoResult]:
        return [r for r in self.results if r is not None]

    @property
    def failed(self) -> list[RepoResult]:
        return [r for r in self.completed if not r.success]

    @property
    def succeeded(self) -> list[RepoResult]:
        return [r for r in self.completed if r.success]
