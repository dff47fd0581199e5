from dataclasses import dataclass
from pathlib import Path

from gitmulti.errors import GitMultiError

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "vendor",
    "node_modules",
    ".idea",
    ".vscode",
    "bin",
    "build",
    "dist",
)

EXCLUDE_MATCH_MODES = ("segment", "substring")


@dataclass(frozen=True)
class Settings:
    """Values read from a settings file. ``None`` means "not set"."""

    path: str | None = None
    exclude: tuple[str, ...] = ()
    workers: int | None = None
    verbose: bool | None = None
    fail_fast: bool | None = None
    executable: str | None = None
    exclude_match: str | None = None


@dataclass(frozen=True)
class RunConfig:
    root: Path
    excludes: frozenset[str]
    workers: int = 0
    verbose: bool = False
    fail_fast: bool = False
    executable: str = "git"
    exclude_match: str = "segment"


class ConfigError(GitMultiError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class MissingRootError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
