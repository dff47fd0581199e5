import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .types import (
    DEFAULT_EXCLUDES,
    EXCLUDE_MATCH_MODES,
    ConfigError,
    MissingRootError,
    RunConfig,
    Settings,
    UnsupportedConfigFormatError,
)

logger = logging.getLogger(__name__)


def load_settings(path: str | Path) -> Settings:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    settings = _build_settings(raw_file)
    logger.debug("Loaded settings from %s: %s", pure_path, settings)
    return settings


def build_exclude_set(
    extra: str | None = None, configured: Iterable[str] = ()
) -> frozenset[str]:
    """Merge the built-in exclusions with configured and comma-separated ones."""
    excludes = set(DEFAULT_EXCLUDES)
    excludes.update(configured)

    if extra:
        for name in extra.split(","):
            name = name.strip()
            if name:
                excludes.add(name)

    return frozenset(excludes)


def build_run_config(
    *,
    path: str | None,
    exclude: str | None = None,
    workers: int | None = None,
    verbose: bool = False,
    fail_fast: bool = False,
    executable: str | None = None,
    settings: Settings | None = None,
) -> RunConfig:
    settings = settings or Settings()

    root_value = path if path else settings.path
    if not root_value:
        raise MissingRootError("No directory given: pass --path or set GMULTI_PATH")

    root = Path(root_value).expanduser()
    if not root.is_dir():
        raise MissingRootError(f"Directory does not exist: {root}")

    if workers is None:
        workers = settings.workers if settings.workers is not None else 0
    if workers < 0:
        raise ConfigError(f"workers must be >= 0, got {workers}")

    return RunConfig(
        root=root,
        excludes=build_exclude_set(exclude, settings.exclude),
        workers=workers,
        verbose=verbose or bool(settings.verbose),
        fail_fast=fail_fast or bool(settings.fail_fast),
        executable=executable or settings.executable or "git",
        exclude_match=settings.exclude_match or "segment",
    )


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    # An empty YAML document is an empty settings file
    if raw_file is None:
        return {}

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_settings(raw: Mapping[str, Any]) -> Settings:
    keys = {
        "path",
        "exclude",
        "workers",
        "verbose",
        "fail_fast",
        "executable",
        "exclude_match",
    }

    for field in raw.keys():
        if field not in keys:
            raise ConfigError(f"Can't process: {field}")

    path = _optional_str(raw, "path")
    executable = _optional_str(raw, "executable")

    exclude: list[str] = []
    if "exclude" in raw:
        if not isinstance(raw["exclude"], list):
            raise ConfigError("'exclude' should be a list of directory names")

        for item in raw["exclude"]:
            if not isinstance(item, str):
                raise ConfigError(f"{item} should be a string in the exclude list")

            name = item.strip()
            if len(name) < 1:
                raise ConfigError("An exclude entry is empty")

            # Allows to ignore duplicates
            if name not in exclude:
                exclude.append(name)

    workers = None
    if "workers" in raw:
        # bool is a subclass of int
        if not isinstance(raw["workers"], int) or isinstance(raw["workers"], bool):
            raise ConfigError("'workers' should be an integer")

        if raw["workers"] < 0:
            raise ConfigError("'workers' must be >= 0")

        workers = raw["workers"]

    verbose = _optional_bool(raw, "verbose")
    fail_fast = _optional_bool(raw, "fail_fast")

    exclude_match = _optional_str(raw, "exclude_match")
    if exclude_match is not None and exclude_match not in EXCLUDE_MATCH_MODES:
        raise ConfigError(
            f"'exclude_match' must be one of {', '.join(EXCLUDE_MATCH_MODES)}, got {exclude_match!r}"
        )

    return Settings(
        path=path,
        exclude=tuple(exclude),
        workers=workers,
        verbose=verbose,
        fail_fast=fail_fast,
        executable=executable,
        exclude_match=exclude_match,
    )


def _optional_str(raw: Mapping[str, Any], key: str) -> str | None:
    if key not in raw:
        return None

    if not isinstance(raw[key], str):
        raise ConfigError(f"'{key}' should be a string")

    if len(raw[key].strip()) < 1:
        raise ConfigError(f"'{key}': Please provide a string or remove this field")

    return raw[key].strip()


def _optional_bool(raw: Mapping[str, Any], key: str) -> bool | None:
    if key not in raw:
        return None

    if not isinstance(raw[key], bool):
        raise ConfigError(f"'{key}' should be true or false")

    return raw[key]
