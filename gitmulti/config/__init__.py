from .loader import build_exclude_set, build_run_config, load_settings
from .types import (
    DEFAULT_EXCLUDES,
    ConfigError,
    MissingRootError,
    RunConfig,
    Settings,
    UnsupportedConfigFormatError,
)

__all__ = [
    "build_exclude_set",
    "build_run_config",
    "load_settings",
    "DEFAULT_EXCLUDES",
    "ConfigError",
    "MissingRootError",
    "RunConfig",
    "Settings",
    "UnsupportedConfigFormatError",
]
