"""Console output and logging configuration.

    - console: Rich console for stdout
    - stderr_console: Rich console for stderr
    - setup_logging(): route logging through a Rich handler on stderr
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(highlight=False, soft_wrap=True)
stderr_console = Console(stderr=True, highlight=False, soft_wrap=True)


def _normalize_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return int(level)


def setup_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Configure logging with a Rich handler and return the package logger."""
    numeric_level = _normalize_level(level)

    handler = RichHandler(
        console=stderr_console,
        rich_tracebacks=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(numeric_level)

    logger = logging.getLogger("gitmulti")
    logger.handlers.clear()
    logger.setLevel(numeric_level)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_console(stderr: bool = False) -> Console:
    return stderr_console if stderr else console
