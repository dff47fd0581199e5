from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.text import Text

from gitmulti.config import (
    MissingRootError,
    RunConfig,
    build_run_config,
    load_settings,
)
from gitmulti.console import get_console, setup_logging
from gitmulti.discovery import DiscoveryError, discover_repos
from gitmulti.errors import GitMultiError
from gitmulti.executor import ParallelExecutor, RunResult
from gitmulti.report import format_output, print_summary

from .args import build_parser

logger = logging.getLogger(__name__)


def main() -> None:
    sys.exit(run_cli())


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not args.git_args:
        print_usage(parser)
        return 1

    try:
        config = _config_from(args)
        return cmd_run(config, args.git_args)

    except DiscoveryError as exc:
        _error(f"Error: Failed to discover repositories: {exc}")
        return 1

    except MissingRootError as exc:
        _error(f"Error: {exc}")
        get_console(stderr=True).print(
            "Use --path flag to specify the correct directory"
        )
        return 1

    except GitMultiError as exc:
        _error(f"Error: {exc}")
        return 1

    except KeyboardInterrupt:
        return 130


def cmd_run(config: RunConfig, git_args: list[str]) -> int:
    console = get_console()

    console.print("Discovering git repositories...", style="blue")
    repos = discover_repos(
        config.root, config.excludes, match=config.exclude_match
    )

    if not repos:
        console.print("No git repositories found", style="yellow")
        return 0

    console.print(f"Found {len(repos)} repositories\n", style="blue")
    console.print(
        Text(f"Executing: {config.executable} {' '.join(git_args)}\n", style="blue")
    )

    rr = _run_with(config, git_args, repos)
    succeeded, failed = format_output(rr.results, config.verbose, console)

    if rr.stopped_early:
        _error("\nFail-fast enabled, stopping execution")
        return 1

    print_summary(succeeded, failed, console)
    return 1 if failed else 0


def print_usage(parser: argparse.ArgumentParser) -> None:
    console = get_console()
    console.print(
        "git-multi - Execute git commands across multiple repositories\n",
        style="blue",
    )
    console.print(Text(parser.format_help()))


def _config_from(args: argparse.Namespace) -> RunConfig:
    settings = load_settings(args.config) if args.config else None
    return build_run_config(
        path=args.path,
        exclude=args.exclude,
        workers=args.workers,
        verbose=args.verbose,
        fail_fast=args.fail_fast,
        executable=args.executable,
        settings=settings,
    )


def _run_with(
    config: RunConfig, git_args: list[str], repos: list[Path]
) -> RunResult:
    executor = ParallelExecutor(
        git_args,
        workers=config.workers,
        fail_fast=config.fail_fast,
        executable=config.executable,
    )
    rr = executor.run(repos)
    logger.debug(
        "Run finished: %d completed, %d failed, stopped early: %s",
        len(rr.completed),
        len(rr.failed),
        rr.stopped_early,
    )
    return rr


def _error(message: str) -> None:
    get_console(stderr=True).print(Text(message, style="red"))
