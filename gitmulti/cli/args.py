from __future__ import annotations

import argparse
import os

from gitmulti import __version__

EXAMPLES = """\
Examples:
  git-multi checkout develop
  git-multi pull
  git-multi status
  git-multi fetch --all
  git-multi --path=/custom/path/to/workspace checkout develop
  git-multi --exclude="tools,game_proto" checkout feature-123
  git-multi --workers=5 pull
  git-multi --verbose status
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-multi",
        description="Execute git commands across multiple repositories",
        usage="%(prog)s [options] <git-command> [git-args...]",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--path",
        default=os.environ.get("GMULTI_PATH"),
        help="Directory with the set of repositories (defaults to GMULTI_PATH)",
    )
    parser.add_argument(
        "--exclude",
        default=None,
        help="Comma-separated list of directories to exclude",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Limit parallel workers (0 = unlimited)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show full command output",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop on first failure",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get("GMULTI_CONFIG"),
        help="Settings file (.yml/.yaml, .toml, .json; defaults to GMULTI_CONFIG)",
    )
    parser.add_argument(
        "--executable",
        default=None,
        help="Version-control executable to run (default: git)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Diagnostic log level",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Everything from the first positional on goes to git untouched
    parser.add_argument(
        "git_args",
        nargs=argparse.REMAINDER,
        help="Command and arguments passed to git",
    )

    return parser
