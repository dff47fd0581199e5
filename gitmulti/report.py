from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from .console import get_console
from .executor import RepoResult

RULE_WIDTH = 80


def format_output(
    results: Iterable[RepoResult | None],
    verbose: bool,
    console: Console | None = None,
) -> tuple[int, int]:
    """Print one entry per result in order and return (succeeded, failed).

    Empty slots (commands cut short by fail-fast) are skipped.
    """
    console = console or get_console()
    succeeded = 0
    failed = 0

    for result in results:
        if result is None:
            continue

        if result.success:
            succeeded += 1
            if verbose:
                console.print(Text(f"✅ {result.name}:", style="green"))
                print_indented(result.output, console)
            else:
                console.print(
                    Text.assemble((f"✅ {result.name}:", "green"), " ", result.output)
                )
        else:
            failed += 1
            console.print(Text(f"❌ {result.name}:", style="red"))
            print_indented(result.output, console)
            if verbose and result.error:
                print_indented(f"Error: {result.error}", console)

    return succeeded, failed


def print_summary(
    succeeded: int, failed: int, console: Console | None = None
) -> None:
    console = console or get_console()
    parts: list[tuple[str, str]] = []
    if succeeded > 0:
        parts.append((f"{succeeded} succeeded", "green"))
    if failed > 0:
        parts.append((f"{failed} failed", "red"))

    summary = Text("Summary: ", style="blue")
    for i, part in enumerate(parts):
        if i:
            summary.append(", ")
        summary.append(*part)

    console.print()
    console.print("─" * RULE_WIDTH, style="dim")
    console.print(summary)


def print_indented(text: str, console: Console | None = None) -> None:
    console = console or get_console()
    for line in text.split("\n"):
        if line:
            console.print(Text(f"   {line}", style="bright_black"))
