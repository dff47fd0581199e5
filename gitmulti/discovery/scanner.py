from __future__ import annotations

import logging
import os
from collections.abc import Collection
from pathlib import Path, PurePath

from .types import DiscoveryError

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"


def discover_repos(
    root: str | Path,
    excludes: Collection[str],
    *,
    match: str = "segment",
    marker: str = GIT_MARKER,
) -> list[Path]:
    """Return repository roots under ``root`` in depth-first, sorted order.

    Hidden and excluded directories are pruned with their whole subtree. A
    directory holding ``marker`` is reported and not descended into, so nested
    repositories never show up. The root itself is never reported.
    """
    root_path = Path(root)
    repos: list[Path] = []

    def on_error(exc: OSError) -> None:
        raise DiscoveryError(exc.filename or str(root_path), exc) from exc

    for dirpath, dirnames, _filenames in os.walk(root_path, onerror=on_error):
        current = Path(dirpath)

        if current != root_path and os.path.lexists(current / marker):
            logger.debug("Found repository %s", current.relative_to(root_path))
            repos.append(current)
            dirnames[:] = []
            continue

        keep: list[str] = []

        for name in sorted(dirnames):
            child = current / name
            rel = child.relative_to(root_path)

            if child.is_symlink():
                continue

            if is_excluded(rel, excludes, match=match):
                logger.debug("Skipping excluded directory %s", rel)
                continue

            keep.append(name)

        # Pruning in place stops os.walk from descending
        dirnames[:] = keep

    return repos


def is_excluded(
    rel_path: PurePath, excludes: Collection[str], *, match: str = "segment"
) -> bool:
    name = rel_path.name
    if name in excludes or name.startswith("."):
        return True

    match match:
        case "segment":
            return any(part in excludes for part in rel_path.parts)
        case "substring":
            rel = rel_path.as_posix()
            return any(exclude in rel for exclude in excludes)
        case _:
            raise ValueError(f"Unknown exclude match mode: {match}")
