from __future__ import annotations

from types import SimpleNamespace

import pytest
from rich.console import Console

import gitmulti.console as gm_console


def _recording_console(stderr: bool = False) -> Console:
    return Console(
        record=True, stderr=stderr, highlight=False, soft_wrap=True, width=200
    )


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: pytest.MonkeyPatch) -> SimpleNamespace:
    """Use in-memory Rich consoles so tests read plain text."""
    out = _recording_console()
    err = _recording_console(stderr=True)
    monkeypatch.setattr(gm_console, "console", out)
    monkeypatch.setattr(gm_console, "stderr_console", err)
    return SimpleNamespace(out=out, err=err)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GMULTI_PATH", raising=False)
    monkeypatch.delenv("GMULTI_CONFIG", raising=False)
