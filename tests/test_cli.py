# tests/test_cli.py
from __future__ import annotations

import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from gitmulti.cli import run_cli

# Stands in for git: prints the repository name and arguments, and exits with
# the code stored in an ``exit_code`` file inside the repository, if any.
FAKE_GIT = """\
import sys
from pathlib import Path

code_file = Path("exit_code")
code = int(code_file.read_text()) if code_file.exists() else 0
print("out", Path.cwd().name, *sys.argv[1:])
if code:
    print("boom", file=sys.stderr)
sys.exit(code)
"""


def _fake_git(tmp_path: Path) -> Path:
    script = tmp_path / "fake_git.py"
    script.write_text(FAKE_GIT, encoding="utf-8")
    return script


def _repo(root: Path, name: str, exit_code: int = 0) -> Path:
    path = root / name
    (path / ".git").mkdir(parents=True)
    if exit_code:
        (path / "exit_code").write_text(str(exit_code), encoding="utf-8")
    return path


def _argv(root: Path, script: Path, *extra: str) -> list[str]:
    return [
        f"--path={root}",
        f"--executable={sys.executable}",
        *extra,
        str(script),
        "status",
    ]


@pytest.fixture
def workspace(tmp_path: Path) -> tuple[Path, Path]:
    root = tmp_path / "ws"
    root.mkdir()
    return root, _fake_git(tmp_path)


def test_no_command_prints_usage_and_returns_1(
    capture_console: SimpleNamespace,
) -> None:
    code = run_cli([])

    assert code == 1
    assert "usage: git-multi" in capture_console.out.export_text()


def test_missing_path_returns_1_without_discovery(
    capture_console: SimpleNamespace, monkeypatch: pytest.MonkeyPatch
) -> None:
    import gitmulti.cli.commands as commands

    def boom(*args, **kwargs):
        raise AssertionError("discovery must not run")

    monkeypatch.setattr(commands, "discover_repos", boom)

    code = run_cli(["--path=/does/not/exist", "status"])

    assert code == 1
    assert "Directory does not exist" in capture_console.err.export_text()
    assert "Discovering" not in capture_console.out.export_text()


def test_all_succeed_returns_0(
    workspace: tuple[Path, Path], capture_console: SimpleNamespace
) -> None:
    root, script = workspace
    _repo(root, "r1")

    code = run_cli(_argv(root, script))
    out = capture_console.out.export_text()

    assert code == 0
    assert "Found 1 repositories" in out
    assert "✅ r1: out r1 status" in out
    assert "Summary: 1 succeeded" in out
    assert "failed" not in out


def test_one_failure_returns_1(
    workspace: tuple[Path, Path], capture_console: SimpleNamespace
) -> None:
    root, script = workspace
    _repo(root, "r1")
    _repo(root, "r2", exit_code=2)

    code = run_cli(_argv(root, script))
    out = capture_console.out.export_text()

    assert code == 1
    assert "❌ r2:" in out
    assert "   boom" in out
    assert "Summary: 1 succeeded, 1 failed" in out


def test_verbose_shows_error_detail(
    workspace: tuple[Path, Path], capture_console: SimpleNamespace
) -> None:
    root, script = workspace
    _repo(root, "r1", exit_code=2)

    code = run_cli(_argv(root, script, "--verbose"))

    assert code == 1
    assert "Error: exit status 2" in capture_console.out.export_text()


def test_no_repositories_returns_0(
    workspace: tuple[Path, Path], capture_console: SimpleNamespace
) -> None:
    root, script = workspace
    (root / "empty").mkdir()

    code = run_cli(_argv(root, script))

    assert code == 0
    assert "No git repositories found" in capture_console.out.export_text()


def test_fail_fast_returns_1(
    workspace: tuple[Path, Path], capture_console: SimpleNamespace
) -> None:
    root, script = workspace
    _repo(root, "r1", exit_code=1)
    _repo(root, "r2")
    _repo(root, "r3")

    code = run_cli(_argv(root, script, "--fail-fast", "--workers=1"))

    assert code == 1
    assert "Fail-fast enabled" in capture_console.err.export_text()
    assert "Summary" not in capture_console.out.export_text()


def test_exclude_option_skips_directories(
    workspace: tuple[Path, Path], capture_console: SimpleNamespace
) -> None:
    root, script = workspace
    _repo(root, "keep")
    _repo(root, "tools")
    _repo(root, "game_proto")

    code = run_cli(_argv(root, script, "--exclude=tools, game_proto"))
    out = capture_console.out.export_text()

    assert code == 0
    assert "Found 1 repositories" in out
    assert "keep" in out


def test_path_falls_back_to_environment(
    workspace: tuple[Path, Path],
    capture_console: SimpleNamespace,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    root, script = workspace
    _repo(root, "r1")
    monkeypatch.setenv("GMULTI_PATH", str(root))

    code = run_cli([f"--executable={sys.executable}", str(script), "status"])

    assert code == 0
    assert "✅ r1:" in capture_console.out.export_text()


def test_settings_file_is_applied(
    workspace: tuple[Path, Path], tmp_path: Path, capture_console: SimpleNamespace
) -> None:
    root, script = workspace
    _repo(root, "r1")
    _repo(root, "skipme")
    cfg = tmp_path / "gitmulti.json"
    cfg.write_text(
        json.dumps(
            {
                "path": str(root),
                "exclude": ["skipme"],
                "workers": 1,
                "executable": sys.executable,
            }
        ),
        encoding="utf-8",
    )

    code = run_cli([f"--config={cfg}", str(script), "status"])
    out = capture_console.out.export_text()

    assert code == 0
    assert "Found 1 repositories" in out
    assert "skipme" not in out


def test_invalid_settings_file_returns_1(
    tmp_path: Path, capture_console: SimpleNamespace
) -> None:
    cfg = tmp_path / "gitmulti.yml"
    cfg.write_text("workers: many\n", encoding="utf-8")

    code = run_cli([f"--config={cfg}", f"--path={tmp_path}", "status"])

    assert code == 1
    assert "workers" in capture_console.err.export_text()
