from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from ditloop_git_mcp.core.models import GitRunResult
from ditloop_git_mcp.settings import get_settings


def _run(cmd: list[str], cwd: Path) -> str:
    out = subprocess.check_output(
        cmd,
        cwd=str(cwd),
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    return out.strip()


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for var in ("DITLOOP_CONFIG_PATH", "DITLOOP_LOG_LEVEL", "DITLOOP_GIT_TIMEOUT", "DITLOOP_MAX_OUTPUT_CHARS"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def tmp_git_repo(tmp_path: Path) -> Path:
    """
    Creates a small deterministic git repo on branch 'main':
      - 1 initial commit
      - known author identity
      - a couple of files + subdir
    """
    repo = tmp_path / "repo"
    repo.mkdir()

    _run(["git", "init"], repo)
    _run(["git", "symbolic-ref", "HEAD", "refs/heads/main"], repo)
    _run(["git", "config", "user.email", "ci@example.com"], repo)
    _run(["git", "config", "user.name", "CI"], repo)
    _run(["git", "config", "commit.gpgsign", "false"], repo)

    (repo / "README.md").write_text("# dummy\n", encoding="utf-8")
    (repo / "src").mkdir()
    (repo / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")

    _run(["git", "add", "-A"], repo)
    _run(["git", "commit", "-m", "initial"], repo)

    return repo


@pytest.fixture()
def git_head(tmp_git_repo: Path) -> str:
    return _run(["git", "rev-parse", "HEAD"], tmp_git_repo)


@pytest.fixture()
def make_change(tmp_git_repo: Path):
    """
    Helper: make working tree dirty in a predictable way.
    """
    def _maker(relpath: str = "README.md", text: str = "changed\n") -> Path:
        p = tmp_git_repo / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p
    return _maker


@dataclass
class FakeRunner:
    """
    Replays canned stdout per subcommand; records every call.
    """
    root: Path
    outputs: dict[str, str] = field(default_factory=dict)
    exit_codes: dict[str, int] = field(default_factory=dict)
    stderr: str = ""
    truncated: set[str] = field(default_factory=set)
    calls: list[tuple[list[str], bool]] = field(default_factory=list)

    def run(self, args, *, read_only: bool = True, env=None) -> GitRunResult:
        args = list(args)
        self.calls.append((args, read_only))
        sub = args[0]
        code = self.exit_codes.get(sub, 0)
        return GitRunResult(
            argv=["git", *args],
            root=str(self.root),
            stdout=self.outputs.get(sub, ""),
            stderr=self.stderr if code else "",
            exit_code=code,
            duration_ms=0,
            timed_out=False,
            output_truncated=sub in self.truncated,
        )


@pytest.fixture()
def fake_workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "ws"
    (ws / ".git").mkdir(parents=True)
    return ws


@pytest.fixture()
def fake_runner(fake_workspace: Path) -> FakeRunner:
    return FakeRunner(root=fake_workspace)
