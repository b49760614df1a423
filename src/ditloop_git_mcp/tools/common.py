from __future__ import annotations

from pathlib import Path

from ..core.git_runner import GitRunner, SafeGitRunner
from ..settings import get_settings


def make_runner(root: str | Path = ".") -> SafeGitRunner:
    return SafeGitRunner(root=root, config=get_settings().runner_config())


def runner_for(root: str | Path, runner: GitRunner | None) -> GitRunner:
    return runner if runner is not None else make_runner(root)
