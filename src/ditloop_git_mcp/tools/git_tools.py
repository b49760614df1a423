from __future__ import annotations

import logging
from typing import Any

from .common import runner_for
from ..core.git_runner import GitRunner, require_ok
from ..core.parsers import parse_branches, parse_log, parse_status_v2
from ..core.security import ensure_git_workspace, ensure_safe_ref

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%H%n%h%n%s%n%an%n%ai"
_MAX_LOG_COUNT = 500


def repo_info(root: str = ".", *, runner: GitRunner | None = None) -> dict[str, Any]:
    """
    Workspace metadata: root, is_git, branch, head_sha, upstream (if exists).
    """
    r = runner_for(root, runner)
    is_git = r.run(["rev-parse", "--is-inside-work-tree"]).stdout.strip() == "true"
    if not is_git:
        return {"root": r.root.as_posix(), "is_git": False}

    branch = r.run(["rev-parse", "--abbrev-ref", "HEAD"]).stdout.strip()
    head_res = r.run(["rev-parse", "HEAD"])
    # unborn branch: no HEAD commit yet
    head = head_res.stdout.strip() if head_res.exit_code == 0 else None

    # upstream might not exist
    upstream_res = r.run(["rev-parse", "--abbrev-ref", "@{u}"])
    upstream = upstream_res.stdout.strip() if upstream_res.exit_code == 0 else None

    return {
        "root": r.root.as_posix(),
        "is_git": True,
        "branch": branch,
        "head": head,
        "upstream": upstream,
    }


def git_status(root: str = ".", *, runner: GitRunner | None = None) -> dict[str, Any]:
    """
    Branch, ahead/behind and staged/unstaged/untracked changes.
    """
    r = runner_for(root, runner)
    ensure_git_workspace(r.root)
    res = require_ok(
        r.run(["status", "--porcelain=v2", "--branch"]),
        context="git_status",
        require_complete=True,
    )
    return parse_status_v2(res.stdout).to_dict()


def git_log(root: str = ".", count: int = 20, *, runner: GitRunner | None = None) -> dict[str, Any]:
    """
    Most recent commits, newest first.
    """
    r = runner_for(root, runner)
    count = max(1, min(int(count), _MAX_LOG_COUNT))
    res = require_ok(
        r.run(["log", f"-{count}", f"--format={_LOG_FORMAT}"]),
        context="git_log",
        require_complete=True,
    )
    commits = parse_log(res.stdout, count)
    return {"commits": [c.to_dict() for c in commits], "count": len(commits)}


def git_diff(root: str = ".", staged: bool = False, *, runner: GitRunner | None = None) -> dict[str, Any]:
    """
    Unified diff of the worktree (or of the index with staged=True).
    """
    r = runner_for(root, runner)
    args = ["diff", "--no-color"]
    if staged:
        args.append("--cached")

    res = require_ok(r.run(args), context="git_diff")
    return {
        "staged": staged,
        "diff": res.stdout,
        "truncated": res.output_truncated,
    }


def git_branch_list(root: str = ".", *, runner: GitRunner | None = None) -> dict[str, Any]:
    """
    Local and remote-tracking branches; remote HEAD aliases are left out.
    """
    r = runner_for(root, runner)
    res = require_ok(
        r.run(["branch", "-a", "--no-color"]),
        context="git_branch_list",
        require_complete=True,
    )
    branches = parse_branches(res.stdout)
    return {"branches": [b.to_dict() for b in branches], "count": len(branches)}


def git_commit(root: str, message: str, *, runner: GitRunner | None = None) -> dict[str, Any]:
    """
    Commit whatever is staged.
    """
    if not (message or "").strip():
        raise ValueError("commit message is required")

    r = runner_for(root, runner)
    res = require_ok(r.run(["commit", "-m", message], read_only=False), context="git_commit")
    logger.info("Committed in %s", r.root)
    return {"output": res.stdout}


def git_checkout(root: str, branch: str, *, runner: GitRunner | None = None) -> dict[str, Any]:
    name = ensure_safe_ref(branch, what="branch")
    r = runner_for(root, runner)
    require_ok(r.run(["checkout", name, "--"], read_only=False), context="git_checkout")
    logger.info("Checked out %s in %s", name, r.root)
    return {"branch": name}


def git_identity(root: str = ".", *, runner: GitRunner | None = None) -> str | None:
    """
    The effective user.email, or None when unset.
    """
    r = runner_for(root, runner)
    res = r.run(["config", "user.email"])
    if not res.ok:
        return None
    email = res.stdout.strip()
    return email or None
