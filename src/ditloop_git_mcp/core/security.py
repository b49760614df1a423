from __future__ import annotations

from pathlib import Path

from .errors import InvalidRootError, NotAGitRepositoryError


def resolve_root(root: str | Path) -> Path:
    """Resolve and validate root directory for local-repo operations."""
    p = Path(root).expanduser().resolve()

    if not p.exists():
        raise InvalidRootError(f"Root does not exist: {p}")
    if not p.is_dir():
        raise InvalidRootError(f"Root is not a directory: {p}")

    return p


def ensure_git_workspace(root: str | Path) -> Path:
    """
    Resolve `root` and require a `.git` entry directly inside it
    (a directory, or a file for worktrees/submodules).
    """
    p = resolve_root(root)
    if not (p / ".git").exists():
        raise NotAGitRepositoryError(f"Not a git repository: {p}")
    return p


def ensure_safe_ref(ref: str, what: str = "ref") -> str:
    """Reject empty names and names git would read as an option."""
    s = (ref or "").strip()
    if not s:
        raise ValueError(f"{what} is required")
    if s.startswith("-"):
        raise ValueError(f"Invalid {what}: {ref!r}")
    return s
