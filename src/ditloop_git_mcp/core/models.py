from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class GitRunResult:
    argv: list[str]
    root: str
    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int
    timed_out: bool
    output_truncated: bool

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    def to_dict(self) -> dict[str, Any]:
        return {
            "argv": self.argv,
            "root": self.root,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "duration_ms": self.duration_ms,
            "timed_out": self.timed_out,
            "output_truncated": self.output_truncated,
        }


class ChangeKind(str, Enum):
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type-changed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FileChange:
    path: str
    status: ChangeKind

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "status": self.status.value}


@dataclass(frozen=True)
class StatusSnapshot:
    """
    Structured view of `git status --porcelain=v2 --branch`.
    Every field has an "absent" value, so an empty snapshot is still valid.
    """
    branch: str = ""
    ahead: int = 0
    behind: int = 0
    staged: tuple[FileChange, ...] = ()
    unstaged: tuple[FileChange, ...] = ()
    untracked: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "branch": self.branch,
            "ahead": self.ahead,
            "behind": self.behind,
            "staged": [c.to_dict() for c in self.staged],
            "unstaged": [c.to_dict() for c in self.unstaged],
            "untracked": list(self.untracked),
        }


@dataclass(frozen=True)
class CommitRecord:
    hash: str
    short_hash: str
    message: str
    author: str
    date: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "short_hash": self.short_hash,
            "message": self.message,
            "author": self.author,
            "date": self.date,
        }


@dataclass(frozen=True)
class BranchRecord:
    name: str
    is_current: bool = False
    is_remote: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "is_current": self.is_current,
            "is_remote": self.is_remote,
        }
