from __future__ import annotations

import logging

from .models import BranchRecord, ChangeKind, CommitRecord, FileChange, StatusSnapshot

logger = logging.getLogger(__name__)

_BRANCH_HEAD = "# branch.head "
_BRANCH_AB = "# branch.ab "
_UNTRACKED = "? "
_CHANGE_PREFIXES = ("1 ", "2 ")
_MIN_CHANGE_FIELDS = 9
_NO_CHANGE = "."

_LOG_FIELDS = 5

_CURRENT_MARKER = "* "
_REMOTE_PREFIX = "remotes/"
_ALIAS_MARKER = "->"

_CHANGE_KINDS = {
    "M": ChangeKind.MODIFIED,
    "A": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
    "C": ChangeKind.COPIED,
    "T": ChangeKind.TYPE_CHANGED,
}


def split_lines(raw: str) -> list[str]:
    """
    Split command output into lines.
    Only '\\n' separates records ('\\r' before it is dropped); interior blank
    lines are kept, the empty tail after a final newline is not.
    """
    if not raw:
        return []
    lines = raw.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def normalize_change_code(code: str) -> ChangeKind:
    return _CHANGE_KINDS.get(code, ChangeKind.UNKNOWN)


def _parse_count(token: str, sign: str) -> int:
    digits = token.lstrip(sign)
    if digits.isascii() and digits.isdigit():
        return int(digits)
    return 0


def parse_status_v2(raw: str) -> StatusSnapshot:
    """
    Parses `git status --porcelain=v2 --branch` output:
      # branch.head <name>
      # branch.ab +<ahead> -<behind>
      1 <XY> <sub> <mH> <mI> <mW> <hH> <hI> <path>
      2 <XY> <sub> <mH> <mI> <mW> <hH> <hI> <X><score> <path>\\t<origPath>
      ? <path>
    Unknown or malformed lines are skipped; this never raises.

    The path of a change record is its last whitespace-separated token, so
    rename records report the original path and paths with spaces are cut.
    """
    branch = ""
    ahead = 0
    behind = 0
    staged: list[FileChange] = []
    unstaged: list[FileChange] = []
    untracked: list[str] = []
    seen_staged: set[str] = set()
    seen_unstaged: set[str] = set()

    for line in split_lines(raw):
        if line.startswith(_BRANCH_HEAD):
            branch = line[len(_BRANCH_HEAD):]

        elif line.startswith(_BRANCH_AB):
            parts = line.split()
            if len(parts) >= 4:
                ahead = _parse_count(parts[2], "+")
                behind = _parse_count(parts[3], "-")

        elif line.startswith(_CHANGE_PREFIXES):
            parts = line.split()
            if len(parts) < _MIN_CHANGE_FIELDS:
                continue
            xy = parts[1]
            path = parts[-1]
            x = xy[0] if len(xy) > 0 else _NO_CHANGE
            y = xy[1] if len(xy) > 1 else _NO_CHANGE

            if x != _NO_CHANGE and path not in seen_staged:
                seen_staged.add(path)
                staged.append(FileChange(path=path, status=normalize_change_code(x)))
            if y != _NO_CHANGE and path not in seen_unstaged:
                seen_unstaged.add(path)
                unstaged.append(FileChange(path=path, status=normalize_change_code(y)))

        elif line.startswith(_UNTRACKED):
            untracked.append(line[len(_UNTRACKED):])

    return StatusSnapshot(
        branch=branch,
        ahead=ahead,
        behind=behind,
        staged=tuple(staged),
        unstaged=tuple(unstaged),
        untracked=tuple(untracked),
    )


def parse_log(raw: str, requested_count: int | None = None) -> list[CommitRecord]:
    """
    Parses `git log --format=%H%n%h%n%s%n%an%n%ai`: five lines per commit.
    A trailing partial group (truncated output) is dropped.
    """
    lines = split_lines(raw)
    out: list[CommitRecord] = []
    for i in range(0, len(lines) - _LOG_FIELDS + 1, _LOG_FIELDS):
        full_hash, short_hash, subject, author, date = lines[i:i + _LOG_FIELDS]
        out.append(
            CommitRecord(
                hash=full_hash,
                short_hash=short_hash,
                message=subject,
                author=author,
                date=date,
            )
        )

    leftover = len(lines) % _LOG_FIELDS
    if leftover:
        logger.debug(
            "Dropped %d trailing log line(s); %d commit(s) parsed, %s requested",
            leftover,
            len(out),
            requested_count,
        )
    return out


def parse_branches(raw: str) -> list[BranchRecord]:
    """
    Parses `git branch -a --no-color`:
      * main
        feature/x
        remotes/origin/HEAD -> origin/main
        remotes/origin/main
    Symbolic aliases ("->") are dropped; local and remote namesakes both stay.
    """
    out: list[BranchRecord] = []
    for line in split_lines(raw):
        is_current = line.startswith(_CURRENT_MARKER)
        name = line[len(_CURRENT_MARKER):] if is_current else line
        name = name.strip()
        # git never emits blank lines; skip them instead of yielding an empty-name record
        if not name:
            continue

        is_remote = name.startswith(_REMOTE_PREFIX)
        if is_remote:
            name = name[len(_REMOTE_PREFIX):]

        if _ALIAS_MARKER in name:
            continue

        out.append(BranchRecord(name=name, is_current=is_current, is_remote=is_remote))
    return out
