from .models import BranchRecord, ChangeKind, CommitRecord, FileChange, GitRunResult, StatusSnapshot
from .parsers import normalize_change_code, parse_branches, parse_log, parse_status_v2, split_lines

__all__ = [
    "BranchRecord",
    "ChangeKind",
    "CommitRecord",
    "FileChange",
    "GitRunResult",
    "StatusSnapshot",
    "normalize_change_code",
    "parse_branches",
    "parse_log",
    "parse_status_v2",
    "split_lines",
]
