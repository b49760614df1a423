from .config_tools import load_ditloop_config
from .git_tools import (
    git_branch_list,
    git_checkout,
    git_commit,
    git_diff,
    git_identity,
    git_log,
    git_status,
    repo_info,
)

__all__ = [
    "repo_info",
    "git_status",
    "git_log",
    "git_diff",
    "git_branch_list",
    "git_commit",
    "git_checkout",
    "git_identity",
    "load_ditloop_config",
]
