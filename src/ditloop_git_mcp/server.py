from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from ditloop_git_mcp.settings import get_settings
from ditloop_git_mcp.tools import (
    git_branch_list,
    git_checkout,
    git_commit,
    git_diff,
    git_identity,
    git_log,
    git_status,
    load_ditloop_config,
    repo_info,
)

mcp = FastMCP("ditloop-git-mcp")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


@mcp.tool()
def repo_info_tool(root: str = ".") -> dict:
    return repo_info(root=root)


@mcp.tool()
def git_status_tool(root: str = ".") -> dict:
    return git_status(root=root)


@mcp.tool()
def git_log_tool(root: str = ".", count: int = 20) -> dict:
    return git_log(root=root, count=count)


@mcp.tool()
def git_diff_tool(root: str = ".", staged: bool = False) -> dict:
    return git_diff(root=root, staged=staged)


@mcp.tool()
def git_branch_list_tool(root: str = ".") -> dict:
    return git_branch_list(root=root)


@mcp.tool()
def git_commit_tool(message: str, root: str = ".") -> dict:
    return git_commit(root=root, message=message)


@mcp.tool()
def git_checkout_tool(branch: str, root: str = ".") -> dict:
    return git_checkout(root=root, branch=branch)


@mcp.tool()
def git_identity_tool(root: str = ".") -> dict:
    return {"email": git_identity(root=root)}


@mcp.tool()
def load_config_tool(path: str | None = None) -> dict:
    return load_ditloop_config(path=path)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logging.getLogger(__name__).info("Starting ditloop-git-mcp (config: %s)", settings.config_path)
    mcp.run()


if __name__ == "__main__":
    main()
