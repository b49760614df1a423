from __future__ import annotations

from typing import Any

import pytest


def assert_schema(obj: Any, schema: Any, path: str = "$") -> None:
    """
    A tiny schema matcher that is *stable*:
    - schema can be: type (e.g. str), dict of schemas, list schema (single element = item schema), or callable predicate.
    """
    if isinstance(schema, type):
        assert isinstance(obj, schema), f"{path}: expected {schema.__name__}, got {type(obj).__name__}"
        return

    if callable(schema) and not isinstance(schema, dict):
        assert schema(obj), f"{path}: predicate failed for value={obj!r}"
        return

    if isinstance(schema, dict):
        assert isinstance(obj, dict), f"{path}: expected dict, got {type(obj).__name__}"
        for k, subschema in schema.items():
            assert k in obj, f"{path}: missing key '{k}'"
            assert_schema(obj[k], subschema, f"{path}.{k}")
        return

    if isinstance(schema, list):
        assert isinstance(obj, list), f"{path}: expected list, got {type(obj).__name__}"
        if len(schema) == 0:
            return
        item_schema = schema[0]
        for i, item in enumerate(obj):
            assert_schema(item, item_schema, f"{path}[{i}]")
        return

    raise TypeError(f"Unsupported schema type at {path}: {schema!r}")


_CHANGE = {"path": str, "status": lambda s: s in {
    "modified", "added", "deleted", "renamed", "copied", "type-changed", "unknown",
}}


@pytest.mark.parametrize("tool_name", ["status", "log", "branches", "diff"])
def test_tools_return_stable_schema(tool_name, tmp_git_repo, make_change):
    """
    Snapshot-style schema tests:
    - ensures the contract seen by the UI stays stable
    - does NOT pin volatile values (hashes, timestamps)
    """
    from ditloop_git_mcp.server import git_branch_list_tool, git_diff_tool, git_log_tool, git_status_tool

    make_change("README.md", "dirty\n")
    make_change("untracked.txt", "u\n")

    if tool_name == "status":
        out = git_status_tool(root=str(tmp_git_repo))
        assert_schema(out, {
            "branch": str,
            "ahead": lambda n: isinstance(n, int) and n >= 0,
            "behind": lambda n: isinstance(n, int) and n >= 0,
            "staged": [_CHANGE],
            "unstaged": [_CHANGE],
            "untracked": [str],
        })
        assert "stdout" not in out

    elif tool_name == "log":
        out = git_log_tool(root=str(tmp_git_repo), count=5)
        assert_schema(out, {
            "count": int,
            "commits": [
                {
                    "hash": str,
                    "short_hash": str,
                    "message": str,
                    "author": str,
                    "date": str,
                }
            ],
        })

    elif tool_name == "branches":
        out = git_branch_list_tool(root=str(tmp_git_repo))
        assert_schema(out, {
            "count": int,
            "branches": [{"name": str, "is_current": bool, "is_remote": bool}],
        })

    elif tool_name == "diff":
        out = git_diff_tool(root=str(tmp_git_repo))
        assert_schema(out, {"staged": bool, "diff": str, "truncated": bool})


def test_config_tool_schema(tmp_path):
    from ditloop_git_mcp.server import load_config_tool

    out = load_config_tool(path=str(tmp_path / "missing.yml"))
    assert_schema(out, {
        "config": {"profiles": dict, "workspaces": list},
        "config_path": str,
        "exists": bool,
    })
