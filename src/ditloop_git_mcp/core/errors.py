from __future__ import annotations


class DitloopError(Exception):
    """Base error for the project."""


class InvalidRootError(DitloopError):
    pass


class NotAGitRepositoryError(InvalidRootError):
    pass


class GitPolicyError(DitloopError):
    pass


class GitExecutionError(DitloopError):
    pass


class ConfigReadError(DitloopError):
    pass


class ConfigParseError(DitloopError):
    """Config content could not be decoded into profiles/workspaces."""
