"""Models for the ditloop profile/workspace config file."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileConfig(BaseModel):
    """A git identity that workspaces can point at."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    email: str
    ssh_host: str | None = Field(default=None, alias="sshHost")
    ssh_key: str | None = Field(default=None, alias="sshKey")
    platform: str | None = None


class WorkspaceConfig(BaseModel):
    """A declared workspace. `profile` is a key into `ConfigFile.profiles`, unchecked here."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    path: str
    type: str = "single"
    profile: str
    aidf: bool = False


class ConfigFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)
    workspaces: tuple[WorkspaceConfig, ...] = ()

    @field_validator("profiles", "workspaces", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any, info):  # type: ignore[override]
        # `profiles:` with no body decodes to None
        if value is None:
            return {} if info.field_name == "profiles" else ()
        return value


__all__ = ["ConfigFile", "ProfileConfig", "WorkspaceConfig"]
