"""Runtime settings for the ditloop git MCP server."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.git_runner import GitRunnerConfig


class DitloopSettings(BaseSettings):
    """Configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    config_path: Path = Field(
        default=Path("~/.ditloop/config.yml"), validation_alias="DITLOOP_CONFIG_PATH"
    )
    log_level: str = Field(default="INFO", validation_alias="DITLOOP_LOG_LEVEL")
    git_timeout_s: float | None = Field(default=None, validation_alias="DITLOOP_GIT_TIMEOUT")
    max_output_chars: int = Field(default=200_000, validation_alias="DITLOOP_MAX_OUTPUT_CHARS")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "DITLOOP_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("git_timeout_s", mode="before")
    @classmethod
    def _parse_timeout(cls, value):
        if value is None or value == "":
            return None
        return value

    @field_validator("git_timeout_s")
    @classmethod
    def _validate_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("DITLOOP_GIT_TIMEOUT must be > 0")
        return value

    @field_validator("max_output_chars")
    @classmethod
    def _validate_max_output(cls, value: int) -> int:
        if value < 1:
            raise ValueError("DITLOOP_MAX_OUTPUT_CHARS must be >= 1")
        return value

    def runner_config(self) -> GitRunnerConfig:
        return GitRunnerConfig(timeout_s=self.git_timeout_s, max_output_chars=self.max_output_chars)


@lru_cache(maxsize=1)
def get_settings() -> DitloopSettings:
    """Return cached settings instance."""

    settings = DitloopSettings()
    settings.config_path = settings.config_path.expanduser()
    return settings


__all__ = ["DitloopSettings", "get_settings"]
