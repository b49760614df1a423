"""Config file loading utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..core.errors import ConfigParseError, ConfigReadError
from .models import ConfigFile

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_RELPATH = Path(".ditloop") / "config.yml"


def expand_home(path: str, home_directory: str | Path) -> str:
    """Replace one leading `~` with the home directory; anything else is returned as-is."""

    if path.startswith("~"):
        return f"{home_directory}{path[1:]}"
    return path


def load_config(content: str, home_directory: str | Path) -> ConfigFile:
    """Decode config YAML into a `ConfigFile` and expand `~` in workspace paths.

    Pure: the caller supplies both the file content and the home directory.
    """

    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigParseError(f"Failed to parse config: {exc}") from exc

    if document is None:
        return ConfigFile()
    if not isinstance(document, dict):
        raise ConfigParseError(
            f"Failed to parse config: expected a mapping at top level, got {type(document).__name__}"
        )

    try:
        config = ConfigFile.model_validate(document)
    except ValidationError as exc:
        raise ConfigParseError(f"Failed to parse config: {exc}") from exc

    workspaces = tuple(
        ws.model_copy(update={"path": expand_home(ws.path, home_directory)})
        for ws in config.workspaces
    )
    return config.model_copy(update={"workspaces": workspaces})


@dataclass(frozen=True)
class ConfigLoadResult:
    config: ConfigFile
    config_path: str
    exists: bool

    def to_dict(self) -> dict:
        return {
            "config": self.config.model_dump(by_alias=True, mode="json"),
            "config_path": self.config_path,
            "exists": self.exists,
        }


def default_config_path(home_directory: str | Path | None = None) -> Path:
    home = Path(home_directory) if home_directory is not None else Path.home()
    return home / DEFAULT_CONFIG_RELPATH


def read_config_file(
    path: str | Path | None = None,
    home_directory: str | Path | None = None,
) -> ConfigLoadResult:
    """Read the config file from disk. A missing file yields an empty config."""

    home = Path(home_directory) if home_directory is not None else Path.home()
    config_path = Path(path).expanduser() if path is not None else default_config_path(home)

    if not config_path.exists():
        logger.info("No config file at %s; using defaults", config_path)
        return ConfigLoadResult(config=ConfigFile(), config_path=str(config_path), exists=False)

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigReadError(f"Failed to read config: {exc}") from exc

    config = load_config(content, home)
    logger.debug(
        "Loaded %d profile(s) and %d workspace(s) from %s",
        len(config.profiles),
        len(config.workspaces),
        config_path,
    )
    return ConfigLoadResult(config=config, config_path=str(config_path), exists=True)


__all__ = [
    "ConfigLoadResult",
    "default_config_path",
    "expand_home",
    "load_config",
    "read_config_file",
]
