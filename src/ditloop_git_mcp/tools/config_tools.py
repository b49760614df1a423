from __future__ import annotations

from typing import Any

from ..config.loader import read_config_file
from ..settings import get_settings


def load_ditloop_config(path: str | None = None) -> dict[str, Any]:
    """
    Profiles and workspaces from the ditloop config file.
    A missing file is not an error: defaults come back with exists=False.
    """
    config_path = path if path is not None else get_settings().config_path
    return read_config_file(config_path).to_dict()
