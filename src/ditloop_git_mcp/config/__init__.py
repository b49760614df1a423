"""Profile/workspace config models and loader exports."""

from .loader import ConfigLoadResult, expand_home, load_config, read_config_file
from .models import ConfigFile, ProfileConfig, WorkspaceConfig

__all__ = [
    "ConfigFile",
    "ConfigLoadResult",
    "ProfileConfig",
    "WorkspaceConfig",
    "expand_home",
    "load_config",
    "read_config_file",
]
