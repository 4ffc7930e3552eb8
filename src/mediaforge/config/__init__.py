"""Process-level settings and conversion job files."""

from mediaforge.config.env import EnvReader
from mediaforge.config.loader import (
    ConfigBuilder,
    ConfigSource,
    get_config,
    load_config_file,
)
from mediaforge.config.models import (
    ExecutionConfig,
    ForgeConfig,
    LoggingConfig,
    ToolPathsConfig,
)

__all__ = [
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "ExecutionConfig",
    "ForgeConfig",
    "LoggingConfig",
    "ToolPathsConfig",
    "get_config",
    "load_config_file",
]
