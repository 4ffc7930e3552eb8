"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. Explicit arguments (CLI flags, constructor arguments)
2. Environment variables (MEDIAFORGE_*)
3. Config file (~/.mediaforge/config.toml)
4. Default values

Config file layout::

    [tools]
    ffmpeg = "/usr/local/bin/ffmpeg"
    ffprobe = "/usr/local/bin/ffprobe"

    [execution]
    cancel_grace_seconds = 2.0
    temp_directory = "/dev/shm"
    max_concurrent = 2

    [logging]
    level = "info"
    format = "text"
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from mediaforge.config import env as env_vars
from mediaforge.config.env import EnvReader
from mediaforge.config.models import (
    ExecutionConfig,
    ForgeConfig,
    LoggingConfig,
    ToolPathsConfig,
)
from mediaforge.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".mediaforge"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


@dataclass
class ConfigSource:
    """Settings from a single source.

    None means "not specified here" and never overrides a lower source.
    """

    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None
    cancel_grace_seconds: float | None = None
    temp_directory: Path | None = None
    max_concurrent: int | None = None
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


def _optional_path(value: Any) -> Path | None:
    return Path(str(value)).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create a ConfigSource from a parsed TOML document."""
    tools = file_config.get("tools", {})
    execution = file_config.get("execution", {})
    log = file_config.get("logging", {})
    return ConfigSource(
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        cancel_grace_seconds=execution.get("cancel_grace_seconds"),
        temp_directory=_optional_path(execution.get("temp_directory")),
        max_concurrent=execution.get("max_concurrent"),
        logging_level=log.get("level"),
        logging_file=_optional_path(log.get("file")),
        logging_format=log.get("format"),
        logging_include_stderr=log.get("include_stderr"),
        logging_max_bytes=log.get("max_bytes"),
        logging_backup_count=log.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from MEDIAFORGE_* variables."""
    return ConfigSource(
        ffmpeg_path=reader.get_path(env_vars.FFMPEG_PATH),
        ffprobe_path=reader.get_path(env_vars.FFPROBE_PATH),
        cancel_grace_seconds=reader.get_float(env_vars.CANCEL_GRACE),
        temp_directory=reader.get_path(env_vars.TEMP_DIR, must_exist=True),
        max_concurrent=reader.get_int(env_vars.MAX_CONCURRENT),
        logging_level=reader.get_str(env_vars.LOG_LEVEL),
    )


class ConfigBuilder:
    """Layers ConfigSources; later non-None values win.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> ForgeConfig:
        """Build the final ForgeConfig with defaults for unset values.

        Raises:
            ValueError: If a layered value fails model validation.
        """
        return ForgeConfig(
            tools=ToolPathsConfig(
                ffmpeg=self._get("ffmpeg_path", None),
                ffprobe=self._get("ffprobe_path", None),
            ),
            execution=ExecutionConfig(
                cancel_grace_seconds=self._get("cancel_grace_seconds", 2.0),
                temp_directory=self._get("temp_directory", None),
                max_concurrent=self._get("max_concurrent", 2),
            ),
            logging=LoggingConfig(
                level=self._get("logging_level", "info"),
                file=self._get("logging_file", None),
                format=self._get("logging_format", "text"),
                include_stderr=self._get("logging_include_stderr", False),
                max_bytes=self._get("logging_max_bytes", 10_485_760),
                backup_count=self._get("logging_backup_count", 5),
            ),
        )


def get_default_config_path(reader: EnvReader | None = None) -> Path:
    """Config file path, overridable with MEDIAFORGE_CONFIG_PATH."""
    reader = reader or EnvReader()
    return reader.get_path(env_vars.CONFIG_PATH) or DEFAULT_CONFIG_FILE


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load a TOML config file.

    Args:
        path: File to read. A missing file yields an empty dict.
        strict: Raise on parse failures instead of falling back to defaults.

    Raises:
        InvalidConfigurationError: When strict and the file cannot be parsed.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as fh:
            config = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise InvalidConfigurationError([f"{path}: {e}"]) from e
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def get_config(
    config_path: Path | None = None,
    # Explicit overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    max_concurrent: int | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> ForgeConfig:
    """Get configuration with full precedence handling.

    Raises:
        InvalidConfigurationError: If the file is unparseable (strict) or a
            resulting value is out of range.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path, strict=strict)

    cli_source = ConfigSource(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        logging_level=log_level,
        logging_file=log_file,
        logging_format=log_format,
        max_concurrent=max_concurrent,
    )

    # file < env < cli
    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(cli_source)

    try:
        return builder.build()
    except ValueError as e:
        raise InvalidConfigurationError([str(e)]) from e
