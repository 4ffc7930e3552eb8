"""Typed access to MEDIAFORGE_* environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "MEDIAFORGE_"

FFMPEG_PATH = "MEDIAFORGE_FFMPEG_PATH"
FFPROBE_PATH = "MEDIAFORGE_FFPROBE_PATH"
CONFIG_PATH = "MEDIAFORGE_CONFIG_PATH"
TEMP_DIR = "MEDIAFORGE_TEMP_DIR"
LOG_LEVEL = "MEDIAFORGE_LOG_LEVEL"
MAX_CONCURRENT = "MEDIAFORGE_MAX_CONCURRENT"
CANCEL_GRACE = "MEDIAFORGE_CANCEL_GRACE_SECONDS"

class EnvReader:
    """Environment variable reader with type conversion.

    An explicit env mapping replaces os.environ, so tests never have to
    touch the real environment.

    Example:
        reader = EnvReader(env={"MEDIAFORGE_MAX_CONCURRENT": "4"})
        reader.get_int(MAX_CONCURRENT, 2)  # 4
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._env.get(var)
        return default if value is None else value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Integer value; an unparseable value logs a warning and yields default."""
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Path value with tilde expansion.

        Args:
            var: Environment variable name.
            must_exist: Reject (with a warning) paths that do not exist.
            default: Returned when unset or rejected.
        """
        value = self._env.get(var)
        if not value:
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                var,
                value,
            )
            return default
        return path
