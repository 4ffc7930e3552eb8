"""Locating ffmpeg/ffprobe and checking that they run.

A tool is looked up in this order: explicitly configured path, PATH
lookup, then the bare name (left for the OS to resolve at spawn time).
It counts as available only if it answers ``-version`` successfully.
"""

import logging
import re
import shutil
import subprocess  # nosec B404 - only for the TimeoutExpired type
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from mediaforge.core.subprocess_utils import run_command
from mediaforge.errors import ToolNotFoundError
from mediaforge.tools.models import (
    ToolDetectionConfig,
    ToolInfo,
    ToolRegistry,
    ToolStatus,
)

logger = logging.getLogger(__name__)

# Timeout for version detection commands (seconds)
DETECTION_TIMEOUT = 10

FFMPEG_CONFIG = ToolDetectionConfig(
    name="ffmpeg",
    version_pattern=r"ffmpeg version (\S+)",
)
FFPROBE_CONFIG = ToolDetectionConfig(
    name="ffprobe",
    version_pattern=r"ffprobe version (\S+)",
)

Runner = Callable[..., tuple[str, str, int]]


def parse_version_string(version_str: str) -> tuple[int, ...] | None:
    """Parse a version string into a comparable tuple.

    Handles:
    - "6.1.1" -> (6, 1, 1)
    - "n6.1.1" -> (6, 1, 1)  (nightlies)
    - "6.1-static" -> (6, 1)

    Args:
        version_str: Version string to parse.

    Returns:
        Tuple of version components, or None if parsing fails.
    """
    if not version_str:
        return None

    version_str = version_str.lstrip("nv")
    match = re.match(r"(\d+(?:\.\d+)*)", version_str)
    if not match:
        return None
    return tuple(int(p) for p in match.group(1).split("."))


def find_tool(name: str, configured_path: str | Path | None = None) -> str:
    """Resolve the executable to run for a tool.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path or command name.

    Returns:
        Path of the executable, or the bare name when nothing was found.
    """
    if configured_path:
        configured = Path(configured_path).expanduser()
        if configured.is_file():
            return str(configured)
        resolved = shutil.which(str(configured_path))
        if resolved:
            return resolved
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(name)
    if which_result:
        return which_result
    return name


def detect_tool(
    config: ToolDetectionConfig,
    configured_path: str | Path | None = None,
    runner: Runner = run_command,
) -> ToolInfo:
    """Locate a tool and run its version check.

    Args:
        config: Tool-specific detection configuration.
        configured_path: Optional configured path to the tool.
        runner: Command runner, injectable for tests.

    Returns:
        ToolInfo with status AVAILABLE, MISSING or ERROR.
    """
    info = ToolInfo(name=config.name, detected_at=datetime.now(timezone.utc))
    path = find_tool(config.name, configured_path)
    info.path = Path(path)

    try:
        stdout, stderr, rc = runner(
            [path, config.version_flag], timeout=DETECTION_TIMEOUT
        )
    except FileNotFoundError:
        info.status = ToolStatus.MISSING
        info.status_message = f"{config.name} not found: {path}"
        return info
    except (OSError, subprocess.TimeoutExpired) as e:
        info.status = ToolStatus.ERROR
        info.status_message = f"Failed to run {config.name}: {e}"
        return info

    if rc != 0:
        info.status = ToolStatus.ERROR
        info.status_message = f"Failed to get {config.name} version: {stderr.strip()}"
        return info

    version_match = re.search(config.version_pattern, stdout)
    if version_match:
        info.version = version_match.group(1)
        info.version_tuple = parse_version_string(info.version)
        if info.version_tuple is None:
            logger.warning(
                "Could not parse %s version '%s' into comparable tuple",
                config.name,
                info.version,
            )

    info.status = ToolStatus.AVAILABLE
    return info


def detect_ffmpeg(
    configured_path: str | Path | None = None, runner: Runner = run_command
) -> ToolInfo:
    return detect_tool(FFMPEG_CONFIG, configured_path, runner)


def detect_ffprobe(
    configured_path: str | Path | None = None, runner: Runner = run_command
) -> ToolInfo:
    return detect_tool(FFPROBE_CONFIG, configured_path, runner)


def detect_all_tools(
    ffmpeg_path: str | Path | None = None,
    ffprobe_path: str | Path | None = None,
    runner: Runner = run_command,
) -> ToolRegistry:
    """Detect both tools."""
    return ToolRegistry(
        ffmpeg=detect_ffmpeg(ffmpeg_path, runner),
        ffprobe=detect_ffprobe(ffprobe_path, runner),
    )


def require_available(info: ToolInfo) -> str:
    """Return the tool path, or raise if the tool did not check out.

    Raises:
        ToolNotFoundError: If the tool is missing or failed its version check.
    """
    if not info.is_available() or info.path is None:
        logger.error("%s unavailable: %s", info.name, info.status_message)
        raise ToolNotFoundError(info.name, str(info.path) if info.path else None)
    return str(info.path)
