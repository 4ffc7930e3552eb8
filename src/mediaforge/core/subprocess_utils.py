"""Subprocess helper for one-shot ffmpeg/ffprobe invocations.

Used for capability and probe queries, where the whole output is
collected before parsing. Long-running conversions go through the
execution engine instead.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


def run_command(
    args: list[str | Path],
    timeout: float | None = DEFAULT_TIMEOUT,
    errors: str = "replace",
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run a command to completion and capture its text output.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds, None for no limit.
        errors: Decoding error mode for stdout/stderr.
        **kwargs: Additional subprocess.run arguments.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        FileNotFoundError: If the executable does not exist.
        subprocess.TimeoutExpired: If the command exceeds timeout. The child
            is killed before the exception propagates.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )
    start_time = time.monotonic()

    try:
        result = subprocess.run(  # nosec B603 - args are tool paths and fixed flags
            str_args,
            capture_output=True,
            text=True,
            errors=errors,
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={"command": command_name, "timeout_seconds": timeout},
        )
        raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )
    return result.stdout or "", result.stderr or "", result.returncode
