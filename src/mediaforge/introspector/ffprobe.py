"""ffprobe invocation for media metadata."""

import json
import logging
import subprocess  # nosec B404 - only for the TimeoutExpired type
from collections.abc import Callable
from pathlib import Path

from mediaforge.command.generator import probe_args
from mediaforge.core.subprocess_utils import run_command
from mediaforge.domain.metadata import MediaMetadata
from mediaforge.errors import ExecutionFailedError, ToolNotFoundError
from mediaforge.introspector.parsers import parse_media_metadata

logger = logging.getLogger(__name__)

# Prevent hangs on corrupted files
PROBE_TIMEOUT = 60


class FFprobeIntrospector:
    """Runs ffprobe against a file and maps its JSON report.

    The runner is injectable so tests can feed canned ffprobe output.
    """

    def __init__(
        self,
        ffprobe_path: str | Path = "ffprobe",
        runner: Callable[..., tuple[str, str, int]] = run_command,
    ) -> None:
        self._ffprobe_path = str(ffprobe_path)
        self._runner = runner

    def probe(self, path: str | Path) -> MediaMetadata:
        """Probe a file.

        Args:
            path: File ffprobe should read.

        Returns:
            MediaMetadata for the file.

        Raises:
            ToolNotFoundError: If ffprobe cannot be started.
            ExecutionFailedError: If ffprobe fails, times out, or emits
                unusable JSON.
        """
        args = [self._ffprobe_path, *probe_args(str(path))]
        command = " ".join(args)

        try:
            stdout, stderr, rc = self._runner(args, timeout=PROBE_TIMEOUT)
        except FileNotFoundError as e:
            raise ToolNotFoundError("ffprobe", self._ffprobe_path) from e
        except subprocess.TimeoutExpired as e:
            raise ExecutionFailedError(
                f"ffprobe timed out for {path} after {e.timeout}s", command
            ) from e
        except OSError as e:
            raise ExecutionFailedError(
                f"Failed to start ffprobe: {e}", command
            ) from e

        if rc != 0:
            raise ExecutionFailedError(
                f"ffprobe exited with code {rc} for {path}", command, stderr
            )

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ExecutionFailedError(
                f"Invalid ffprobe output for {path}: {e}", command, stderr
            ) from e

        if not isinstance(data, dict) or "format" not in data:
            raise ExecutionFailedError(
                f"Missing 'format' in ffprobe output for {path}. "
                "File may be corrupted or not a valid media file.",
                command,
                stderr,
            )

        logger.debug(
            "Probed %s: %d streams", path, len(data.get("streams") or [])
        )
        return parse_media_metadata(data)
