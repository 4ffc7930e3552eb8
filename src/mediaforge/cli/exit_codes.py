"""Exit codes shared by all CLI commands."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for mediaforge CLI commands."""

    SUCCESS = 0

    # At least one conversion failed, or a probe/query failed
    GENERAL_ERROR = 1

    # Config file, environment or job file rejected
    CONFIG_ERROR = 2

    # ffmpeg or ffprobe missing or not answering -version
    TOOL_NOT_AVAILABLE = 3

    # Ctrl+C / SIGINT (128 + SIGINT)
    INTERRUPTED = 130
