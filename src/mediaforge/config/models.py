"""Settings models for mediaforge.

These hold process-level settings (tool paths, execution defaults,
logging). Per-conversion settings live in mediaforge.domain.config.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class ExecutionConfig:
    """Defaults for conversion runs."""

    # Seconds between the quit request and the forced kill on cancel
    cancel_grace_seconds: float = 2.0

    # Where buffer/stream inputs are materialised (None = system temp dir)
    temp_directory: Path | None = None

    # Parallel batch width
    max_concurrent: int = 2

    def __post_init__(self) -> None:
        if self.cancel_grace_seconds < 0:
            raise ValueError(
                f"cancel_grace_seconds must be >= 0, got {self.cancel_grace_seconds}"
            )
        if self.max_concurrent < 1:
            raise ValueError(
                f"max_concurrent must be >= 1, got {self.max_concurrent}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, got {self.format}"
            )


@dataclass
class ForgeConfig:
    """Complete mediaforge configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def ffmpeg_path(self) -> str:
        return str(self.tools.ffmpeg) if self.tools.ffmpeg else "ffmpeg"

    @property
    def ffprobe_path(self) -> str:
        return str(self.tools.ffprobe) if self.tools.ffprobe else "ffprobe"
