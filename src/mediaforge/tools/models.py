"""Data models for detected external tools."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


class ToolStatus(Enum):
    """Status of an external tool."""

    AVAILABLE = "available"  # Tool found and answered -version
    MISSING = "missing"  # Tool not found in PATH or configured location
    ERROR = "error"  # Tool found but -version failed


@dataclass
class ToolInfo:
    """Detection result for ffmpeg or ffprobe."""

    name: str
    path: Path | None = None
    version: str | None = None
    version_tuple: tuple[int, ...] | None = None
    status: ToolStatus = ToolStatus.MISSING
    status_message: str | None = None
    detected_at: datetime | None = None

    def is_available(self) -> bool:
        """Return True if the tool is available and usable."""
        return self.status == ToolStatus.AVAILABLE

    def meets_version(self, min_version: tuple[int, ...]) -> bool:
        """Check if tool version meets a minimum requirement.

        Args:
            min_version: Minimum version as tuple (e.g., (6, 0) for 6.0).

        Returns:
            True if tool version >= min_version, False otherwise.
        """
        if self.version_tuple is None:
            return False
        max_len = max(len(self.version_tuple), len(min_version))
        v1 = self.version_tuple + (0,) * (max_len - len(self.version_tuple))
        v2 = min_version + (0,) * (max_len - len(min_version))
        return v1 >= v2


@dataclass(frozen=True)
class ToolDetectionConfig:
    """How to find and version-check one tool."""

    name: str
    version_flag: str = "-version"
    version_pattern: str = r"version\s+(\S+)"


@dataclass
class ToolRegistry:
    """Detection results for both tools."""

    ffmpeg: ToolInfo = field(default_factory=lambda: ToolInfo(name="ffmpeg"))
    ffprobe: ToolInfo = field(default_factory=lambda: ToolInfo(name="ffprobe"))

    def all_available(self) -> bool:
        return self.ffmpeg.is_available() and self.ffprobe.is_available()
