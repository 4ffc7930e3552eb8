"""FFmpeg stderr progress parsing.

ffmpeg reports progress on stderr as status lines such as::

    frame= 1234 fps= 30 q=28.0 size= 1024kB time=00:00:41.23 bitrate=203.5kbits/s speed=1.5x

and announces the input duration once in its header::

    Duration: 00:05:30.25, start: 0.000000, bitrate: 1234 kb/s

ProgressParser is per-run: it remembers the first duration it sees so
later progress lines can carry a percent-complete value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

PROGRESS_PATTERNS = {
    "frames": re.compile(r"frame=\s*(\d+)"),
    "fps": re.compile(r"fps=\s*([\d.]+)"),
    "kbps": re.compile(r"bitrate=\s*([\d.]+)kbits/s"),
    "size": re.compile(r"size=\s*(\d+)kB"),
    "time": re.compile(r"time=(\d{2}:\d{2}:\d{2}.\d{2})"),
    "speed": re.compile(r"speed=\s*([\d.]+)x"),
}

DURATION_PATTERN = re.compile(r"Duration:\s*(\d{2}):(\d{2}):(\d{2}\.\d{2})")
VIDEO_CODEC_PATTERN = re.compile(r"Video:\s*([^,\s]+)")
AUDIO_CODEC_PATTERN = re.compile(r"Audio:\s*([^,\s]+)")

# Advisory only: these phrases also show up in non-fatal warnings
ERROR_PHRASES = (
    "error",
    "invalid",
    "failed",
    "cannot",
    "unable to",
    "does not contain",
    "no such file",
    "permission denied",
)


@dataclass
class ProgressSnapshot:
    """One parsed progress line."""

    frames: int | None = None
    current_fps: float | None = None
    current_kbps: float | None = None
    target_size: int | None = None  # kB
    timemark: str | None = None
    percent: float = 0.0
    speed: float | None = None


def parse_timemark(timemark: str) -> float:
    """Convert HH:MM:SS.ss to seconds. Malformed input yields 0.0."""
    parts = timemark.split(":")
    if len(parts) != 3:
        return 0.0
    try:
        return int(parts[0]) * 3600 + int(parts[1]) * 60 + float(parts[2])
    except ValueError:
        return 0.0


class ProgressParser:
    """Stateful parser for one ffmpeg run's stderr."""

    def __init__(self) -> None:
        self.duration: float = 0.0

    def set_duration(self, seconds: float) -> None:
        self.duration = seconds

    def parse_duration(self, line: str) -> float | None:
        """Capture a Duration header. Only the first one sticks."""
        match = DURATION_PATTERN.search(line)
        if not match:
            return None
        seconds = (
            int(match.group(1)) * 3600
            + int(match.group(2)) * 60
            + float(match.group(3))
        )
        if self.duration <= 0:
            self.set_duration(seconds)
        return seconds

    def parse_progress(self, line: str) -> ProgressSnapshot | None:
        """Parse a status line.

        A line counts only if it has both a time= and a bitrate= token, and
        yields a snapshot only if a frame count or timemark was recovered.
        """
        if "time=" not in line or "bitrate=" not in line:
            return None

        snapshot = ProgressSnapshot()
        matches = {
            key: pattern.search(line) for key, pattern in PROGRESS_PATTERNS.items()
        }
        if matches["frames"]:
            snapshot.frames = int(matches["frames"].group(1))
        if matches["fps"]:
            snapshot.current_fps = _to_float(matches["fps"].group(1))
        if matches["kbps"]:
            snapshot.current_kbps = _to_float(matches["kbps"].group(1))
        if matches["size"]:
            snapshot.target_size = int(matches["size"].group(1))
        if matches["speed"]:
            snapshot.speed = _to_float(matches["speed"].group(1))
        if matches["time"]:
            snapshot.timemark = matches["time"].group(1)
            snapshot.percent = self.percent_for(snapshot.timemark)

        if snapshot.frames is None and snapshot.timemark is None:
            return None
        return snapshot

    def percent_for(self, timemark: str) -> float:
        """Percent complete for a timemark, 0 until a duration is known."""
        if self.duration <= 0:
            return 0.0
        percent = min(parse_timemark(timemark) / self.duration * 100, 100.0)
        return round(percent, 2)

    @staticmethod
    def is_encoding_start(line: str) -> bool:
        return "Press [q] to stop" in line or "frame=" in line or "encoder" in line

    @staticmethod
    def is_error(line: str) -> bool:
        """Case-insensitive scan for failure phrases."""
        lowered = line.lower()
        return any(phrase in lowered for phrase in ERROR_PHRASES)

    @staticmethod
    def parse_codec_info(line: str) -> dict[str, str] | None:
        """Extract codec names from a stream description line."""
        info: dict[str, str] = {}
        video = VIDEO_CODEC_PATTERN.search(line)
        if video:
            info["video"] = video.group(1)
        audio = AUDIO_CODEC_PATTERN.search(line)
        if audio:
            info["audio"] = audio.group(1)
        return info or None


def _to_float(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None
