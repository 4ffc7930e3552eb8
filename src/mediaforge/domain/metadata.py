"""Structured results parsed from ffmpeg and ffprobe output."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FormatMetadata:
    """Container-level data from ffprobe's format block."""

    filename: str | None = None
    format_name: str | None = None
    format_long_name: str | None = None
    start_time: str | None = None
    duration: str | None = None
    size: str | None = None
    bit_rate: str | None = None
    probe_score: int | None = None
    tags: dict[str, str] = field(default_factory=dict)


@dataclass
class StreamMetadata:
    """One entry of ffprobe's streams list.

    Stream-type-specific fields stay None when ffprobe omits them.
    """

    index: int
    codec_type: str | None = None  # video, audio, subtitle, data, attachment
    codec_name: str | None = None
    codec_long_name: str | None = None
    codec_tag: str | None = None
    # Video
    width: int | None = None
    height: int | None = None
    coded_width: int | None = None
    coded_height: int | None = None
    display_aspect_ratio: str | None = None
    pixel_format: str | None = None
    frame_rate: str | None = None
    avg_frame_rate: str | None = None
    # Audio
    sample_rate: str | None = None
    channels: int | None = None
    channel_layout: str | None = None
    bits_per_sample: int | None = None
    # Common
    duration: str | None = None
    duration_ts: int | None = None
    start_time: str | None = None
    start_pts: int | None = None
    bitrate: str | None = None
    tags: dict[str, str] = field(default_factory=dict)
    side_data_list: list[dict[str, Any]] | None = None

    @property
    def has_frame_rate(self) -> bool:
        return bool(self.frame_rate) or bool(self.avg_frame_rate)


@dataclass
class MediaMetadata:
    """Raw probe result: one format block plus all streams."""

    format: FormatMetadata
    streams: list[StreamMetadata] = field(default_factory=list)

    def streams_of_type(self, codec_type: str) -> list[StreamMetadata]:
        return [s for s in self.streams if s.codec_type == codec_type]

    @property
    def is_video(self) -> bool:
        """True if any video stream carries a frame rate."""
        return any(
            s.codec_type == "video" and s.has_frame_rate for s in self.streams
        )

    @property
    def is_image(self) -> bool:
        """True if the first video stream has no frame rate (still image)."""
        video = self.streams_of_type("video")
        return bool(video) and not video[0].has_frame_rate


@dataclass
class VideoMetadata:
    """Summary of a video file derived from MediaMetadata."""

    format: FormatMetadata
    video_streams: list[StreamMetadata]
    audio_streams: list[StreamMetadata]
    subtitle_streams: list[StreamMetadata]
    duration: float  # seconds
    width: int
    height: int
    frame_rate: float
    video_codec: str | None
    audio_codec: str | None
    bitrate: float  # kbps
    size: int  # bytes
    rotation: int | None = None


@dataclass
class ImageMetadata:
    """Summary of a still image derived from MediaMetadata."""

    format: FormatMetadata
    width: int
    height: int
    pixel_format: str
    codec: str | None
    size: int  # bytes


@dataclass
class VersionInfo:
    """Parsed `ffmpeg -version` output."""

    version: str
    copyright: str
    configuration: list[str] = field(default_factory=list)
    lib_versions: dict[str, str] = field(default_factory=dict)


@dataclass
class FormatSupport:
    """Parsed `ffmpeg -formats` output."""

    demuxing: list[str] = field(default_factory=list)
    muxing: list[str] = field(default_factory=list)


@dataclass
class CodecList:
    """Codec names grouped by stream type."""

    video: list[str] = field(default_factory=list)
    audio: list[str] = field(default_factory=list)
    subtitle: list[str] = field(default_factory=list)

    def for_type(self, stream_type: str) -> list[str]:
        return getattr(self, stream_type)


@dataclass
class CodecSupport:
    """Encoders and decoders reported by one ffmpeg build."""

    encoders: CodecList = field(default_factory=CodecList)
    decoders: CodecList = field(default_factory=CodecList)


@dataclass
class Capabilities:
    """Everything the capability queries return in one record."""

    version: VersionInfo
    formats: FormatSupport
    codecs: CodecSupport


@dataclass
class AccelerationInfo:
    """Encoders and decoders available under one acceleration class."""

    type: str
    available: bool
    encoders: list[str] = field(default_factory=list)
    decoders: list[str] = field(default_factory=list)
