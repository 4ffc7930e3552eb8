"""Conversion configuration models.

ConversionConfig is the declarative input of the command generator. All
models are frozen: the generator works on replaced copies when it needs
to substitute a hardware codec, so generating twice from the same config
always yields the same argument vector.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import IO, Union

from mediaforge.domain.enums import (
    AudioCodec,
    HardwareAcceleration,
    OutputFormat,
    VideoCodec,
)
from mediaforge.domain.filters import (
    AudioFilters,
    DownscaleOptions,
    FilterSpec,
    UpscaleOptions,
    VideoFilters,
)

# Sentinel accepted by SizeSpec for "derive from the other dimension"
AUTO = "?"

# A path, raw bytes, or a readable binary stream
InputSource = Union[str, os.PathLike, bytes, bytearray, memoryview, IO[bytes]]
# A path, or a writable binary sink receiving stdout
OutputTarget = Union[str, os.PathLike, IO[bytes]]
TimeValue = Union[int, float, str]


@dataclass(frozen=True)
class SizeSpec:
    """Explicit resolution. Either dimension may be AUTO."""

    width: int | str
    height: int | str


@dataclass(frozen=True)
class VideoConfig:
    """Video stream settings."""

    codec: VideoCodec | str | None = None
    bitrate: int | str | None = None
    quality: int | float | None = None
    fps: int | float | None = None
    size: SizeSpec | str | None = None
    aspect_ratio: str | int | float | None = None
    disabled: bool = False
    frames: int | None = None
    loop: int | None = None
    preset: str | None = None
    profile: str | None = None
    level: str | None = None
    pixel_format: str | None = None
    keyframe_interval: int | None = None
    bframes: int | None = None
    refs: int | None = None
    filters: VideoFilters | None = None
    upscale: UpscaleOptions | None = None
    downscale: DownscaleOptions | None = None


@dataclass(frozen=True)
class AudioConfig:
    """Audio stream settings."""

    codec: AudioCodec | str | None = None
    bitrate: int | str | None = None
    quality: int | float | None = None
    channels: int | None = None
    frequency: int | None = None
    disabled: bool = False
    profile: str | None = None
    volume_normalization: bool = False
    filters: AudioFilters | None = None


@dataclass(frozen=True)
class TimingConfig:
    """Seek and trim window. Only one of duration and to may be set."""

    seek: TimeValue | None = None
    duration: TimeValue | None = None
    to: TimeValue | None = None
    fast_seek: bool = False


@dataclass(frozen=True)
class HardwareAccelConfig:
    """Detailed hardware acceleration directive.

    Attributes:
        enabled: Master switch; nothing happens when False.
        type: Explicit acceleration class. None means auto-detect.
        prefer_hardware: Substitute a hardware encoder for the video codec.
        fallback_to_cpu: When False, a missing hardware mapping is an error.
    """

    enabled: bool = True
    type: HardwareAcceleration | str | None = None
    prefer_hardware: bool = True
    fallback_to_cpu: bool = True


@dataclass(frozen=True)
class AdvancedOptions:
    """Raw passthrough arguments and less common output settings."""

    input_options: tuple[str, ...] = ()
    output_options: tuple[str, ...] = ()
    threads: int | None = None
    two_pass: bool = False
    passlogfile: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    subtitles: str | None = None
    burn_subtitles: bool = False


@dataclass(frozen=True)
class ConversionConfig:
    """Complete description of one ffmpeg run."""

    input: InputSource | None = None
    output: OutputTarget | None = None
    format: OutputFormat | str | None = None
    video: VideoConfig | None = None
    audio: AudioConfig | None = None
    timing: TimingConfig | None = None
    hardware_acceleration: HardwareAccelConfig | HardwareAcceleration | str | None = (
        None
    )
    complex_filters: tuple[FilterSpec, ...] = ()
    options: AdvancedOptions | None = None
